from lending.extensions import db
from lending.models.book import Book
from lending.models.book_transaction import BookTransaction


class BookRepo:
    @staticmethod
    def page(page: int, per_page: int):
        return db.paginate(db.select(Book).order_by(Book.id.desc()), page=page, per_page=per_page, error_out=False)

    @staticmethod
    def get(book_id: int):
        return db.session.get(Book, book_id)

    @staticmethod
    def get_for_update(book_id: int):
        return db.session.get(Book, book_id, with_for_update=True, populate_existing=True)

    @staticmethod
    def get_by_isbn(isbn: str):
        return Book.query.filter_by(isbn=isbn).first()

    @staticmethod
    def list_available():
        return Book.query.filter(Book.available_copies > 0).order_by(Book.title.asc()).all()

    @staticmethod
    def has_transactions(book_id: int) -> bool:
        return db.session.query(BookTransaction.id).filter_by(book_id=book_id).first() is not None

    @staticmethod
    def create(book: Book):
        db.session.add(book)
        db.session.commit()
        return book

    @staticmethod
    def update():
        db.session.commit()

    @staticmethod
    def delete(book: Book):
        db.session.delete(book)
        db.session.commit()
