from sqlalchemy.orm.util import identity_key

from lending.errors import InsufficientCopies
from lending.extensions import db
from lending.models.book import Book

_books = Book.__table__


class CopyLedger:
    """
    Available-copy bookkeeping for book titles.

    Both operations run inside the caller's database transaction and never
    commit; the transaction engine is the only caller.
    """

    @staticmethod
    def decrement(book_id: int) -> None:
        # the guard in WHERE keeps two racing borrows from both taking the last copy
        result = db.session.execute(
            _books.update()
            .where(_books.c.id == book_id, _books.c.available_copies > 0)
            .values(available_copies=_books.c.available_copies - 1)
        )
        if result.rowcount != 1:
            raise InsufficientCopies(f"No available copies of book {book_id}")
        CopyLedger._expire(book_id)

    @staticmethod
    def increment(book_id: int) -> None:
        db.session.execute(
            _books.update()
            .where(_books.c.id == book_id)
            .values(available_copies=_books.c.available_copies + 1)
        )
        CopyLedger._expire(book_id)

    @staticmethod
    def _expire(book_id: int) -> None:
        book = db.session.identity_map.get(identity_key(Book, book_id))
        if book is not None:
            db.session.expire(book, ["available_copies"])
