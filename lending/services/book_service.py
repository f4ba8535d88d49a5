from flask import current_app

from lending.errors import InvalidInput, NotFound, RecordInUse
from lending.models.book import Book
from lending.repositories.book_repo import BookRepo
from lending.repositories.specialty_repo import SpecialtyRepo
from lending.utils.params import optional_int


class BookService:
    @staticmethod
    def list_books(page: int, per_page: int):
        return BookRepo.page(page, per_page)

    @staticmethod
    def get_book(book_id: int):
        book = BookRepo.get(book_id)
        if not book:
            raise NotFound("Book not found")
        return book

    @staticmethod
    def _check_specialty(specialty_id):
        if specialty_id is not None and not SpecialtyRepo.get(specialty_id):
            raise NotFound(f"Specialty {specialty_id} not found")

    @staticmethod
    def create_book(data: dict):
        title = (data.get("title") or "").strip()
        author = (data.get("author") or "").strip()
        if not title or not author:
            raise InvalidInput("Title and author are required")

        isbn = (data.get("isbn") or "").strip() or None
        if isbn and BookRepo.get_by_isbn(isbn):
            raise InvalidInput(f"ISBN {isbn} already exists")

        copies = optional_int(data, "available_copies")
        if copies is None:
            copies = 1
        if copies < 0:
            raise InvalidInput("available_copies must be >= 0")

        specialty_id = optional_int(data, "specialty_id")
        BookService._check_specialty(specialty_id)

        book = Book(
            title=title,
            author=author,
            isbn=isbn,
            published_year=optional_int(data, "published_year"),
            description=data.get("description"),
            image_url=data.get("image_url"),
            specialty_id=specialty_id,
            available_copies=copies,
        )
        return BookRepo.create(book)

    @staticmethod
    def update_book(book_id: int, data: dict):
        book = BookService.get_book(book_id)
        if "available_copies" in data:
            raise InvalidInput("available_copies is managed by borrow/return operations")

        for k in ["title", "author", "description", "image_url"]:
            if k in data and data[k] is not None:
                setattr(book, k, str(data[k]).strip())
        if not book.title:
            raise InvalidInput("Title cannot be empty")

        if "isbn" in data:
            isbn = (data.get("isbn") or "").strip() or None
            other = BookRepo.get_by_isbn(isbn) if isbn else None
            if other and other.id != book.id:
                raise InvalidInput(f"ISBN {isbn} already exists")
            book.isbn = isbn
        if "published_year" in data:
            book.published_year = optional_int(data, "published_year")
        if "specialty_id" in data:
            specialty_id = optional_int(data, "specialty_id")
            BookService._check_specialty(specialty_id)
            book.specialty_id = specialty_id

        BookRepo.update()
        return book

    @staticmethod
    def delete_book(book_id: int):
        book = BookService.get_book(book_id)
        # transactions and their audit history keep pointing at the book
        if BookRepo.has_transactions(book_id):
            raise RecordInUse("Book has borrow transactions and cannot be deleted")
        BookRepo.delete(book)
        current_app.logger.info(f"[catalog] book {book_id} deleted")
