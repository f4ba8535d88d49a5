from datetime import datetime

from sqlalchemy import func

from lending.extensions import db
from lending.models.book import Book
from lending.models.book_transaction import BookTransaction
from lending.models.resident import Resident
from lending.models.status import TransactionStatus


class TransactionRepo:
    @staticmethod
    def get(transaction_id: int):
        return db.session.get(BookTransaction, transaction_id)

    @staticmethod
    def get_for_update(transaction_id: int):
        return db.session.get(BookTransaction, transaction_id, with_for_update=True, populate_existing=True)

    @staticmethod
    def add(tx: BookTransaction):
        db.session.add(tx)
        db.session.flush()
        return tx

    @staticmethod
    def count_active_for_resident(resident_id: int) -> int:
        return BookTransaction.query.filter_by(
            resident_id=resident_id, status=int(TransactionStatus.BORROWED)
        ).count()

    @staticmethod
    def has_active_borrow(resident_id: int, book_id: int) -> bool:
        return BookTransaction.query.filter_by(
            resident_id=resident_id, book_id=book_id, status=int(TransactionStatus.BORROWED)
        ).first() is not None

    @staticmethod
    def page(page: int, per_page: int, resident_id=None, book_id=None, status=None):
        query = db.select(BookTransaction)
        if resident_id is not None:
            query = query.where(BookTransaction.resident_id == resident_id)
        if book_id is not None:
            query = query.where(BookTransaction.book_id == book_id)
        if status is not None:
            query = query.where(BookTransaction.status == int(status))
        query = query.order_by(BookTransaction.id.desc())
        return db.paginate(query, page=page, per_page=per_page, error_out=False)

    @staticmethod
    def list_by_resident(resident_id: int):
        return (
            BookTransaction.query
            .filter_by(resident_id=resident_id)
            .order_by(BookTransaction.borrowed_at.desc(), BookTransaction.id.desc())
            .all()
        )

    @staticmethod
    def list_active():
        return (
            BookTransaction.query
            .filter_by(status=int(TransactionStatus.BORROWED))
            .order_by(BookTransaction.due_date.asc(), BookTransaction.id.asc())
            .all()
        )

    @staticmethod
    def find_overdue(now: datetime):
        return BookTransaction.query.filter(
            BookTransaction.status == int(TransactionStatus.BORROWED),
            BookTransaction.due_date < now
        ).order_by(BookTransaction.due_date.asc()).all()

    @staticmethod
    def stream_recent():
        """Newest first, fetched in batches. Caller must close() the result."""
        query = (
            db.select(BookTransaction)
            .order_by(BookTransaction.borrowed_at.desc(), BookTransaction.id.desc())
            .execution_options(yield_per=100)
        )
        return db.session.execute(query)

    @staticmethod
    def _counts_by(column):
        # SQL Server rejects selecting entity columns that are not in GROUP BY
        return (
            db.select(column.label("owner_id"), func.count(BookTransaction.id).label("n"))
            .group_by(column)
            .subquery()
        )

    @staticmethod
    def borrow_counts(limit: int):
        """(Book, count) pairs across every transaction status."""
        counts = TransactionRepo._counts_by(BookTransaction.book_id)
        return (
            db.session.query(Book, counts.c.n)
            .join(counts, counts.c.owner_id == Book.id)
            .order_by(counts.c.n.desc(), Book.id.asc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def resident_counts(limit: int):
        """(Resident, count) pairs across every transaction status."""
        counts = TransactionRepo._counts_by(BookTransaction.resident_id)
        return (
            db.session.query(Resident, counts.c.n)
            .join(counts, counts.c.owner_id == Resident.id)
            .order_by(counts.c.n.desc(), Resident.id.asc())
            .limit(limit)
            .all()
        )
