from datetime import datetime, timedelta

from lending.errors import InvalidInput, NotFound
from lending.repositories.audit_repo import AuditRepo
from lending.repositories.book_repo import BookRepo
from lending.repositories.resident_repo import ResidentRepo
from lending.repositories.transaction_repo import TransactionRepo


class ReportingService:
    """Read-only views over transactions, books and the audit trail."""

    @staticmethod
    def most_borrowed(limit: int = 10):
        """[(Book, borrow_count)], count desc then book id asc. Every status counts."""
        return TransactionRepo.borrow_counts(limit)

    @staticmethod
    def most_active_residents(limit: int = 10):
        """[(Resident, transaction_count)], count desc then resident id asc."""
        return TransactionRepo.resident_counts(limit)

    @staticmethod
    def last_borrowed(limit: int = 10):
        """Most recently borrowed distinct books, first occurrence wins."""
        books = {}
        result = TransactionRepo.stream_recent()
        try:
            for tx in result.scalars():
                if tx.book_id not in books:
                    books[tx.book_id] = tx
                if len(books) >= limit:
                    break
        finally:
            result.close()
        return list(books.values())

    @staticmethod
    def active_borrows():
        return TransactionRepo.list_active()

    @staticmethod
    def borrow_history(resident_id: int):
        if not ResidentRepo.get(resident_id):
            raise NotFound(f"Resident {resident_id} not found")
        return TransactionRepo.list_by_resident(resident_id)

    @staticmethod
    def active_residents(window_days: int = 30, now: datetime | None = None):
        if isinstance(window_days, bool) or not isinstance(window_days, int) or window_days < 1:
            raise InvalidInput("days must be >= 1")
        since = (now or datetime.utcnow()) - timedelta(days=window_days)

        residents = {}
        for entry in AuditRepo.borrow_entries_since(since):
            resident = entry.transaction.resident
            if resident is not None and resident.id not in residents:
                residents[resident.id] = resident
        return list(residents.values())

    @staticmethod
    def available_books():
        return BookRepo.list_available()
