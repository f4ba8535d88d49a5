from contextlib import contextmanager
from datetime import datetime, timedelta

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from lending.errors import (
    BorrowLimitExceeded,
    DuplicateBorrow,
    InvalidInput,
    InvalidTransition,
    LendingError,
    NotFound,
    StoreFailure,
)
from lending.extensions import db
from lending.models.book_transaction import BookTransaction
from lending.models.status import AuditAction, TransactionStatus
from lending.repositories.book_repo import BookRepo
from lending.repositories.resident_repo import ResidentRepo
from lending.repositories.transaction_repo import TransactionRepo
from lending.services.audit_trail import AuditTrail
from lending.services.copy_ledger import CopyLedger


class TransactionEngine:
    """
    Borrow / return / lost / extend workflow for BookTransaction rows.

    Each public method is one database transaction: the precondition reads
    take row locks, then the status change, the copy ledger update and the
    audit entry are committed together. Any rejection or store error rolls
    the whole unit back. Nothing is retried here.
    """

    def __init__(self, max_borrowed_books: int = 2, default_loan_days: int = 14):
        if max_borrowed_books < 1:
            raise ValueError("max_borrowed_books must be >= 1")
        if default_loan_days < 1:
            raise ValueError("default_loan_days must be >= 1")
        self.max_borrowed_books = max_borrowed_books
        self.default_loan_days = default_loan_days

    @contextmanager
    def _unit(self, operation: str):
        try:
            yield
            db.session.commit()
        except LendingError as e:
            db.session.rollback()
            current_app.logger.warning(f"[transaction_engine] {operation} rejected: {e.kind} ({e.message})")
            raise
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.exception(f"[transaction_engine] {operation} store failure: {e}")
            raise StoreFailure(f"{operation} could not be stored, please retry") from e
        except Exception:
            db.session.rollback()
            current_app.logger.exception(f"[transaction_engine] {operation} failed unexpectedly")
            raise

    @staticmethod
    def _load_for_update(transaction_id: int) -> BookTransaction:
        tx = TransactionRepo.get_for_update(transaction_id)
        if not tx:
            raise NotFound(f"Transaction {transaction_id} not found")
        return tx

    @staticmethod
    def _move(tx: BookTransaction, target: TransactionStatus) -> None:
        current = TransactionStatus(tx.status)
        if not current.can_become(target):
            raise InvalidTransition(
                f"Transaction {tx.id} is {current.name.lower()} and cannot become {target.name.lower()}"
            )
        tx.status = int(target)

    def borrow(self, book_id: int, resident_id: int, due_date: datetime | None, actor_id: int | None,
               notes: str | None = None) -> BookTransaction:
        now = datetime.utcnow()
        if due_date is None:
            due_date = now + timedelta(days=self.default_loan_days)
        if not isinstance(due_date, datetime):
            raise InvalidInput("due_date must be a datetime")
        if due_date <= now:
            raise InvalidInput("due_date must be in the future")

        with self._unit("borrow"):
            if not BookRepo.get_for_update(book_id):
                raise NotFound(f"Book {book_id} not found")
            # locking the resident serializes concurrent borrows for the same borrower
            if not ResidentRepo.get_for_update(resident_id):
                raise NotFound(f"Resident {resident_id} not found")

            if TransactionRepo.count_active_for_resident(resident_id) >= self.max_borrowed_books:
                raise BorrowLimitExceeded(f"Resident can borrow max {self.max_borrowed_books} books")
            if TransactionRepo.has_active_borrow(resident_id, book_id):
                raise DuplicateBorrow("Resident can't borrow the same book twice")

            CopyLedger.decrement(book_id)

            tx = TransactionRepo.add(BookTransaction(
                book_id=book_id,
                resident_id=resident_id,
                status=int(TransactionStatus.BORROWED),
                borrowed_at=now,
                due_date=due_date,
                notes=notes,
            ))
            AuditTrail.append(tx, AuditAction.BORROW, actor_id, notes)

        current_app.logger.info(
            f"[transaction_engine] borrow tx={tx.id} book={book_id} resident={resident_id} actor={actor_id}"
        )
        return tx

    def return_book(self, transaction_id: int, actor_id: int | None) -> BookTransaction:
        with self._unit("return"):
            tx = self._load_for_update(transaction_id)
            self._move(tx, TransactionStatus.RETURNED)
            tx.returned_date = datetime.utcnow()

            CopyLedger.increment(tx.book_id)
            AuditTrail.append(tx, AuditAction.RETURN, actor_id)

        current_app.logger.info(f"[transaction_engine] return tx={transaction_id} actor={actor_id}")
        return tx

    def report_lost(self, transaction_id: int, actor_id: int | None,
                    declaration_note: str | None = None) -> BookTransaction:
        with self._unit("lost"):
            tx = self._load_for_update(transaction_id)
            self._move(tx, TransactionStatus.LOST)
            tx.handled_by = actor_id

            # the copy is out of circulation for good; the ledger is left as is
            AuditTrail.append(tx, AuditAction.LOST, actor_id, declaration_note)

        current_app.logger.info(f"[transaction_engine] lost tx={transaction_id} actor={actor_id}")
        return tx

    def extend(self, transaction_id: int, extra_days: int, actor_id: int | None) -> BookTransaction:
        if isinstance(extra_days, bool) or not isinstance(extra_days, int) or extra_days < 1:
            raise InvalidInput("extra_days must be >= 1")

        with self._unit("extend"):
            tx = self._load_for_update(transaction_id)
            current = TransactionStatus(tx.status)
            if current is not TransactionStatus.BORROWED:
                raise InvalidTransition(f"Transaction {tx.id} is {current.name.lower()} and cannot be extended")

            old_due = tx.due_date
            try:
                tx.due_date = old_due + timedelta(days=extra_days)
            except OverflowError:
                raise InvalidInput("extra_days is too large") from None
            AuditTrail.append(
                tx,
                AuditAction.EXTEND,
                actor_id,
                f"Extended by {extra_days} days (due {old_due.isoformat()} -> {tx.due_date.isoformat()})",
            )

        current_app.logger.info(f"[transaction_engine] extend tx={transaction_id} days={extra_days} actor={actor_id}")
        return tx
