from datetime import datetime
from lending.extensions import db
from lending.models.status import TransactionStatus

_BORROWED = int(TransactionStatus.BORROWED)


class BookTransaction(db.Model):
    __tablename__ = "book_transactions"
    __table_args__ = (
        # at most one open borrow per (book, resident)
        db.Index(
            "uq_book_transactions_active_borrow",
            "book_id",
            "resident_id",
            unique=True,
            sqlite_where=db.text(f"status = {_BORROWED}"),
            postgresql_where=db.text(f"status = {_BORROWED}"),
            mssql_where=db.text(f"status = {_BORROWED}"),
        ),
    )

    id = db.Column(db.Integer, primary_key=True)

    book_id = db.Column(db.Integer, db.ForeignKey("books.id"), nullable=False, index=True)
    resident_id = db.Column(db.Integer, db.ForeignKey("residents.id"), nullable=False, index=True)

    status = db.Column(db.Integer, nullable=False, default=_BORROWED, index=True)  # TransactionStatus

    borrowed_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    due_date = db.Column(db.DateTime, nullable=False)
    returned_date = db.Column(db.DateTime, nullable=True)

    handled_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    notes = db.Column(db.Text, nullable=True)

    book = db.relationship("Book", backref=db.backref("transactions", lazy="dynamic"))
    resident = db.relationship("Resident", backref=db.backref("transactions", lazy="dynamic"))
    handler = db.relationship("User", foreign_keys=[handled_by])

    @property
    def status_enum(self) -> TransactionStatus:
        return TransactionStatus(self.status)
