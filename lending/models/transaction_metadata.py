from datetime import datetime

from sqlalchemy import event
from sqlalchemy.orm import object_session

from lending.errors import ImmutableRecord
from lending.extensions import db


class TransactionMetadata(db.Model):
    """
    One audit entry per state-changing action on a BookTransaction.
    Rows are insert-only: updates and deletes are rejected at flush time.
    """

    __tablename__ = "transaction_metadata"

    id = db.Column(db.Integer, primary_key=True)

    transaction_id = db.Column(db.Integer, db.ForeignKey("book_transactions.id"), nullable=False, index=True)
    action = db.Column(db.Integer, nullable=False, index=True)  # AuditAction
    action_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True, index=True)
    action_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, index=True)
    notes = db.Column(db.Text, nullable=True)

    transaction = db.relationship(
        "BookTransaction",
        backref=db.backref("audit_entries", order_by=[action_at.desc(), id.desc()]),
    )
    actor = db.relationship("User", backref="performed_actions")


@event.listens_for(TransactionMetadata, "before_update")
def _reject_audit_update(mapper, connection, target):
    session = object_session(target)
    if session is not None and not session.is_modified(target, include_collections=False):
        return
    raise ImmutableRecord(f"Audit entry {target.id} cannot be modified")


@event.listens_for(TransactionMetadata, "before_delete")
def _reject_audit_delete(mapper, connection, target):
    raise ImmutableRecord(f"Audit entry {target.id} cannot be deleted")
