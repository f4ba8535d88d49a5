from datetime import datetime

from lending.extensions import db
from lending.models.status import AuditAction
from lending.models.transaction_metadata import TransactionMetadata


class AuditRepo:
    @staticmethod
    def add(entry: TransactionMetadata):
        db.session.add(entry)
        return entry

    @staticmethod
    def list_for_transaction(transaction_id: int):
        return (
            TransactionMetadata.query
            .filter_by(transaction_id=transaction_id)
            .order_by(TransactionMetadata.action_at.desc(), TransactionMetadata.id.desc())
            .all()
        )

    @staticmethod
    def borrow_entries_since(since: datetime):
        return (
            TransactionMetadata.query
            .filter(
                TransactionMetadata.action == int(AuditAction.BORROW),
                TransactionMetadata.action_at >= since
            )
            .order_by(TransactionMetadata.action_at.desc(), TransactionMetadata.id.desc())
            .all()
        )
