from datetime import datetime

from lending.models.status import AuditAction
from lending.models.transaction_metadata import TransactionMetadata
from lending.repositories.audit_repo import AuditRepo


class AuditTrail:
    @staticmethod
    def append(transaction, action: AuditAction, actor_id: int | None, notes: str | None = None) -> TransactionMetadata:
        """
        Adds one entry to the current unit of work. The engine commits it
        together with the state change it describes.
        """
        entry = TransactionMetadata(
            transaction_id=transaction.id,
            action=int(action),
            action_by=actor_id,
            action_at=datetime.utcnow(),
            notes=notes,
        )
        return AuditRepo.add(entry)

    @staticmethod
    def entries_for(transaction_id: int):
        return AuditRepo.list_for_transaction(transaction_id)
