from datetime import datetime

from lending.extensions import db
from lending.models.notification_log import NotificationLog


class NotificationRepo:
    @staticmethod
    def add(transaction_id: int, notif_type: str, email, message: str, success: bool, error=None):
        row = NotificationLog(
            transaction_id=transaction_id,
            type=notif_type,
            email=email,
            message=message,
            success=bool(success),
            error_message=error,
            sent_at=datetime.utcnow(),
        )
        db.session.add(row)
        return row

    @staticmethod
    def already_sent(transaction_id: int, notif_type: str = "overdue") -> bool:
        # one attempt per transaction and type, successful or not
        return NotificationLog.query.filter_by(transaction_id=transaction_id, type=notif_type).first() is not None

    @staticmethod
    def list_for(transaction_id: int):
        return NotificationLog.query.filter_by(transaction_id=transaction_id).order_by(NotificationLog.id.asc()).all()
