from datetime import datetime

from flask import current_app

from lending.extensions import db
from lending.repositories.notification_repo import NotificationRepo
from lending.repositories.transaction_repo import TransactionRepo
from lending.services.mail_service import OVERDUE, MailService


class NotificationService:
    @staticmethod
    def notify_overdue(now: datetime | None = None) -> dict:
        """
        Mails each resident holding an overdue borrow, once per transaction.
        Only notification_logs is written; status, copy counts and the audit
        trail are left alone.
        """
        overdue = TransactionRepo.find_overdue(now or datetime.utcnow())

        sent = failed = skipped = 0
        for tx in overdue:
            if NotificationRepo.already_sent(tx.id, OVERDUE):
                skipped += 1
            elif MailService.remind_overdue(tx):
                sent += 1
            else:
                failed += 1

        db.session.commit()

        summary = {"overdue": len(overdue), "sent": sent, "failed": failed, "skipped": skipped}
        current_app.logger.info(f"[overdue_check] {summary}")
        return summary
