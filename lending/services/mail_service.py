from __future__ import annotations

from flask import current_app
from flask_mail import Message

from lending.extensions import mail
from lending.repositories.notification_repo import NotificationRepo

OVERDUE = "overdue"


class MailService:
    @staticmethod
    def deliver(to_email: str, subject: str, body: str) -> tuple[bool, str | None]:
        """SMTP errors come back as (False, text) so one bad address does not stop a batch."""
        try:
            mail.send(Message(subject=subject, recipients=[to_email], body=body))
        except Exception as e:
            current_app.logger.warning(f"[mail] Could not send to {to_email}: {e}")
            return False, str(e)
        return True, None

    @staticmethod
    def _overdue_text(tx) -> str:
        resident = tx.resident
        name = resident.full_name if resident else "reader"
        title = tx.book.title if tx.book else f"Book #{tx.book_id}"
        return (
            f"Hello {name},\n\n"
            f"'{title}' was due on {tx.due_date:%Y-%m-%d}.\n"
            "Please return it to the library as soon as possible.\n"
        )

    @staticmethod
    def remind_overdue(tx) -> bool:
        """
        Mails the borrower of an overdue transaction and records the attempt.
        The log row is left in the session; the overdue run commits once.
        """
        to_email = tx.resident.email if tx.resident else None
        body = MailService._overdue_text(tx)

        if not to_email:
            NotificationRepo.add(tx.id, OVERDUE, None, body, success=False, error="missing_email")
            return False

        ok, err = MailService.deliver(to_email, "Library: overdue book", body)
        NotificationRepo.add(tx.id, OVERDUE, to_email, body, success=ok, error=err)
        return ok
