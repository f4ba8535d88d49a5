from datetime import datetime, timedelta

import pytest

from lending.extensions import db, mail
from lending.models.book_transaction import BookTransaction
from lending.models.notification_log import NotificationLog
from lending.models.status import TransactionStatus
from lending.models.transaction_metadata import TransactionMetadata
from lending.services.notification_service import NotificationService
from lending.tasks.overdue_check import run_overdue_check_job


def _make_overdue(tx_id, days=3):
    tx = db.session.get(BookTransaction, tx_id)
    tx.due_date = datetime.utcnow() - timedelta(days=days)
    db.session.commit()


@pytest.fixture
def overdue_loans(ctx, engine, make_book, make_resident, make_user):
    actor = make_user()
    due = datetime.utcnow() + timedelta(days=7)
    with_email = engine.borrow(make_book(title="Late"), make_resident(email="ann@example.org"), due, actor)
    without_email = engine.borrow(make_book(title="Also late"), make_resident(first_name="Bob"), due, actor)
    engine.borrow(make_book(title="On time"), make_resident(first_name="Cy", email="cy@example.org"), due, actor)
    _make_overdue(with_email.id)
    _make_overdue(without_email.id)
    return with_email.id, without_email.id


def test_overdue_reminders_are_sent_once(overdue_loans):
    with_email, without_email = overdue_loans

    with mail.record_messages() as outbox:
        summary = NotificationService.notify_overdue()

    assert summary == {"overdue": 2, "sent": 1, "failed": 1, "skipped": 0}
    assert len(outbox) == 1
    assert outbox[0].recipients == ["ann@example.org"]
    assert "'Late'" in outbox[0].body

    ok_log = NotificationLog.query.filter_by(transaction_id=with_email).one()
    assert ok_log.success is True
    failed_log = NotificationLog.query.filter_by(transaction_id=without_email).one()
    assert failed_log.success is False
    assert failed_log.error_message == "missing_email"

    with mail.record_messages() as outbox:
        summary = NotificationService.notify_overdue()

    assert summary == {"overdue": 2, "sent": 0, "failed": 0, "skipped": 2}
    assert outbox == []
    assert NotificationLog.query.count() == 2


def test_overdue_check_leaves_lending_state_alone(overdue_loans):
    audit_before = TransactionMetadata.query.count()

    NotificationService.notify_overdue()

    statuses = {tx.status for tx in BookTransaction.query.all()}
    assert statuses == {int(TransactionStatus.BORROWED)}
    assert TransactionMetadata.query.count() == audit_before


def test_scheduler_job_runs_in_its_own_context(app, overdue_loans):
    summary = run_overdue_check_job(app)
    assert summary["overdue"] == 2


def test_overdue_check_route(client, admin_headers, staff_headers, overdue_loans):
    assert client.post("/notifications/run-overdue-check", headers=staff_headers).status_code == 403

    res = client.post("/notifications/run-overdue-check", headers=admin_headers)

    assert res.status_code == 200
    assert res.get_json()["data"]["sent"] == 1


def test_scheduler_disabled_in_tests(app):
    assert "apscheduler" not in app.extensions
