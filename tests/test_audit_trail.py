from datetime import datetime, timedelta

import pytest

from lending.errors import ImmutableRecord
from lending.extensions import db
from lending.models.status import AuditAction
from lending.models.transaction_metadata import TransactionMetadata
from lending.services.audit_trail import AuditTrail


@pytest.fixture
def borrowed(ctx, engine, make_book, make_resident, make_user):
    actor = make_user()
    tx = engine.borrow(make_book(), make_resident(), datetime.utcnow() + timedelta(days=7), actor)
    return tx, actor


def test_entries_cannot_be_edited(borrowed):
    tx, _ = borrowed
    entry = TransactionMetadata.query.filter_by(transaction_id=tx.id).one()

    entry.notes = "rewritten history"
    with pytest.raises(ImmutableRecord):
        db.session.commit()
    db.session.rollback()

    assert TransactionMetadata.query.filter_by(transaction_id=tx.id).one().notes is None


def test_entries_cannot_be_deleted(borrowed):
    tx, _ = borrowed
    entry = TransactionMetadata.query.filter_by(transaction_id=tx.id).one()

    db.session.delete(entry)
    with pytest.raises(ImmutableRecord):
        db.session.commit()
    db.session.rollback()

    assert TransactionMetadata.query.filter_by(transaction_id=tx.id).count() == 1


def test_entries_for_lists_newest_first(borrowed, engine):
    tx, actor = borrowed
    engine.extend(tx.id, 2, actor)
    engine.return_book(tx.id, actor)

    entries = AuditTrail.entries_for(tx.id)

    assert [AuditAction(e.action) for e in entries] == [AuditAction.RETURN, AuditAction.EXTEND, AuditAction.BORROW]
    assert all(e.action_by == actor for e in entries)
    assert [e.id for e in entries] == [e.id for e in db.session.get(type(tx), tx.id).audit_entries]
