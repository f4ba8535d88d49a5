from lending.models.status import AuditAction, TransactionStatus


def _iso(value):
    return value.isoformat() if value else None


def book_to_dict(b):
    return {
        "id": b.id,
        "title": b.title,
        "author": b.author,
        "isbn": b.isbn,
        "published_year": b.published_year,
        "description": b.description,
        "image_url": b.image_url,
        "specialty_id": b.specialty_id,
        "specialty": b.specialty.name if b.specialty else None,
        "available_copies": b.available_copies,
    }


def resident_to_dict(r):
    return {
        "id": r.id,
        "first_name": r.first_name,
        "last_name": r.last_name,
        "email": r.email,
        "phone": r.phone,
        "grade": r.grade,
        "specialty_id": r.specialty_id,
        "user_id": r.user_id,
    }


def audit_entry_to_dict(e):
    return {
        "id": e.id,
        "transaction_id": e.transaction_id,
        "action": AuditAction(e.action).name.lower(),
        "action_code": e.action,
        "action_by": e.action_by,
        "action_at": _iso(e.action_at),
        "notes": e.notes,
    }


def transaction_to_dict(tx, include_audit: bool = False):
    data = {
        "id": tx.id,
        "book_id": tx.book_id,
        "book_title": tx.book.title if tx.book else None,
        "resident_id": tx.resident_id,
        "resident_name": tx.resident.full_name if tx.resident else None,
        "status": TransactionStatus(tx.status).name.lower(),
        "status_code": tx.status,
        "borrowed_at": _iso(tx.borrowed_at),
        "due_date": _iso(tx.due_date),
        "returned_date": _iso(tx.returned_date),
        "handled_by": tx.handled_by,
        "notes": tx.notes,
    }
    if include_audit:
        data["audit"] = [audit_entry_to_dict(e) for e in tx.audit_entries]
    return data


def page_to_dict(pagination, serializer):
    return {
        "page": pagination.page,
        "limit": pagination.per_page,
        "total_items": pagination.total,
        "total_pages": pagination.pages,
        "items": [serializer(x) for x in pagination.items],
    }
