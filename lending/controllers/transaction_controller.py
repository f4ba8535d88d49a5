from datetime import datetime, timedelta

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from lending.errors import InvalidInput, LendingError, NotFound
from lending.models.status import TransactionStatus
from lending.models.user import ADMIN_ROLES, STAFF_ROLES
from lending.repositories.transaction_repo import TransactionRepo
from lending.services.reporting_service import ReportingService
from lending.utils.decorators import current_actor_id, role_required
from lending.utils.params import optional_datetime, optional_int, page_args, required_int
from lending.utils.serializers import (
    book_to_dict,
    page_to_dict,
    resident_to_dict,
    transaction_to_dict,
)

transaction_bp = Blueprint("transactions", __name__)


def _engine():
    return current_app.extensions["transaction_engine"]


def _json_error(e: LendingError):
    return jsonify(e.to_dict()), e.http_status


def _ok(data, message=None):
    body = {"success": True, "data": data}
    if message:
        body["message"] = message
    return jsonify(body)


# -----------------------------
# State-changing operations
# -----------------------------
@transaction_bp.post("/borrow")
@role_required(*STAFF_ROLES)
def borrow_book():
    data = request.get_json(silent=True) or {}
    try:
        book_id = required_int(data, "book_id")
        resident_id = required_int(data, "resident_id")

        due_date = optional_datetime(data, "due_date")
        if due_date is None and data.get("days") is not None:
            days = required_int(data, "days")
            if days < 1:
                raise InvalidInput("days must be >= 1")
            try:
                due_date = datetime.utcnow() + timedelta(days=days)
            except OverflowError:
                raise InvalidInput("days is too large") from None

        tx = _engine().borrow(book_id, resident_id, due_date, current_actor_id(), notes=data.get("notes"))
        return _ok(transaction_to_dict(tx), "Book borrowed successfully")
    except LendingError as e:
        return _json_error(e)


@transaction_bp.post("/return/<int:transaction_id>")
@role_required(*STAFF_ROLES)
def return_book(transaction_id: int):
    try:
        tx = _engine().return_book(transaction_id, current_actor_id())
        return _ok(transaction_to_dict(tx), "Book returned successfully")
    except LendingError as e:
        return _json_error(e)


@transaction_bp.post("/lost/<int:transaction_id>")
@role_required(*ADMIN_ROLES)
def report_lost(transaction_id: int):
    data = request.get_json(silent=True) or {}
    try:
        note = data.get("declaration_note") or data.get("declaration_file")
        tx = _engine().report_lost(transaction_id, current_actor_id(), note)
        return _ok(transaction_to_dict(tx), "Book marked as lost")
    except LendingError as e:
        return _json_error(e)


@transaction_bp.post("/extend/<int:transaction_id>")
@role_required(*STAFF_ROLES)
def extend_borrow(transaction_id: int):
    data = request.get_json(silent=True) or {}
    try:
        extra_days = required_int(data, "extra_days")
        tx = _engine().extend(transaction_id, extra_days, current_actor_id())
        return _ok(transaction_to_dict(tx), "Borrow extended")
    except LendingError as e:
        return _json_error(e)


# -----------------------------
# Lookups
# -----------------------------
@transaction_bp.get("/<int:transaction_id>")
@jwt_required()
def get_transaction(transaction_id: int):
    tx = TransactionRepo.get(transaction_id)
    if not tx:
        return _json_error(NotFound("Transaction not found"))
    return _ok(transaction_to_dict(tx, include_audit=True))


@transaction_bp.get("/")
@jwt_required()
def list_transactions():
    try:
        page, limit = page_args()
        status = request.args.get("status")
        if status:
            try:
                status = TransactionStatus.parse(status)
            except ValueError:
                raise InvalidInput(f"Unknown status: {status}") from None
        pagination = TransactionRepo.page(
            page,
            limit,
            resident_id=optional_int(request.args, "resident_id"),
            book_id=optional_int(request.args, "book_id"),
            status=status or None,
        )
        return _ok(page_to_dict(pagination, transaction_to_dict))
    except LendingError as e:
        return _json_error(e)


@transaction_bp.get("/residents/<int:resident_id>/history")
@jwt_required()
def resident_history(resident_id: int):
    try:
        history = ReportingService.borrow_history(resident_id)
    except LendingError as e:
        return _json_error(e)
    return jsonify({
        "success": True,
        "count": len(history),
        "data": [transaction_to_dict(tx, include_audit=True) for tx in history]
    })


# -----------------------------
# Stats
# -----------------------------
@transaction_bp.get("/stats/most-borrowed")
@jwt_required()
def most_borrowed():
    rows = ReportingService.most_borrowed(current_app.config["STATS_LIMIT"])
    return _ok([{"book": book_to_dict(b), "borrow_count": int(n)} for b, n in rows])


@transaction_bp.get("/stats/most-active-residents")
@jwt_required()
def most_active_residents():
    rows = ReportingService.most_active_residents(current_app.config["STATS_LIMIT"])
    return _ok([{"resident": resident_to_dict(r), "transaction_count": int(n)} for r, n in rows])


@transaction_bp.get("/stats/last-borrowed")
@jwt_required()
def last_borrowed():
    rows = ReportingService.last_borrowed(current_app.config["STATS_LIMIT"])
    return _ok([
        {
            "book": book_to_dict(tx.book),
            "transaction_id": tx.id,
            "resident_id": tx.resident_id,
            "borrowed_at": tx.borrowed_at.isoformat(),
        } for tx in rows
    ])


@transaction_bp.get("/stats/active-borrows")
@role_required(*STAFF_ROLES)
def active_borrows():
    rows = ReportingService.active_borrows()
    return jsonify({"success": True, "count": len(rows), "data": [transaction_to_dict(tx) for tx in rows]})


@transaction_bp.get("/stats/available-books")
@jwt_required()
def available_books():
    return _ok([book_to_dict(b) for b in ReportingService.available_books()])


@transaction_bp.get("/stats/active-residents")
@jwt_required()
def active_residents():
    try:
        days = optional_int(request.args, "days")
        if days is None:
            days = current_app.config["ACTIVE_RESIDENT_WINDOW_DAYS"]
        residents = ReportingService.active_residents(days)
    except LendingError as e:
        return _json_error(e)
    return jsonify({
        "success": True,
        "active_count": len(residents),
        "data": [resident_to_dict(r) for r in residents]
    })
