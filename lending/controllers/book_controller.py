from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from lending.errors import LendingError
from lending.models.user import STAFF_ROLES
from lending.services.book_service import BookService
from lending.utils.decorators import role_required
from lending.utils.params import page_args
from lending.utils.serializers import book_to_dict, page_to_dict

book_bp = Blueprint("books", __name__)


@book_bp.get("/")
@jwt_required()
def list_books():
    try:
        page, limit = page_args()
    except LendingError as e:
        return jsonify(e.to_dict()), e.http_status
    return jsonify({"success": True, "data": page_to_dict(BookService.list_books(page, limit), book_to_dict)})


@book_bp.get("/<int:book_id>")
@jwt_required()
def get_book(book_id: int):
    try:
        return jsonify({"success": True, "data": book_to_dict(BookService.get_book(book_id))})
    except LendingError as e:
        return jsonify(e.to_dict()), e.http_status


@book_bp.post("/")
@role_required(*STAFF_ROLES)
def create_book():
    data = request.get_json(silent=True) or {}
    try:
        b = BookService.create_book(data)
        return jsonify({"success": True, "data": book_to_dict(b)}), 201
    except LendingError as e:
        return jsonify(e.to_dict()), e.http_status


@book_bp.put("/<int:book_id>")
@role_required(*STAFF_ROLES)
def update_book(book_id: int):
    data = request.get_json(silent=True) or {}
    try:
        b = BookService.update_book(book_id, data)
        return jsonify({"success": True, "data": book_to_dict(b)})
    except LendingError as e:
        return jsonify(e.to_dict()), e.http_status


@book_bp.delete("/<int:book_id>")
@role_required(*STAFF_ROLES)
def delete_book(book_id: int):
    try:
        BookService.delete_book(book_id)
        return jsonify({"success": True, "message": "Book deleted successfully"})
    except LendingError as e:
        return jsonify(e.to_dict()), e.http_status
