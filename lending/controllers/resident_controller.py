from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from lending.errors import LendingError
from lending.models.user import STAFF_ROLES
from lending.services.resident_service import ResidentService
from lending.utils.decorators import role_required
from lending.utils.params import page_args
from lending.utils.serializers import page_to_dict, resident_to_dict

resident_bp = Blueprint("residents", __name__)


@resident_bp.get("/")
@jwt_required()
def list_residents():
    try:
        page, limit = page_args()
    except LendingError as e:
        return jsonify(e.to_dict()), e.http_status
    pagination = ResidentService.list_residents(page, limit)
    return jsonify({"success": True, "data": page_to_dict(pagination, resident_to_dict)})


@resident_bp.get("/<int:resident_id>")
@jwt_required()
def get_resident(resident_id: int):
    try:
        return jsonify({"success": True, "data": resident_to_dict(ResidentService.get_resident(resident_id))})
    except LendingError as e:
        return jsonify(e.to_dict()), e.http_status


@resident_bp.post("/")
@role_required(*STAFF_ROLES)
def create_resident():
    data = request.get_json(silent=True) or {}
    try:
        r = ResidentService.create_resident(data)
        return jsonify({"success": True, "data": resident_to_dict(r)}), 201
    except LendingError as e:
        return jsonify(e.to_dict()), e.http_status


@resident_bp.put("/<int:resident_id>")
@role_required(*STAFF_ROLES)
def update_resident(resident_id: int):
    data = request.get_json(silent=True) or {}
    try:
        r = ResidentService.update_resident(resident_id, data)
        return jsonify({"success": True, "data": resident_to_dict(r)})
    except LendingError as e:
        return jsonify(e.to_dict()), e.http_status


@resident_bp.delete("/<int:resident_id>")
@role_required(*STAFF_ROLES)
def delete_resident(resident_id: int):
    try:
        ResidentService.delete_resident(resident_id)
        return jsonify({"success": True, "message": "Resident deleted successfully"})
    except LendingError as e:
        return jsonify(e.to_dict()), e.http_status
