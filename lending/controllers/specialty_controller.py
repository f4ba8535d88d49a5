from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from lending.models.specialty import Specialty
from lending.models.user import STAFF_ROLES
from lending.repositories.specialty_repo import SpecialtyRepo
from lending.utils.decorators import role_required

specialty_bp = Blueprint("specialties", __name__)


@specialty_bp.get("/")
@jwt_required()
def list_specialties():
    return jsonify({"success": True, "data": [{"id": s.id, "name": s.name} for s in SpecialtyRepo.list_all()]})


@specialty_bp.post("/")
@role_required(*STAFF_ROLES)
def create_specialty():
    data = request.get_json(silent=True) or {}
    name = (data.get("name") or "").strip()
    if not name:
        return jsonify({"success": False, "kind": "invalid_input", "message": "name is required"}), 400
    if SpecialtyRepo.get_by_name(name):
        return jsonify({"success": False, "kind": "invalid_input", "message": "Specialty already exists"}), 400

    s = SpecialtyRepo.create(Specialty(name=name))
    return jsonify({"success": True, "data": {"id": s.id, "name": s.name}}), 201
