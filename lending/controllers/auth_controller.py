from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt, jwt_required

from lending.repositories.user_repo import UserRepo
from lending.services.auth_service import AuthService
from lending.utils.decorators import current_actor_id

auth_bp = Blueprint("auth", __name__)


@auth_bp.post("/login")
def login():
    data = request.get_json(silent=True) or {}
    username = (data.get("username") or "").strip()
    password = (data.get("password") or "").strip()
    if not username or not password:
        return jsonify({"success": False, "kind": "invalid_input", "message": "username and password are required"}), 400

    try:
        token, user = AuthService.login(username, password)
        return jsonify({
            "success": True,
            "access_token": token,
            "user": {"id": user.id, "username": user.username, "role": user.role}
        })
    except ValueError as e:
        return jsonify({"success": False, "kind": "invalid_credentials", "message": str(e)}), 401


@auth_bp.get("/me")
@jwt_required()
def me():
    user = UserRepo.get_by_id(current_actor_id())
    if not user:
        return jsonify({"success": False, "kind": "not_found", "message": "User not found"}), 404

    return jsonify({
        "success": True,
        "user": {
            "id": user.id,
            "username": user.username,
            "email": user.email,
            "role": get_jwt().get("role", user.role)
        }
    })
