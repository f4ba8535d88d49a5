from datetime import datetime

from flask_jwt_extended import create_access_token
from werkzeug.security import check_password_hash

from lending.repositories.user_repo import UserRepo


class AuthService:
    @staticmethod
    def issue_token(user) -> str:
        return create_access_token(
            identity=str(user.id),
            additional_claims={"role": user.role, "username": user.username}
        )

    @staticmethod
    def login(username: str, password: str):
        user = UserRepo.get_by_username(username)
        if not user or not user.is_active or not check_password_hash(user.password_hash, password):
            raise ValueError("Invalid username or password")

        user.last_login = datetime.utcnow()
        UserRepo.commit()
        return AuthService.issue_token(user), user
