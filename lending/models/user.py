from datetime import datetime
from lending.extensions import db

STAFF_ROLES = ("super_admin", "admin", "librarian", "staff")
ADMIN_ROLES = ("super_admin", "admin")


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), nullable=False, unique=True, index=True)
    email = db.Column(db.String(255), nullable=False, unique=True, index=True)
    password_hash = db.Column(db.String(255), nullable=False)

    role = db.Column(db.String(20), nullable=False, default="staff")  # super_admin/admin/librarian/staff
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    last_login = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
