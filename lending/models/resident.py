from datetime import datetime
from lending.extensions import db


class Resident(db.Model):
    __tablename__ = "residents"
    __table_args__ = (
        db.CheckConstraint("grade IS NULL OR (grade >= 1 AND grade <= 5)", name="ck_residents_grade_range"),
    )

    id = db.Column(db.Integer, primary_key=True)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=True, index=True)
    phone = db.Column(db.String(50), nullable=True)
    grade = db.Column(db.Integer, nullable=True)

    specialty_id = db.Column(db.Integer, db.ForeignKey("specialties.id"), nullable=True, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True, unique=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    specialty = db.relationship("Specialty", backref="residents")
    user = db.relationship("User", backref=db.backref("resident", uselist=False))

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
