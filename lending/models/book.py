from datetime import datetime
from lending.extensions import db


class Book(db.Model):
    __tablename__ = "books"
    __table_args__ = (
        db.CheckConstraint("available_copies >= 0", name="ck_books_available_copies_non_negative"),
    )

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False, index=True)
    author = db.Column(db.String(255), nullable=True, index=True)
    isbn = db.Column(db.String(20), unique=True, nullable=True, index=True)
    published_year = db.Column(db.Integer, nullable=True)
    description = db.Column(db.Text, nullable=True)
    image_url = db.Column(db.Text, nullable=True)

    specialty_id = db.Column(db.Integer, db.ForeignKey("specialties.id"), nullable=True, index=True)

    # only the copy ledger moves this after creation
    available_copies = db.Column(db.Integer, nullable=False, default=1)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    specialty = db.relationship("Specialty", backref="books")
