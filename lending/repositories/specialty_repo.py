from lending.extensions import db
from lending.models.specialty import Specialty


class SpecialtyRepo:
    @staticmethod
    def list_all():
        return Specialty.query.order_by(Specialty.name.asc()).all()

    @staticmethod
    def get(specialty_id: int):
        return db.session.get(Specialty, specialty_id)

    @staticmethod
    def get_by_name(name: str):
        return Specialty.query.filter_by(name=name).first()

    @staticmethod
    def create(specialty: Specialty):
        db.session.add(specialty)
        db.session.commit()
        return specialty
