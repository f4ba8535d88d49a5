from lending.extensions import db
from lending.models.book_transaction import BookTransaction
from lending.models.resident import Resident


class ResidentRepo:
    @staticmethod
    def page(page: int, per_page: int):
        query = db.select(Resident).order_by(Resident.first_name.asc(), Resident.id.asc())
        return db.paginate(query, page=page, per_page=per_page, error_out=False)

    @staticmethod
    def get(resident_id: int):
        return db.session.get(Resident, resident_id)

    @staticmethod
    def get_for_update(resident_id: int):
        return db.session.get(Resident, resident_id, with_for_update=True, populate_existing=True)

    @staticmethod
    def get_by_email(email: str):
        return Resident.query.filter_by(email=email).first()

    @staticmethod
    def has_transactions(resident_id: int) -> bool:
        return db.session.query(BookTransaction.id).filter_by(resident_id=resident_id).first() is not None

    @staticmethod
    def create(resident: Resident):
        db.session.add(resident)
        db.session.commit()
        return resident

    @staticmethod
    def update():
        db.session.commit()

    @staticmethod
    def delete(resident: Resident):
        db.session.delete(resident)
        db.session.commit()
