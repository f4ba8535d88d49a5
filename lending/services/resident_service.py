from flask import current_app

from lending.errors import InvalidInput, NotFound, RecordInUse
from lending.models.resident import Resident
from lending.repositories.resident_repo import ResidentRepo
from lending.repositories.specialty_repo import SpecialtyRepo
from lending.utils.params import optional_int


def _grade(data: dict):
    grade = optional_int(data, "grade")
    if grade is not None and not 1 <= grade <= 5:
        raise InvalidInput("Grade must be between 1 and 5")
    return grade


class ResidentService:
    @staticmethod
    def list_residents(page: int, per_page: int):
        return ResidentRepo.page(page, per_page)

    @staticmethod
    def get_resident(resident_id: int):
        resident = ResidentRepo.get(resident_id)
        if not resident:
            raise NotFound("Resident not found")
        return resident

    @staticmethod
    def create_resident(data: dict):
        first_name = (data.get("first_name") or "").strip()
        last_name = (data.get("last_name") or "").strip()
        if not first_name or not last_name:
            raise InvalidInput("First name and last name are required")

        email = (data.get("email") or "").strip().lower() or None
        if email and ResidentRepo.get_by_email(email):
            raise InvalidInput("Email already exists")

        specialty_id = optional_int(data, "specialty_id")
        if specialty_id is not None and not SpecialtyRepo.get(specialty_id):
            raise NotFound(f"Specialty {specialty_id} not found")

        resident = Resident(
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone=data.get("phone"),
            grade=_grade(data),
            specialty_id=specialty_id,
            user_id=optional_int(data, "user_id"),
        )
        return ResidentRepo.create(resident)

    @staticmethod
    def update_resident(resident_id: int, data: dict):
        resident = ResidentService.get_resident(resident_id)

        # email is the resident's identity for reminders and is not editable
        for k in ["first_name", "last_name", "phone"]:
            if k in data and data[k] is not None:
                setattr(resident, k, str(data[k]).strip())
        if not resident.first_name or not resident.last_name:
            raise InvalidInput("First name and last name cannot be empty")

        if "grade" in data:
            resident.grade = _grade(data)
        if "specialty_id" in data:
            specialty_id = optional_int(data, "specialty_id")
            if specialty_id is not None and not SpecialtyRepo.get(specialty_id):
                raise NotFound(f"Specialty {specialty_id} not found")
            resident.specialty_id = specialty_id

        ResidentRepo.update()
        return resident

    @staticmethod
    def delete_resident(resident_id: int):
        resident = ResidentService.get_resident(resident_id)
        if ResidentRepo.has_transactions(resident_id):
            raise RecordInUse("Resident has borrow transactions and cannot be deleted")
        ResidentRepo.delete(resident)
        current_app.logger.info(f"[catalog] resident {resident_id} deleted")
