# /carepoint/services/directory_service.py
from carepoint.models.staff_models import HospitalType
from carepoint.services.auth_service import public_staff
from carepoint.utils.errors import NotFoundError, ValidationError


class DirectoryService:
    """Lookups over staff, departments and hospitals."""

    def __init__(self, staff_repo, department_repo, hospital_repo):
        self.staff_repo = staff_repo
        self.department_repo = department_repo
        self.hospital_repo = hospital_repo

    def list_doctors(self):
        return [public_staff(doctor) for doctor in self.staff_repo.find_doctors()]

    def get_staff(self, staff_id):
        staff = self.staff_repo.find_by_id(staff_id)
        if not staff:
            raise NotFoundError("Staff member not found")
        return public_staff(staff)

    def list_departments(self, hospital_id=None):
        if hospital_id:
            return self.department_repo.find_by_hospital_id(hospital_id)
        return self.department_repo.find_all()

    def create_department(self, data: dict) -> dict:
        data = data or {}
        if not data.get('name'):
            raise ValidationError("Department name is required")
        hospital_id = data.get('hospitalId')
        if hospital_id and not self.hospital_repo.find_by_id(hospital_id):
            raise NotFoundError("Hospital not found")

        department_id = self.department_repo.create({
            'name': data['name'].strip(),
            'description': data.get('description'),
            'hospitalId': hospital_id,
        })
        return self.department_repo.find_by_id(department_id)

    def list_hospitals(self):
        return self.hospital_repo.find_all()

    def create_hospital(self, data: dict) -> dict:
        data = data or {}
        if not data.get('name'):
            raise ValidationError("Hospital name is required")
        hospital_type = data.get('type', HospitalType.PRIVATE)
        if hospital_type not in HospitalType.ALL:
            raise ValidationError(f"type must be one of {', '.join(HospitalType.ALL)}")

        hospital_id = self.hospital_repo.create({
            'name': data['name'].strip(),
            'type': hospital_type,
            'address': data.get('address'),
            'contactNumber': data.get('contactNumber'),
        })
        return self.hospital_repo.find_by_id(hospital_id)
