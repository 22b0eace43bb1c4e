# /carepoint/services/auth_service.py
import logging
import re
from datetime import timedelta

from flask_jwt_extended import create_access_token, create_refresh_token

from carepoint.extensions import bcrypt
from carepoint.models.staff_models import StaffRole
from carepoint.services.patient_service import is_valid_email
from carepoint.utils.errors import ConflictError, ForbiddenError, UnauthorizedError, ValidationError
from carepoint.utils.time_util import parse_datetime, utcnow, utcnow_iso

logger = logging.getLogger(__name__)

MAX_FAILED_LOGINS = 5
LOCKOUT_MINUTES = 30
PRIVATE_FIELDS = ('passwordHash', 'failedLoginAttempts', 'accountLocked', 'accountLockedUntil')


def validate_password_strength(password) -> bool:
    """At least 12 characters with upper, lower, digit and special characters."""
    if not isinstance(password, str) or len(password) < 12:
        return False
    return all([
        re.search(r'[A-Z]', password),
        re.search(r'[a-z]', password),
        re.search(r'\d', password),
        re.search(r'[^A-Za-z0-9]', password),
    ])


def normalize_email(email) -> str:
    return email.strip().lower()


def public_staff(staff: dict) -> dict:
    return {k: v for k, v in staff.items() if k not in PRIVATE_FIELDS}


class AuthService:
    """Staff identity: registration, credential checks and JWT issuance."""

    def __init__(self, staff_repo, revoked_token_repo):
        self.staff_repo = staff_repo
        self.revoked_token_repo = revoked_token_repo

    def register_staff(self, data: dict) -> dict:
        data = data or {}
        required_fields = ['email', 'password', 'firstName', 'lastName', 'role']
        missing = [field for field in required_fields if not data.get(field)]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        if not is_valid_email(data['email']):
            raise ValidationError("Invalid email format")
        if not all(isinstance(data[field], str) and data[field].strip() for field in ('firstName', 'lastName')):
            raise ValidationError("firstName and lastName must be non-empty text")
        email = normalize_email(data['email'])
        if data['role'] not in StaffRole.ALL:
            raise ValidationError("Invalid role")
        if not validate_password_strength(data['password']):
            raise ValidationError("Password does not meet complexity requirements")
        if self.staff_repo.find_by_email(email):
            raise ConflictError("Email already exists")

        staff_id = self.staff_repo.create({
            'email': email,
            'firstName': data['firstName'].strip(),
            'lastName': data['lastName'].strip(),
            'role': data['role'],
            'departmentId': data.get('departmentId'),
            'specialization': data.get('specialization'),
            'phone': data.get('phone'),
            'passwordHash': bcrypt.generate_password_hash(data['password']).decode('utf-8'),
            'failedLoginAttempts': 0,
            'accountLocked': False,
            'isActive': True,
        })
        logger.info(f"Registered staff member {staff_id} with role {data['role']}")
        return public_staff(self.staff_repo.find_by_id(staff_id))

    def authenticate(self, email, password) -> dict:
        if not email or not password:
            raise ValidationError("Email and password required")
        if not isinstance(email, str) or not isinstance(password, str):
            raise ValidationError("Email and password must be text")

        staff = self.staff_repo.find_by_email(normalize_email(email))
        if not staff:
            raise UnauthorizedError("Invalid credentials")

        if staff.get('accountLocked'):
            locked_until = staff.get('accountLockedUntil')
            if locked_until and utcnow() < parse_datetime(locked_until):
                raise UnauthorizedError("Account locked due to multiple failed attempts")
            staff = self.staff_repo.update(staff['id'], {
                'accountLocked': False, 'accountLockedUntil': None, 'failedLoginAttempts': 0,
            })

        if not bcrypt.check_password_hash(staff['passwordHash'], password):
            self._record_failure(staff)
            raise UnauthorizedError("Invalid credentials")

        if not staff.get('isActive', True):
            raise ForbiddenError("Account deactivated")

        staff = self.staff_repo.update(staff['id'], {'failedLoginAttempts': 0, 'lastLogin': utcnow_iso()})
        return {
            'accessToken': self.issue_access_token(staff),
            'refreshToken': create_refresh_token(identity=staff['id']),
            'user': public_staff(staff),
        }

    def refresh(self, staff_id) -> dict:
        staff = self.staff_repo.find_by_id(staff_id)
        if not staff or not staff.get('isActive', True):
            raise ForbiddenError("User not found or inactive")
        return {'accessToken': self.issue_access_token(staff)}

    def revoke_token(self, jti):
        self.revoked_token_repo.add(jti)
        logger.info(f"Revoked token {jti}")

    def is_token_revoked(self, jti) -> bool:
        return self.revoked_token_repo.is_revoked(jti)

    @staticmethod
    def issue_access_token(staff):
        # No PII in the token payload, just the id and role.
        return create_access_token(identity=staff['id'], additional_claims={'role': staff['role']})

    def _record_failure(self, staff):
        attempts = (staff.get('failedLoginAttempts') or 0) + 1
        changes = {'failedLoginAttempts': attempts}
        if attempts >= MAX_FAILED_LOGINS:
            changes['accountLocked'] = True
            changes['accountLockedUntil'] = (utcnow() + timedelta(minutes=LOCKOUT_MINUTES)).isoformat()
            logger.warning(f"Locked staff account {staff['id']} after {attempts} failed logins")
        self.staff_repo.update(staff['id'], changes)
