"""
Auth Service — registration, login, profile and token management

Tokens carry the user id as the subject plus {id, email, role} claims;
lifetime comes from JWT_ACCESS_TOKEN_EXPIRES (7 days).
"""

import logging
from datetime import datetime

from flask_jwt_extended import create_access_token
from werkzeug.security import generate_password_hash, check_password_hash

from database.db import db
from database.models import User
from services.activity_service import ActivityService
from services.errors import AuthenticationError, NotFoundError, ValidationError
from services.validators import require_fields, require_strings

logger = logging.getLogger('auth_service')

VALID_SERVICES = ('KUBE_FARM', 'KUBE_PARK', 'KUBE_LAND')
MIN_PASSWORD_LENGTH = 6
DEFAULT_ROLE = 'FARMER'

PROFILE_FIELDS = {
    'firstName': 'first_name', 'lastName': 'last_name', 'phone': 'phone',
    'avatar': 'avatar', 'location': 'location', 'language': 'language',
}


def issue_token(user_id, email, role):
    return create_access_token(
        identity=user_id,
        additional_claims={'id': user_id, 'email': email, 'role': role},
    )


def validate_services(services):
    """Entitlements must be a list drawn from VALID_SERVICES."""
    if services is None:
        return None
    if not isinstance(services, list):
        raise ValidationError('services must be a list')
    invalid = [str(s) for s in services if s not in VALID_SERVICES]
    if invalid:
        raise ValidationError(f"Invalid services: {', '.join(invalid)}")
    return services


def validate_business(business_type, company_name):
    if business_type == 'B2B' and not company_name:
        raise ValidationError('Company name is required for business accounts')


def normalize_email(email):
    return str(email).strip()


class AuthService:

    @staticmethod
    def register(data):
        require_fields(data, ['email', 'password', 'firstName', 'lastName'])
        require_strings(data, ['password'])
        services = validate_services(data.get('services'))
        validate_business(data.get('businessType'), data.get('companyName'))

        email = normalize_email(data['email'])
        if User.query.filter_by(email=email).first():
            raise ValidationError('User already exists with this email')

        user = User(
            email=email,
            password_hash=generate_password_hash(data['password']),
            first_name=data['firstName'],
            last_name=data['lastName'],
            phone=data.get('phone'),
            role=data.get('role') or DEFAULT_ROLE,
            organization=data.get('companyName') or data.get('organization'),
            business_type=data.get('businessType'),
            services=services,
            company_name=data.get('companyName'),
            company_size=data.get('companySize'),
            industry=data.get('industry'),
        )
        db.session.add(user)
        db.session.commit()
        logger.info(f"Registered user {user.id} with role {user.role}")

        return {'user': user.to_dict(), 'token': issue_token(user.id, user.email, user.role)}

    @staticmethod
    def login(data):
        require_fields(data, ['email', 'password'])

        user = User.query.filter_by(email=normalize_email(data['email'])).first()
        # Same answer for unknown email, wrong password and inactive account
        if (
            not user
            or not isinstance(data['password'], str)
            or not check_password_hash(user.password_hash, data['password'])
            or user.status != 'ACTIVE'
        ):
            raise AuthenticationError('Invalid credentials')

        user.last_login_at = datetime.utcnow()
        ActivityService.record(
            user.id, 'USER_LOGIN', 'login',
            description='User logged in successfully', module='system',
        )
        db.session.commit()

        return {'user': user.to_dict(), 'token': issue_token(user.id, user.email, user.role)}

    @staticmethod
    def _get_user(user_id):
        user = db.session.get(User, user_id)
        if not user:
            raise NotFoundError('User not found')
        return user

    @staticmethod
    def get_profile(user_id):
        return AuthService._get_user(user_id).to_dict()

    @staticmethod
    def update_profile(user_id, data):
        user = AuthService._get_user(user_id)
        for key, attr in PROFILE_FIELDS.items():
            if key in data:
                setattr(user, attr, data[key])
        db.session.commit()
        return user.to_dict()

    @staticmethod
    def change_password(user_id, data):
        current = data.get('currentPassword')
        new = data.get('newPassword')
        if not current or not new:
            raise ValidationError('Current password and new password are required')
        require_strings(data, ['currentPassword', 'newPassword'])
        if len(new) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f'New password must be at least {MIN_PASSWORD_LENGTH} characters')

        user = AuthService._get_user(user_id)
        if not check_password_hash(user.password_hash, current):
            raise AuthenticationError('Current password is incorrect')

        user.password_hash = generate_password_hash(new)
        db.session.commit()

    @staticmethod
    def refresh_token(claims):
        return issue_token(claims['sub'], claims.get('email'), claims.get('role'))
