from werkzeug.security import generate_password_hash

from database.db import db
from database.models import User
from services.auth_service import normalize_email, validate_business, validate_services
from services.errors import NotFoundError, ValidationError
from services.validators import require_fields, require_strings

UPDATABLE_FIELDS = {
    'firstName': 'first_name', 'lastName': 'last_name', 'phone': 'phone',
    'avatar': 'avatar', 'organization': 'organization',
    'location': 'location', 'language': 'language',
}


class UserService:
    """Admin-side user management. Role checks happen in the routes."""

    @staticmethod
    def list_users():
        users = User.query.order_by(User.created_at.desc()).all()
        return [u.to_dict() for u in users]

    @staticmethod
    def get_user(user_id):
        user = db.session.get(User, user_id)
        if not user:
            raise NotFoundError('User not found')
        return user.to_dict()

    @staticmethod
    def create_user(data):
        require_fields(data, ['email', 'password', 'firstName', 'lastName', 'role'])
        require_strings(data, ['password'])
        services = validate_services(data.get('services'))
        validate_business(data.get('businessType'), data.get('companyName'))

        email = normalize_email(data['email'])
        if User.query.filter_by(email=email).first():
            raise ValidationError('User with this email already exists')

        user = User(
            email=email,
            password_hash=generate_password_hash(data['password']),
            first_name=data['firstName'],
            last_name=data['lastName'],
            phone=data.get('phone'),
            role=data['role'],
            status='ACTIVE',
            business_type=data.get('businessType'),
            services=services,
            company_name=data.get('companyName'),
            organization=data.get('organization'),
        )
        db.session.add(user)
        db.session.commit()
        return user.to_dict()

    @staticmethod
    def update_user(user_id, data):
        user = db.session.get(User, user_id)
        if not user:
            raise NotFoundError('User not found')

        for key, attr in UPDATABLE_FIELDS.items():
            if key in data:
                setattr(user, attr, data[key])

        db.session.commit()
        return user.to_dict()
