"""
Auth Routes

POST   /api/auth/register          — Create an account, returns user + token
POST   /api/auth/login             — Email + password login
GET    /api/auth/profile           — Current user
PUT    /api/auth/profile           — Update own profile fields
POST   /api/auth/change-password   — Change own password
POST   /api/auth/refresh           — Re-issue a token for the current identity
"""

from flask import Blueprint
from flask_jwt_extended import get_jwt, get_jwt_identity, jwt_required

from routes.responses import handle_errors, json_body, ok
from services.auth_service import AuthService

auth_bp = Blueprint('auth_bp', __name__)


@auth_bp.route('/api/auth/register', methods=['POST'])
@handle_errors('Registration failed')
def register():
    result = AuthService.register(json_body())
    return ok(result, 'User registered successfully', 201)


@auth_bp.route('/api/auth/login', methods=['POST'])
@handle_errors('Login failed')
def login():
    result = AuthService.login(json_body())
    return ok(result, 'Login successful')


@auth_bp.route('/api/auth/profile', methods=['GET'])
@jwt_required()
@handle_errors('Failed to get profile')
def get_profile():
    return ok({'user': AuthService.get_profile(get_jwt_identity())})


@auth_bp.route('/api/auth/profile', methods=['PUT'])
@jwt_required()
@handle_errors('Failed to update profile')
def update_profile():
    user = AuthService.update_profile(get_jwt_identity(), json_body())
    return ok({'user': user}, 'Profile updated successfully')


@auth_bp.route('/api/auth/change-password', methods=['POST'])
@jwt_required()
@handle_errors('Failed to change password')
def change_password():
    AuthService.change_password(get_jwt_identity(), json_body())
    return ok(message='Password changed successfully')


@auth_bp.route('/api/auth/refresh', methods=['POST'])
@jwt_required()
@handle_errors('Failed to refresh token')
def refresh():
    return ok({'token': AuthService.refresh_token(get_jwt())})
