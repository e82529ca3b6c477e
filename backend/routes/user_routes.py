"""
User Management Routes (ADMIN only)

GET    /api/users           — All users
POST   /api/users           — Create a user with any role
GET    /api/users/<id>      — One user
PUT    /api/users/<id>      — Update profile fields of a user
"""

from flask import Blueprint
from flask_jwt_extended import jwt_required

from routes.responses import admin_required, handle_errors, json_body, ok
from services.user_service import UserService

user_bp = Blueprint('user_bp', __name__)


@user_bp.route('/api/users', methods=['GET'])
@jwt_required()
@handle_errors('Failed to get users')
@admin_required
def list_users():
    return ok({'users': UserService.list_users()})


@user_bp.route('/api/users', methods=['POST'])
@jwt_required()
@handle_errors('Failed to create user')
@admin_required
def create_user():
    user = UserService.create_user(json_body())
    return ok({'user': user}, 'User created successfully', 201)


@user_bp.route('/api/users/<user_id>', methods=['GET'])
@jwt_required()
@handle_errors('Failed to get user')
@admin_required
def get_user(user_id):
    return ok({'user': UserService.get_user(user_id)})


@user_bp.route('/api/users/<user_id>', methods=['PUT'])
@jwt_required()
@handle_errors('Failed to update user')
@admin_required
def update_user(user_id):
    user = UserService.update_user(user_id, json_body())
    return ok({'user': user}, 'User updated successfully')
