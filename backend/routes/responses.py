"""
Response envelope and handler-boundary error mapping shared by all blueprints.

    { "success": bool, "message"?: str, "data"?: {...} }
"""

import logging
from functools import wraps

from flask import jsonify, request
from flask_jwt_extended import get_jwt, get_jwt_identity

from database.db import db
from services.access_scope import ADMIN_ROLE
from services.errors import ApiError, ForbiddenError, ValidationError

logger = logging.getLogger('routes')


def ok(data=None, message=None, status=200):
    body = {'success': True}
    if message:
        body['message'] = message
    if data is not None:
        body['data'] = data
    return jsonify(body), status


def fail(message, status):
    return jsonify({'success': False, 'message': message}), status


def json_body():
    """Request body as a dict; {} when there is none."""
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ValidationError('Request body must be a JSON object')
    return body


def _requester_id():
    try:
        return get_jwt_identity()
    except RuntimeError:
        return None


def handle_errors(failure_message):
    """
    ApiError -> its own status and message.
    Anything else -> rollback, log with context, 500 with `failure_message`.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                return fn(*args, **kwargs)
            except ApiError as e:
                db.session.rollback()
                return fail(e.message, e.status_code)
            except Exception:
                db.session.rollback()
                logger.exception(
                    f"{failure_message} ({request.method} {request.path})",
                    extra={'extra_data': {
                        'type': 'handler_error',
                        'endpoint': request.endpoint,
                        'user_id': _requester_id(),
                    }}
                )
                return fail(failure_message, 500)
        return wrapper
    return decorator


def admin_required(fn):
    """Must be stacked under @jwt_required()."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if get_jwt().get('role') != ADMIN_ROLE:
            raise ForbiddenError('Admin access required')
        return fn(*args, **kwargs)
    return wrapper
