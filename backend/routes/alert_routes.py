"""
Alert Routes

GET    /api/alerts                 — Visible alerts (?status=&type=&severity=&module=)
POST   /api/alerts                 — Raise an alert (status NEW)
GET    /api/alerts/stats           — Counts by status for the requester's assignments
GET    /api/alerts/<id>            — One alert
PUT    /api/alerts/<id>/status     — Set status (RESOLVED stamps resolver + time)
PUT    /api/alerts/<id>/assign     — Assign to a user (status -> ACKNOWLEDGED)
"""

from flask import Blueprint, request
from flask_jwt_extended import jwt_required

from routes.responses import handle_errors, json_body, ok
from services.access_scope import current_requester
from services.alert_service import FILTER_KEYS, AlertService

alert_bp = Blueprint('alert_bp', __name__)


@alert_bp.route('/api/alerts', methods=['GET'])
@jwt_required()
@handle_errors('Failed to get alerts')
def list_alerts():
    filters = {key: request.args.get(key) for key in FILTER_KEYS}
    return ok({'alerts': AlertService.list_alerts(current_requester(), filters)})


@alert_bp.route('/api/alerts', methods=['POST'])
@jwt_required()
@handle_errors('Failed to create alert')
def create_alert():
    alert = AlertService.create_alert(current_requester(), json_body())
    return ok({'alert': alert}, 'Alert created successfully', 201)


@alert_bp.route('/api/alerts/stats', methods=['GET'])
@jwt_required()
@handle_errors('Failed to get alert statistics')
def alert_stats():
    return ok({'stats': AlertService.stats(current_requester())})


@alert_bp.route('/api/alerts/<alert_id>', methods=['GET'])
@jwt_required()
@handle_errors('Failed to get alert')
def get_alert(alert_id):
    return ok({'alert': AlertService.get_alert(alert_id, current_requester())})


@alert_bp.route('/api/alerts/<alert_id>/status', methods=['PUT'])
@jwt_required()
@handle_errors('Failed to update alert')
def update_status(alert_id):
    alert = AlertService.update_status(alert_id, current_requester(), json_body())
    return ok({'alert': alert}, 'Alert updated successfully')


@alert_bp.route('/api/alerts/<alert_id>/assign', methods=['PUT'])
@jwt_required()
@handle_errors('Failed to assign alert')
def assign_alert(alert_id):
    alert = AlertService.assign(alert_id, current_requester(), json_body())
    return ok({'alert': alert}, 'Alert assigned successfully')
