"""
Dashboard Routes

GET /api/dashboard/overview   — Cross-module counts + recent activity
GET /api/dashboard/farm       — Animal health stats, herds, farm alerts, 7-day trend
GET /api/dashboard/park       — Park/wildlife/patrol stats, open incidents, 30-day census
GET /api/dashboard/land       — Zone health bands, recent changes, 12-month vegetation

Each payload is assembled from parallel queries; one failing query fails
the whole dashboard with a 500.
"""

from flask import Blueprint
from flask_jwt_extended import jwt_required

from routes.responses import handle_errors, ok
from services.access_scope import current_requester
from services.dashboard_service import DashboardService

dashboard_bp = Blueprint('dashboard_bp', __name__)


@dashboard_bp.route('/api/dashboard/overview', methods=['GET'])
@jwt_required()
@handle_errors('Failed to get overview statistics')
def overview():
    return ok(DashboardService.overview(current_requester()))


@dashboard_bp.route('/api/dashboard/farm', methods=['GET'])
@jwt_required()
@handle_errors('Failed to get farm dashboard data')
def farm_dashboard():
    return ok(DashboardService.farm(current_requester()))


@dashboard_bp.route('/api/dashboard/park', methods=['GET'])
@jwt_required()
@handle_errors('Failed to get park dashboard data')
def park_dashboard():
    return ok(DashboardService.park(current_requester()))


@dashboard_bp.route('/api/dashboard/land', methods=['GET'])
@jwt_required()
@handle_errors('Failed to get land dashboard data')
def land_dashboard():
    return ok(DashboardService.land())
