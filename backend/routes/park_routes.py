"""
KUBE-Park Routes

GET/POST   /api/parks                        — Parks managed by the requester / create one
GET        /api/parks/<id>                   — Park with zones, wildlife, patrols, open incidents
GET/POST   /api/parks/<park_id>/wildlife     — Wildlife populations
GET/POST   /api/parks/<park_id>/patrols      — Patrols
GET/POST   /api/parks/<park_id>/incidents    — Incidents
"""

from flask import Blueprint
from flask_jwt_extended import jwt_required

from routes.responses import handle_errors, json_body, ok
from services.access_scope import current_requester
from services.park_service import ParkService

park_bp = Blueprint('park_bp', __name__)


@park_bp.route('/api/parks', methods=['GET'])
@jwt_required()
@handle_errors('Failed to get parks')
def list_parks():
    return ok({'parks': ParkService.list_parks(current_requester())})


@park_bp.route('/api/parks', methods=['POST'])
@jwt_required()
@handle_errors('Failed to create park')
def create_park():
    park = ParkService.create_park(current_requester(), json_body())
    return ok({'park': park}, 'Park created successfully', 201)


@park_bp.route('/api/parks/<park_id>', methods=['GET'])
@jwt_required()
@handle_errors('Failed to get park')
def get_park(park_id):
    return ok({'park': ParkService.get_park(park_id, current_requester())})


# ──────────────────────────────────────────
# WILDLIFE
# ──────────────────────────────────────────

@park_bp.route('/api/parks/<park_id>/wildlife', methods=['GET'])
@jwt_required()
@handle_errors('Failed to get wildlife')
def list_wildlife(park_id):
    return ok({'wildlife': ParkService.list_wildlife(park_id, current_requester())})


@park_bp.route('/api/parks/<park_id>/wildlife', methods=['POST'])
@jwt_required()
@handle_errors('Failed to add wildlife population')
def create_wildlife(park_id):
    population = ParkService.create_wildlife(park_id, current_requester(), json_body())
    return ok({'population': population}, 'Wildlife population added successfully', 201)


# ──────────────────────────────────────────
# PATROLS
# ──────────────────────────────────────────

@park_bp.route('/api/parks/<park_id>/patrols', methods=['GET'])
@jwt_required()
@handle_errors('Failed to get patrols')
def list_patrols(park_id):
    return ok({'patrols': ParkService.list_patrols(park_id, current_requester())})


@park_bp.route('/api/parks/<park_id>/patrols', methods=['POST'])
@jwt_required()
@handle_errors('Failed to create patrol')
def create_patrol(park_id):
    patrol = ParkService.create_patrol(park_id, current_requester(), json_body())
    return ok({'patrol': patrol}, 'Patrol created successfully', 201)


# ──────────────────────────────────────────
# INCIDENTS
# ──────────────────────────────────────────

@park_bp.route('/api/parks/<park_id>/incidents', methods=['GET'])
@jwt_required()
@handle_errors('Failed to get incidents')
def list_incidents(park_id):
    return ok({'incidents': ParkService.list_incidents(park_id, current_requester())})


@park_bp.route('/api/parks/<park_id>/incidents', methods=['POST'])
@jwt_required()
@handle_errors('Failed to report incident')
def create_incident(park_id):
    incident = ParkService.create_incident(park_id, current_requester(), json_body())
    return ok({'incident': incident}, 'Incident reported successfully', 201)
