"""
KUBE-Farm Routes

GET    /api/farms                          — Farms visible to the requester
POST   /api/farms                          — Create a farm owned by the requester
GET    /api/farms/<id>                     — Farm with herds, zones and open alerts
GET    /api/farms/<farm_id>/herds          — Herds with animals + latest telemetry
POST   /api/farms/<farm_id>/herds          — Add a herd
GET    /api/farms/<farm_id>/zones          — Pasture zones
GET    /api/farms/herds/<herd_id>/animals  — Animals of a herd
GET    /api/farms/animals/<id>             — Animal detail
"""

from flask import Blueprint
from flask_jwt_extended import jwt_required

from routes.responses import handle_errors, json_body, ok
from services.access_scope import current_requester
from services.farm_service import FarmService

farm_bp = Blueprint('farm_bp', __name__)


# ──────────────────────────────────────────
# FARM
# ──────────────────────────────────────────

@farm_bp.route('/api/farms', methods=['GET'])
@jwt_required()
@handle_errors('Failed to get farms')
def list_farms():
    return ok({'farms': FarmService.list_farms(current_requester())})


@farm_bp.route('/api/farms', methods=['POST'])
@jwt_required()
@handle_errors('Failed to create farm')
def create_farm():
    farm = FarmService.create_farm(current_requester(), json_body())
    return ok({'farm': farm}, 'Farm created successfully', 201)


@farm_bp.route('/api/farms/<farm_id>', methods=['GET'])
@jwt_required()
@handle_errors('Failed to get farm')
def get_farm(farm_id):
    return ok({'farm': FarmService.get_farm(farm_id, current_requester())})


# ──────────────────────────────────────────
# HERDS & ZONES
# ──────────────────────────────────────────

@farm_bp.route('/api/farms/<farm_id>/herds', methods=['GET'])
@jwt_required()
@handle_errors('Failed to get herds')
def list_herds(farm_id):
    return ok({'herds': FarmService.list_herds(farm_id, current_requester())})


@farm_bp.route('/api/farms/<farm_id>/herds', methods=['POST'])
@jwt_required()
@handle_errors('Failed to create herd')
def create_herd(farm_id):
    herd = FarmService.create_herd(farm_id, current_requester(), json_body())
    return ok({'herd': herd}, 'Herd created successfully', 201)


@farm_bp.route('/api/farms/<farm_id>/zones', methods=['GET'])
@jwt_required()
@handle_errors('Failed to get pasture zones')
def list_zones(farm_id):
    return ok({'zones': FarmService.list_pasture_zones(farm_id, current_requester())})


# ──────────────────────────────────────────
# ANIMALS
# ──────────────────────────────────────────

@farm_bp.route('/api/farms/herds/<herd_id>/animals', methods=['GET'])
@jwt_required()
@handle_errors('Failed to get animals')
def list_animals(herd_id):
    return ok({'animals': FarmService.list_animals(herd_id, current_requester())})


@farm_bp.route('/api/farms/animals/<animal_id>', methods=['GET'])
@jwt_required()
@handle_errors('Failed to get animal')
def get_animal(animal_id):
    return ok({'animal': FarmService.get_animal(animal_id, current_requester())})
