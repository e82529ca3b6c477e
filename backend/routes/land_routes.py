"""
KUBE-Land Routes (visible to every authenticated user)

GET/POST   /api/land/zones                      — Zones (?region=&district=) / create
GET        /api/land/zones/<id>                 — Zone with all surveys and changes
GET/POST   /api/land/zones/<zone_id>/surveys    — Surveys
GET/POST   /api/land/zones/<zone_id>/changes    — Detected land changes
"""

from flask import Blueprint, request
from flask_jwt_extended import jwt_required

from routes.responses import handle_errors, json_body, ok
from services.land_service import LandService

land_bp = Blueprint('land_bp', __name__)


@land_bp.route('/api/land/zones', methods=['GET'])
@jwt_required()
@handle_errors('Failed to get land zones')
def list_zones():
    zones = LandService.list_zones(
        region=request.args.get('region'),
        district=request.args.get('district'),
    )
    return ok({'zones': zones})


@land_bp.route('/api/land/zones', methods=['POST'])
@jwt_required()
@handle_errors('Failed to create land zone')
def create_zone():
    zone = LandService.create_zone(json_body())
    return ok({'zone': zone}, 'Land zone created successfully', 201)


@land_bp.route('/api/land/zones/<zone_id>', methods=['GET'])
@jwt_required()
@handle_errors('Failed to get land zone')
def get_zone(zone_id):
    return ok({'zone': LandService.get_zone(zone_id)})


@land_bp.route('/api/land/zones/<zone_id>/surveys', methods=['GET'])
@jwt_required()
@handle_errors('Failed to get surveys')
def list_surveys(zone_id):
    return ok({'surveys': LandService.list_surveys(zone_id)})


@land_bp.route('/api/land/zones/<zone_id>/surveys', methods=['POST'])
@jwt_required()
@handle_errors('Failed to create survey')
def create_survey(zone_id):
    survey = LandService.create_survey(zone_id, json_body())
    return ok({'survey': survey}, 'Survey created successfully', 201)


@land_bp.route('/api/land/zones/<zone_id>/changes', methods=['GET'])
@jwt_required()
@handle_errors('Failed to get land changes')
def list_changes(zone_id):
    return ok({'changes': LandService.list_changes(zone_id)})


@land_bp.route('/api/land/zones/<zone_id>/changes', methods=['POST'])
@jwt_required()
@handle_errors('Failed to report land change')
def create_change(zone_id):
    change = LandService.create_change(zone_id, json_body())
    return ok({'change': change}, 'Land change reported successfully', 201)
