"""
Land Service — monitored land zones, surveys and detected changes

Land data has no single owner, so nothing here is role-scoped.
"""

import logging

from database.db import db
from database.models import LandChange, LandSurvey, LandZone
from services.errors import NotFoundError
from services.validators import parse_datetime, parse_float, require_fields

logger = logging.getLogger('land_service')

# request key -> model attribute
ZONE_METRICS = {
    'vegetationIndex': 'vegetation_index',
    'soilHealth': 'soil_health',
    'degradationLevel': 'degradation_level',
    'erosionRisk': 'erosion_risk',
    'avgRainfall': 'avg_rainfall',
    'avgTemperature': 'avg_temperature',
    'droughtRisk': 'drought_risk',
}

SURVEY_METRICS = {
    'ndvi': 'ndvi',
    'biomass': 'biomass',
    'treeCanopyCover': 'tree_canopy_cover',
    'bareGround': 'bare_ground',
    'waterBodies': 'water_bodies',
    'healthScore': 'health_score',
}


def _metrics(data, mapping):
    return {attr: parse_float(data.get(key), key) for key, attr in mapping.items()}


class LandService:

    @staticmethod
    def get_zone_or_404(zone_id):
        zone = db.session.get(LandZone, zone_id)
        if not zone:
            raise NotFoundError('Land zone not found')
        return zone

    @staticmethod
    def list_zones(region=None, district=None):
        query = LandZone.query
        if region:
            query = query.filter(LandZone.region == region)
        if district:
            query = query.filter(LandZone.district == district)
        zones = query.order_by(LandZone.created_at.desc()).all()

        result = []
        for zone in zones:
            zone_dict = zone.to_dict()
            latest = (
                LandSurvey.query.filter_by(zone_id=zone.id)
                .order_by(LandSurvey.survey_date.desc()).first()
            )
            changes = (
                LandChange.query.filter_by(zone_id=zone.id)
                .order_by(LandChange.detected_at.desc()).limit(5).all()
            )
            zone_dict['surveys'] = [latest.to_dict()] if latest else []
            zone_dict['changes'] = [c.to_dict() for c in changes]
            result.append(zone_dict)
        return result

    @staticmethod
    def get_zone(zone_id):
        zone = LandService.get_zone_or_404(zone_id)
        surveys = LandSurvey.query.filter_by(zone_id=zone.id) \
            .order_by(LandSurvey.survey_date.desc()).all()
        changes = LandChange.query.filter_by(zone_id=zone.id) \
            .order_by(LandChange.detected_at.desc()).all()

        zone_dict = zone.to_dict()
        zone_dict['surveys'] = [s.to_dict() for s in surveys]
        zone_dict['changes'] = [c.to_dict() for c in changes]
        return zone_dict

    @staticmethod
    def create_zone(data):
        require_fields(data, ['name', 'coordinates', 'area', 'region', 'landUseType'])

        zone = LandZone(
            name=data['name'],
            description=data.get('description'),
            coordinates=data['coordinates'],
            area=parse_float(data['area'], 'area'),
            region=data['region'],
            district=data.get('district'),
            land_use_type=data['landUseType'],
            ownership=data.get('ownership'),
            **_metrics(data, ZONE_METRICS),
        )
        db.session.add(zone)
        db.session.commit()
        logger.info(f"Land zone {zone.id} created in {zone.region}")
        return zone.to_dict()

    @staticmethod
    def list_surveys(zone_id):
        zone = LandService.get_zone_or_404(zone_id)
        surveys = LandSurvey.query.filter_by(zone_id=zone.id) \
            .order_by(LandSurvey.survey_date.desc()).all()
        return [s.to_dict() for s in surveys]

    @staticmethod
    def create_survey(zone_id, data):
        zone = LandService.get_zone_or_404(zone_id)
        require_fields(data, ['surveyType', 'surveyDate'])

        survey = LandSurvey(
            zone_id=zone.id,
            survey_type=data['surveyType'],
            survey_date=parse_datetime(data['surveyDate'], 'surveyDate'),
            recommendations=data.get('recommendations'),
            **_metrics(data, SURVEY_METRICS),
        )
        db.session.add(survey)
        db.session.commit()
        return survey.to_dict()

    @staticmethod
    def list_changes(zone_id):
        zone = LandService.get_zone_or_404(zone_id)
        changes = LandChange.query.filter_by(zone_id=zone.id) \
            .order_by(LandChange.detected_at.desc()).all()
        return [c.to_dict() for c in changes]

    @staticmethod
    def create_change(zone_id, data):
        zone = LandService.get_zone_or_404(zone_id)
        require_fields(data, ['changeType', 'severity', 'impactDescription', 'detectedAt'])

        change = LandChange(
            zone_id=zone.id,
            change_type=data['changeType'],
            severity=data['severity'],
            before_image_url=data.get('beforeImageUrl'),
            after_image_url=data.get('afterImageUrl'),
            affected_area=parse_float(data.get('affectedArea'), 'affectedArea'),
            impact_description=data['impactDescription'],
            causes_identified=data.get('causesIdentified'),
            recommended_action=data.get('recommendedAction'),
            detected_at=parse_datetime(data['detectedAt'], 'detectedAt'),
        )
        db.session.add(change)
        db.session.commit()
        return change.to_dict()
