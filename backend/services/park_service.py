import logging

from database.db import db
from database.models import Incident, Park, Patrol, WildlifePopulation, WildlifeSighting
from services import access_scope
from services.errors import NotFoundError, ValidationError
from services.validators import parse_datetime, parse_float, parse_int, require_fields

logger = logging.getLogger('park_service')

RESOLVED_INCIDENT = 'resolved'


def _recent_sightings(population_id, limit):
    return (
        WildlifeSighting.query.filter_by(population_id=population_id)
        .order_by(WildlifeSighting.timestamp.desc())
        .limit(limit)
        .all()
    )


class ParkService:
    # ──────────────────────────────────────────
    # PARKS
    # ──────────────────────────────────────────

    @staticmethod
    def get_visible_park(park_id, requester):
        query = access_scope.scoped(Park.query.filter(Park.id == park_id), Park, requester)
        park = query.first()
        if not park:
            raise NotFoundError('Park not found')
        return park

    @staticmethod
    def list_parks(requester):
        parks = access_scope.scoped(Park.query, Park, requester) \
            .order_by(Park.created_at.desc()).all()

        result = []
        for park in parks:
            park_dict = park.to_dict()
            park_dict['manager'] = park.manager.summary()
            park_dict['wildlife'] = [w.summary() for w in park.wildlife]
            park_dict['_count'] = {
                'zones': len(park.zones),
                'patrols': len(park.patrols),
                'incidents': len(park.incidents),
            }
            result.append(park_dict)
        return result

    @staticmethod
    def get_park(park_id, requester):
        park = ParkService.get_visible_park(park_id, requester)

        patrols = (
            Patrol.query.filter_by(park_id=park.id)
            .order_by(Patrol.scheduled_start.desc())
            .limit(10)
            .all()
        )
        open_incidents = (
            Incident.query
            .filter(Incident.park_id == park.id, Incident.status != RESOLVED_INCIDENT)
            .order_by(Incident.reported_at.desc())
            .all()
        )

        park_dict = park.to_dict()
        park_dict['manager'] = park.manager.summary()
        park_dict['zones'] = [z.to_dict() for z in park.zones]
        park_dict['wildlife'] = []
        for population in park.wildlife:
            pop_dict = population.to_dict()
            pop_dict['sightings'] = [s.to_dict() for s in _recent_sightings(population.id, 10)]
            park_dict['wildlife'].append(pop_dict)
        park_dict['patrols'] = [p.to_dict() for p in patrols]
        park_dict['incidents'] = [i.to_dict() for i in open_incidents]
        return park_dict

    @staticmethod
    def create_park(requester, data):
        require_fields(data, ['name', 'parkType', 'location', 'latitude', 'longitude'])

        park = Park(
            manager_id=requester.id,
            name=data['name'],
            description=data.get('description'),
            park_type=data['parkType'],
            location=data['location'],
            latitude=parse_float(data['latitude'], 'latitude'),
            longitude=parse_float(data['longitude'], 'longitude'),
            area=parse_float(data.get('area'), 'area', default=0),
        )
        db.session.add(park)
        db.session.commit()
        logger.info(f"Park {park.id} created by {requester.id}")

        park_dict = park.to_dict()
        park_dict['manager'] = park.manager.summary(with_email=False)
        return park_dict

    # ──────────────────────────────────────────
    # WILDLIFE
    # ──────────────────────────────────────────

    @staticmethod
    def list_wildlife(park_id, requester):
        park = ParkService.get_visible_park(park_id, requester)
        populations = WildlifePopulation.query.filter_by(park_id=park.id) \
            .order_by(WildlifePopulation.species.asc()).all()

        result = []
        for population in populations:
            pop_dict = population.to_dict()
            pop_dict['sightings'] = [s.to_dict() for s in _recent_sightings(population.id, 5)]
            result.append(pop_dict)
        return result

    @staticmethod
    def create_wildlife(park_id, requester, data):
        park = ParkService.get_visible_park(park_id, requester)
        require_fields(data, ['species', 'estimatedCount'])

        population = WildlifePopulation(
            park_id=park.id,
            species=data['species'],
            common_name=data.get('commonName'),
            scientific_name=data.get('scientificName'),
            estimated_count=parse_int(data['estimatedCount'], 'estimatedCount', minimum=0),
            conservation_status=data.get('conservationStatus'),
            trend=data.get('trend'),
            health_status=data.get('healthStatus'),
        )
        db.session.add(population)
        db.session.commit()
        return population.to_dict()

    # ──────────────────────────────────────────
    # PATROLS
    # ──────────────────────────────────────────

    @staticmethod
    def list_patrols(park_id, requester):
        park = ParkService.get_visible_park(park_id, requester)
        patrols = Patrol.query.filter_by(park_id=park.id) \
            .order_by(Patrol.scheduled_start.desc()).all()
        return [p.to_dict() for p in patrols]

    @staticmethod
    def create_patrol(park_id, requester, data):
        park = ParkService.get_visible_park(park_id, requester)
        require_fields(data, ['name', 'patrolType', 'scheduledStart', 'scheduledEnd'])

        patrol = Patrol(
            park_id=park.id,
            name=data['name'],
            patrol_type=data['patrolType'],
            status='SCHEDULED',
            route_coordinates=data.get('routeCoordinates'),
            planned_distance=parse_float(data.get('plannedDistance'), 'plannedDistance'),
            scheduled_start=parse_datetime(data['scheduledStart'], 'scheduledStart'),
            scheduled_end=parse_datetime(data['scheduledEnd'], 'scheduledEnd'),
            rangers=data.get('rangers') or [],
        )
        db.session.add(patrol)
        db.session.commit()
        return patrol.to_dict()

    # ──────────────────────────────────────────
    # INCIDENTS
    # ──────────────────────────────────────────

    @staticmethod
    def list_incidents(park_id, requester):
        park = ParkService.get_visible_park(park_id, requester)
        incidents = Incident.query.filter_by(park_id=park.id) \
            .order_by(Incident.reported_at.desc()).all()
        return [i.to_dict() for i in incidents]

    @staticmethod
    def create_incident(park_id, requester, data):
        park = ParkService.get_visible_park(park_id, requester)
        require_fields(data, ['type', 'severity', 'title', 'latitude', 'longitude'])

        patrol_id = data.get('patrolId')
        if patrol_id:
            patrol = db.session.get(Patrol, patrol_id)
            if not patrol or patrol.park_id != park.id:
                raise ValidationError('patrolId does not belong to this park')

        incident = Incident(
            park_id=park.id,
            patrol_id=patrol_id or None,
            type=data['type'],
            severity=data['severity'],
            title=data['title'],
            description=data.get('description'),
            latitude=parse_float(data['latitude'], 'latitude'),
            longitude=parse_float(data['longitude'], 'longitude'),
            location=data.get('location'),
            status='reported',
            evidence_urls=data.get('evidenceUrls') or [],
        )
        db.session.add(incident)
        db.session.commit()
        logger.info(f"Incident {incident.id} reported in park {park.id}")
        return incident.to_dict()
