import logging

from database.db import db
from database.models import (
    Alert, Animal, AnimalTelemetry, Farm, HealthEvent, Herd, HerdTelemetry, PastureZone,
)
from services import access_scope
from services.activity_service import ActivityService
from services.errors import NotFoundError
from services.validators import parse_float, parse_int, require_fields

logger = logging.getLogger('farm_service')


def _visible(model, object_id, requester, message):
    query = access_scope.scoped(model.query.filter(model.id == object_id), model, requester)
    obj = query.first()
    if not obj:
        raise NotFoundError(message)
    return obj


def _latest(model, **filters):
    return model.query.filter_by(**filters).order_by(model.timestamp.desc()).first()


class FarmService:
    # ──────────────────────────────────────────
    # FARMS
    # ──────────────────────────────────────────

    @staticmethod
    def get_visible_farm(farm_id, requester):
        return _visible(Farm, farm_id, requester, 'Farm not found')

    @staticmethod
    def list_farms(requester):
        farms = access_scope.scoped(Farm.query, Farm, requester) \
            .order_by(Farm.created_at.desc()).all()

        result = []
        for farm in farms:
            farm_dict = farm.to_dict()
            farm_dict['owner'] = farm.owner.summary()
            farm_dict['herds'] = [h.summary() for h in farm.herds]
            farm_dict['_count'] = {
                'herds': len(farm.herds),
                'pastureZones': len(farm.pasture_zones),
            }
            result.append(farm_dict)
        return result

    @staticmethod
    def get_farm(farm_id, requester):
        farm = FarmService.get_visible_farm(farm_id, requester)

        open_alerts = (
            Alert.query
            .filter(Alert.farm_id == farm.id, Alert.status != 'RESOLVED')
            .order_by(Alert.created_at.desc())
            .limit(10)
            .all()
        )

        farm_dict = farm.to_dict()
        farm_dict['owner'] = farm.owner.summary()
        farm_dict['herds'] = []
        for herd in farm.herds:
            herd_dict = herd.to_dict()
            herd_dict['animals'] = [
                {'id': a.id, 'tagId': a.tag_id, 'status': a.status} for a in herd.animals
            ]
            farm_dict['herds'].append(herd_dict)
        farm_dict['pastureZones'] = [z.to_dict() for z in farm.pasture_zones]
        farm_dict['alerts'] = [a.to_dict() for a in open_alerts]
        return farm_dict

    @staticmethod
    def create_farm(requester, data):
        require_fields(data, ['name', 'location', 'latitude', 'longitude'])

        farm = Farm(
            owner_id=requester.id,
            name=data['name'],
            description=data.get('description'),
            location=data['location'],
            latitude=parse_float(data['latitude'], 'latitude'),
            longitude=parse_float(data['longitude'], 'longitude'),
            area=parse_float(data.get('area'), 'area', default=0),
        )
        db.session.add(farm)
        db.session.flush()
        ActivityService.record(
            requester.id, 'FARM_CREATED', 'create',
            description=f"Farm '{farm.name}' created", module='farm',
            entity_type='farm', entity_id=farm.id,
        )
        db.session.commit()
        logger.info(f"Farm {farm.id} created by {requester.id}")

        farm_dict = farm.to_dict()
        farm_dict['owner'] = farm.owner.summary(with_email=False)
        return farm_dict

    # ──────────────────────────────────────────
    # HERDS
    # ──────────────────────────────────────────

    @staticmethod
    def list_herds(farm_id, requester):
        farm = FarmService.get_visible_farm(farm_id, requester)
        herds = Herd.query.filter_by(farm_id=farm.id).order_by(Herd.created_at.desc()).all()

        result = []
        for herd in herds:
            herd_dict = herd.to_dict()
            herd_dict['animals'] = [a.summary() for a in herd.animals]
            latest = _latest(HerdTelemetry, herd_id=herd.id)
            herd_dict['telemetry'] = [latest.to_dict()] if latest else []
            result.append(herd_dict)
        return result

    @staticmethod
    def create_herd(farm_id, requester, data):
        farm = FarmService.get_visible_farm(farm_id, requester)
        require_fields(data, ['name', 'animalType', 'totalCount'])
        total = parse_int(data['totalCount'], 'totalCount', minimum=0)

        # A new herd starts fully healthy
        herd = Herd(
            farm_id=farm.id,
            name=data['name'],
            description=data.get('description'),
            animal_type=data['animalType'],
            total_count=total,
            healthy_count=total,
            sick_count=0,
            missing_count=0,
        )
        db.session.add(herd)
        db.session.commit()
        return herd.to_dict()

    @staticmethod
    def list_pasture_zones(farm_id, requester):
        farm = FarmService.get_visible_farm(farm_id, requester)
        zones = PastureZone.query.filter_by(farm_id=farm.id) \
            .order_by(PastureZone.created_at.desc()).all()
        return [z.to_dict() for z in zones]

    # ──────────────────────────────────────────
    # ANIMALS
    # ──────────────────────────────────────────

    @staticmethod
    def list_animals(herd_id, requester):
        herd = _visible(Herd, herd_id, requester, 'Herd not found')
        animals = Animal.query.filter_by(herd_id=herd.id).order_by(Animal.created_at.desc()).all()

        result = []
        for animal in animals:
            animal_dict = animal.to_dict()
            events = (
                HealthEvent.query.filter_by(animal_id=animal.id)
                .order_by(HealthEvent.detected_at.desc()).limit(5).all()
            )
            animal_dict['healthEvents'] = [e.to_dict() for e in events]
            latest = _latest(AnimalTelemetry, animal_id=animal.id)
            animal_dict['telemetry'] = [latest.to_dict()] if latest else []
            result.append(animal_dict)
        return result

    @staticmethod
    def get_animal(animal_id, requester):
        animal = _visible(Animal, animal_id, requester, 'Animal not found')

        events = HealthEvent.query.filter_by(animal_id=animal.id) \
            .order_by(HealthEvent.detected_at.desc()).all()
        telemetry = AnimalTelemetry.query.filter_by(animal_id=animal.id) \
            .order_by(AnimalTelemetry.timestamp.desc()).limit(50).all()

        animal_dict = animal.to_dict()
        herd_dict = animal.herd.to_dict()
        herd_dict['farm'] = animal.herd.farm.summary()
        animal_dict['herd'] = herd_dict
        animal_dict['healthEvents'] = [e.to_dict() for e in events]
        animal_dict['telemetry'] = [t.to_dict() for t in telemetry]
        return animal_dict
