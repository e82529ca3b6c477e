"""
Access Scope — role-based visibility filters

ADMIN sees every row. Any other role sees only rows it owns directly
(farm owner, park manager, report author, activity actor), rows it owns
through a parent chain (animal -> herd -> farm -> owner), or alerts it
is assigned to. Land monitoring data has no owner and is visible to all.

Everything here is pure filter construction: no queries are executed.
"""

from collections import namedtuple

from sqlalchemy import or_

from database.models import (
    Activity, Alert, Animal, AnimalTelemetry, Farm, HealthEvent, Herd,
    HerdTelemetry, Incident, LandChange, LandSurvey, LandZone, ParkZone,
    Park, PastureZone, Patrol, Report, WildlifePopulation, WildlifeSighting,
)

ADMIN_ROLE = 'ADMIN'


class Requester(namedtuple('Requester', ['id', 'role'])):
    __slots__ = ()

    @property
    def is_admin(self):
        return self.role == ADMIN_ROLE


def current_requester():
    """Build the Requester from the verified JWT of the current request."""
    from flask_jwt_extended import get_jwt, get_jwt_identity
    return Requester(id=get_jwt_identity(), role=get_jwt().get('role'))


# ──────────────────────────────────────────
# Ownership chains
# ──────────────────────────────────────────

def _farm_owned(user_id):
    return Farm.owner_id == user_id


def _herd_owned(user_id):
    return Herd.farm.has(_farm_owned(user_id))


def _animal_owned(user_id):
    return Animal.herd.has(_herd_owned(user_id))


def _park_managed(user_id):
    return Park.manager_id == user_id


def _population_managed(user_id):
    return WildlifePopulation.park.has(_park_managed(user_id))


_OWNERSHIP = {
    Farm: _farm_owned,
    Herd: _herd_owned,
    PastureZone: lambda uid: PastureZone.farm.has(_farm_owned(uid)),
    HerdTelemetry: lambda uid: HerdTelemetry.herd.has(_herd_owned(uid)),
    Animal: _animal_owned,
    HealthEvent: lambda uid: HealthEvent.animal.has(_animal_owned(uid)),
    AnimalTelemetry: lambda uid: AnimalTelemetry.animal.has(_animal_owned(uid)),
    Park: _park_managed,
    ParkZone: lambda uid: ParkZone.park.has(_park_managed(uid)),
    WildlifePopulation: _population_managed,
    WildlifeSighting: lambda uid: WildlifeSighting.population.has(_population_managed(uid)),
    Patrol: lambda uid: Patrol.park.has(_park_managed(uid)),
    Incident: lambda uid: Incident.park.has(_park_managed(uid)),
    Alert: lambda uid: or_(Alert.assigned_to_id == uid, Alert.farm.has(_farm_owned(uid))),
    Report: lambda uid: Report.generated_by_id == uid,
    Activity: lambda uid: Activity.user_id == uid,
}

# No single owner in this model
UNSCOPED_MODELS = frozenset({LandZone, LandSurvey, LandChange})


def visibility_filter(model, requester):
    """
    Returns the SQLAlchemy clause restricting `model` to rows the requester
    may see, or None when no restriction applies.
    """
    if requester.is_admin or model in UNSCOPED_MODELS:
        return None
    try:
        builder = _OWNERSHIP[model]
    except KeyError:
        raise LookupError(f"No visibility rule for {model.__name__}")
    return builder(requester.id)


def assigned_filter(requester):
    """Alert counters only count alerts assigned to the requester."""
    if requester.is_admin:
        return None
    return Alert.assigned_to_id == requester.id


def farm_alert_filter(requester):
    """Farm dashboard alerts: alerts linked to one of the requester's farms."""
    if requester.is_admin:
        return None
    return Alert.farm.has(_farm_owned(requester.id))


def apply(query, clause):
    return query if clause is None else query.filter(clause)


def scoped(query, model, requester):
    return apply(query, visibility_filter(model, requester))
