"""
Dashboard Service — role-scoped aggregation for the four dashboards

Every dashboard is a set of independent read queries fanned out through
run_parallel and joined into one payload. If any query fails, the whole
dashboard fails.

Windows:
    farm health trend   7 days   (HealthEvent.detected_at)
    park census         30 days  (WildlifeSighting.timestamp)
    land vegetation     365 days (LandSurvey.survey_date)
"""

import logging
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import func

from database.db import db
from database.models import (
    Activity, Alert, Animal, Farm, HealthEvent, Herd, Incident, LandChange,
    LandSurvey, LandZone, Park, Patrol, WildlifePopulation, WildlifeSighting,
)
from services import access_scope
from services.parallel import run_parallel

logger = logging.getLogger('dashboard_service')

HEALTH_TREND_DAYS = 7
CENSUS_DAYS = 30
VEGETATION_DAYS = 365

HEALTHY_DEGRADATION_BELOW = 30
DEGRADED_DEGRADATION_FROM = 60

ACTIVE_PATROL_STATUSES = ('SCHEDULED', 'IN_PROGRESS')


def health_rate(healthy, total):
    """Percentage with one decimal as a string; "0" when there is nothing to count."""
    if not total:
        return '0'
    # Ties round up: 6.25 -> "6.3"
    percent = Decimal(healthy / total * 100)
    return str(percent.quantize(Decimal('0.1'), rounding=ROUND_HALF_UP))


def _count(model, requester, *criteria):
    query = access_scope.scoped(model.query, model, requester)
    if criteria:
        query = query.filter(*criteria)
    return query.count()


def _counter(model, requester, *criteria):
    return lambda: _count(model, requester, *criteria)


class DashboardService:

    # ──────────────────────────────────────────
    # OVERVIEW
    # ──────────────────────────────────────────

    @staticmethod
    def overview(requester):
        def active_alerts():
            query = access_scope.apply(Alert.query, access_scope.assigned_filter(requester))
            return query.filter(Alert.status != 'RESOLVED').count()

        def recent_activities():
            activities = (
                access_scope.scoped(Activity.query, Activity, requester)
                .order_by(Activity.timestamp.desc())
                .limit(10)
                .all()
            )
            result = []
            for activity in activities:
                activity_dict = activity.to_dict()
                activity_dict['user'] = activity.user.summary(with_email=False)
                result.append(activity_dict)
            return result

        results = run_parallel({
            'farms': _counter(Farm, requester),
            'herds': _counter(Herd, requester),
            'animals': _counter(Animal, requester),
            'parks': _counter(Park, requester),
            'wildlife': _counter(WildlifePopulation, requester),
            'landZones': _counter(LandZone, requester),
            'activeAlerts': active_alerts,
            'recentActivities': recent_activities,
        })

        recent = results.pop('recentActivities')
        return {'stats': results, 'recentActivities': recent}

    # ──────────────────────────────────────────
    # KUBE-FARM
    # ──────────────────────────────────────────

    @staticmethod
    def farm(requester):
        since = datetime.utcnow() - timedelta(days=HEALTH_TREND_DAYS)

        def herds():
            rows = (
                access_scope.scoped(Herd.query, Herd, requester)
                .order_by(Herd.updated_at.desc())
                .limit(10)
                .all()
            )
            result = []
            for herd in rows:
                herd_dict = herd.to_dict()
                herd_dict['farm'] = herd.farm.summary()
                result.append(herd_dict)
            return result

        def recent_alerts():
            query = Alert.query.filter(Alert.module == 'farm', Alert.status != 'RESOLVED')
            query = access_scope.apply(query, access_scope.farm_alert_filter(requester))
            return [a.to_dict() for a in query.order_by(Alert.created_at.desc()).limit(5).all()]

        def health_trend():
            query = db.session.query(HealthEvent.type, func.count(HealthEvent.id)) \
                .filter(HealthEvent.detected_at >= since)
            query = access_scope.scoped(query, HealthEvent, requester)
            rows = query.group_by(HealthEvent.type).order_by(HealthEvent.type).all()
            return [{'type': event_type, '_count': n} for event_type, n in rows]

        results = run_parallel({
            'totalAnimals': _counter(Animal, requester),
            'healthyAnimals': _counter(Animal, requester, Animal.status == 'HEALTHY'),
            'sickAnimals': _counter(Animal, requester, Animal.status == 'SICK'),
            'missingAnimals': _counter(Animal, requester, Animal.status == 'MISSING'),
            'herds': herds,
            'recentAlerts': recent_alerts,
            'healthTrend': health_trend,
        })

        stats = {key: results[key] for key in
                 ('totalAnimals', 'healthyAnimals', 'sickAnimals', 'missingAnimals')}
        stats['healthRate'] = health_rate(stats['healthyAnimals'], stats['totalAnimals'])
        return {
            'stats': stats,
            'herds': results['herds'],
            'recentAlerts': results['recentAlerts'],
            'healthTrend': results['healthTrend'],
        }

    # ──────────────────────────────────────────
    # KUBE-PARK
    # ──────────────────────────────────────────

    @staticmethod
    def park(requester):
        since = datetime.utcnow() - timedelta(days=CENSUS_DAYS)
        open_incident = Incident.status != 'resolved'

        def recent_incidents():
            rows = (
                access_scope.scoped(Incident.query.filter(open_incident), Incident, requester)
                .order_by(Incident.reported_at.desc())
                .limit(5)
                .all()
            )
            result = []
            for incident in rows:
                incident_dict = incident.to_dict()
                incident_dict['park'] = incident.park.summary()
                result.append(incident_dict)
            return result

        def populations():
            rows = (
                access_scope.scoped(WildlifePopulation.query, WildlifePopulation, requester)
                .order_by(WildlifePopulation.estimated_count.desc())
                .limit(10)
                .all()
            )
            return [p.to_dict() for p in rows]

        def census():
            query = db.session.query(
                WildlifeSighting.population_id, func.sum(WildlifeSighting.count),
            ).filter(WildlifeSighting.timestamp >= since)
            query = access_scope.scoped(query, WildlifeSighting, requester)
            rows = query.group_by(WildlifeSighting.population_id).all()
            return [
                {'populationId': population_id, '_sum': {'count': int(total or 0)}}
                for population_id, total in rows
            ]

        results = run_parallel({
            'parks': _counter(Park, requester),
            'wildlifeSpecies': _counter(WildlifePopulation, requester),
            'activePatrols': _counter(Patrol, requester, Patrol.status.in_(ACTIVE_PATROL_STATUSES)),
            'incidentsCount': _counter(Incident, requester, open_incident),
            'recentIncidents': recent_incidents,
            'wildlifePopulations': populations,
            'censusData': census,
        })

        return {
            'stats': {key: results[key] for key in
                      ('parks', 'wildlifeSpecies', 'activePatrols', 'incidentsCount')},
            'recentIncidents': results['recentIncidents'],
            'wildlifePopulations': results['wildlifePopulations'],
            'censusData': results['censusData'],
        }

    # ──────────────────────────────────────────
    # KUBE-LAND (not owner-scoped)
    # ──────────────────────────────────────────

    @staticmethod
    def land():
        since = datetime.utcnow() - timedelta(days=VEGETATION_DAYS)

        # 30-59 is counted in the total but in neither band
        def zone_count(*criteria):
            return lambda: LandZone.query.filter(*criteria).count()

        def recent_changes():
            rows = LandChange.query.order_by(LandChange.detected_at.desc()).limit(5).all()
            result = []
            for change in rows:
                change_dict = change.to_dict()
                change_dict['zone'] = change.zone.summary()
                result.append(change_dict)
            return result

        def vegetation_trend():
            rows = (
                db.session.query(
                    LandSurvey.zone_id,
                    func.avg(LandSurvey.ndvi),
                    func.avg(LandSurvey.health_score),
                )
                .filter(LandSurvey.survey_date >= since)
                .group_by(LandSurvey.zone_id)
                .all()
            )
            return [
                {'zoneId': zone_id, '_avg': {'ndvi': ndvi, 'healthScore': score}}
                for zone_id, ndvi, score in rows
            ]

        def zones():
            result = []
            for zone in LandZone.query.order_by(LandZone.created_at.desc()).limit(20).all():
                zone_dict = zone.to_dict()
                latest = (
                    LandSurvey.query.filter_by(zone_id=zone.id)
                    .order_by(LandSurvey.survey_date.desc()).first()
                )
                zone_dict['surveys'] = [latest.to_dict()] if latest else []
                result.append(zone_dict)
            return result

        results = run_parallel({
            'totalZones': zone_count(),
            'healthyZones': zone_count(LandZone.degradation_level < HEALTHY_DEGRADATION_BELOW),
            'degradedZones': zone_count(LandZone.degradation_level >= DEGRADED_DEGRADATION_FROM),
            'recentChanges': recent_changes,
            'vegetationTrend': vegetation_trend,
            'zones': zones,
        })

        stats = {key: results[key] for key in ('totalZones', 'healthyZones', 'degradedZones')}
        stats['healthRate'] = health_rate(stats['healthyZones'], stats['totalZones'])
        return {
            'stats': stats,
            'recentChanges': results['recentChanges'],
            'vegetationTrend': results['vegetationTrend'],
            'zones': results['zones'],
        }
