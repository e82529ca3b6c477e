"""
Alert Service — cross-module alerts and their lifecycle

    NEW -> ACKNOWLEDGED -> IN_PROGRESS -> RESOLVED

Transitions only happen through explicit status/assign calls and are not
order-checked: any of the four states may be set at any time. Concurrent
updates are last-write-wins.
"""

import logging
from datetime import datetime

from sqlalchemy import case

from database.db import db
from database.models import Alert, Farm, User
from services import access_scope
from services.activity_service import ActivityService
from services.errors import NotFoundError, ValidationError
from services.parallel import run_parallel
from services.validators import parse_float, require_fields

logger = logging.getLogger('alert_service')

STATUSES = ('NEW', 'ACKNOWLEDGED', 'IN_PROGRESS', 'RESOLVED')
SEVERITY_RANK = ('CRITICAL', 'HIGH', 'WARNING', 'MEDIUM', 'LOW', 'INFO')
LIST_LIMIT = 100
FILTER_KEYS = ('status', 'type', 'severity', 'module')


def _severity_order():
    return case(
        {severity: rank for rank, severity in enumerate(SEVERITY_RANK)},
        value=Alert.severity,
        else_=len(SEVERITY_RANK),
    )


def _with_relations(alert):
    alert_dict = alert.to_dict()
    alert_dict['assignedTo'] = alert.assigned_to.summary() if alert.assigned_to else None
    alert_dict['farm'] = alert.farm.summary() if alert.farm else None
    return alert_dict


class AlertService:

    @staticmethod
    def _get_visible(alert_id, requester):
        query = access_scope.scoped(Alert.query.filter(Alert.id == alert_id), Alert, requester)
        alert = query.first()
        if not alert:
            raise NotFoundError('Alert not found')
        return alert

    @staticmethod
    def list_alerts(requester, filters=None):
        filters = filters or {}
        query = access_scope.scoped(Alert.query, Alert, requester)
        for key in FILTER_KEYS:
            if filters.get(key):
                query = query.filter(getattr(Alert, key) == filters[key])

        alerts = query.order_by(_severity_order(), Alert.created_at.desc()) \
            .limit(LIST_LIMIT).all()
        return [_with_relations(a) for a in alerts]

    @staticmethod
    def get_alert(alert_id, requester):
        return _with_relations(AlertService._get_visible(alert_id, requester))

    @staticmethod
    def create_alert(requester, data):
        require_fields(data, ['type', 'severity', 'title', 'message', 'module'])

        farm_id = data.get('farmId')
        if farm_id:
            farm_query = access_scope.scoped(Farm.query.filter(Farm.id == farm_id), Farm, requester)
            if not farm_query.first():
                raise NotFoundError('Farm not found')

        alert = Alert(
            type=data['type'],
            severity=data['severity'],
            status='NEW',
            title=data['title'],
            message=data['message'],
            details=data.get('details'),
            module=data['module'],
            entity_type=data.get('entityType'),
            entity_id=data.get('entityId'),
            farm_id=farm_id or None,
            latitude=parse_float(data.get('latitude'), 'latitude'),
            longitude=parse_float(data.get('longitude'), 'longitude'),
            location=data.get('location'),
        )
        db.session.add(alert)
        db.session.flush()
        ActivityService.record(
            requester.id, 'ALERT_CREATED', 'create',
            description=f"Alert '{alert.title}' raised", module=alert.module,
            entity_type='alert', entity_id=alert.id,
        )
        db.session.commit()
        logger.info(f"Alert {alert.id} ({alert.severity}) created by {requester.id}")
        return _with_relations(alert)

    @staticmethod
    def update_status(alert_id, requester, data):
        status = data.get('status')
        if not status:
            raise ValidationError('Status is required')
        if status not in STATUSES:
            raise ValidationError(f"Invalid status. Must be one of: {', '.join(STATUSES)}")

        alert = AlertService._get_visible(alert_id, requester)
        alert.status = status
        if 'actionTaken' in data:
            alert.action_taken = data['actionTaken']
        if status == 'RESOLVED':
            alert.resolved_by = requester.id
            alert.resolved_at = datetime.utcnow()

        db.session.commit()
        logger.info(f"Alert {alert.id} -> {status} by {requester.id}")
        return _with_relations(alert)

    @staticmethod
    def assign(alert_id, requester, data):
        assignee_id = data.get('assignedToId')
        if not assignee_id:
            raise ValidationError('assignedToId is required')

        alert = AlertService._get_visible(alert_id, requester)
        if not db.session.get(User, assignee_id):
            raise NotFoundError('Assignee not found')

        # Assignment always acknowledges, whatever the previous state
        alert.assigned_to_id = assignee_id
        alert.status = 'ACKNOWLEDGED'
        db.session.commit()
        return _with_relations(alert)

    @staticmethod
    def stats(requester):
        clause = access_scope.assigned_filter(requester)

        def count(status=None):
            def task():
                query = access_scope.apply(Alert.query, clause)
                if status:
                    query = query.filter(Alert.status == status)
                return query.count()
            return task

        results = run_parallel({
            'total': count(),
            'new': count('NEW'),
            'acknowledged': count('ACKNOWLEDGED'),
            'inProgress': count('IN_PROGRESS'),
            'resolved': count('RESOLVED'),
        })
        return results
