import logging

from database.db import db
from database.models import Report
from services import access_scope
from services.activity_service import ActivityService
from services.errors import NotFoundError
from services.validators import parse_datetime, require_fields

logger = logging.getLogger('report_service')


class ReportService:
    """Reports are stored snapshots; the server never computes their contents."""

    @staticmethod
    def list_reports(requester):
        reports = access_scope.scoped(Report.query, Report, requester) \
            .order_by(Report.generated_at.desc()).all()

        result = []
        for report in reports:
            report_dict = report.to_dict()
            report_dict['generatedBy'] = report.generated_by.summary(with_email=False)
            result.append(report_dict)
        return result

    @staticmethod
    def get_report(report_id, requester):
        query = access_scope.scoped(Report.query.filter(Report.id == report_id), Report, requester)
        report = query.first()
        if not report:
            raise NotFoundError('Report not found')

        report_dict = report.to_dict()
        report_dict['generatedBy'] = report.generated_by.summary()
        return report_dict

    @staticmethod
    def generate_report(requester, data):
        # An empty snapshot ({} or []) is still a snapshot
        require_fields(data, ['title', 'type', 'module', 'dataSnapshot'])

        report = Report(
            generated_by_id=requester.id,
            title=data['title'],
            type=data['type'],
            module=data['module'],
            description=data.get('description'),
            period_start=parse_datetime(data.get('periodStart'), 'periodStart'),
            period_end=parse_datetime(data.get('periodEnd'), 'periodEnd'),
            data_snapshot=data['dataSnapshot'],
            charts=data.get('charts'),
        )
        db.session.add(report)
        db.session.flush()
        ActivityService.record(
            requester.id, 'REPORT_GENERATED', 'create',
            description=f"Report '{report.title}' generated", module=report.module,
            entity_type='report', entity_id=report.id,
        )
        db.session.commit()
        logger.info(f"Report {report.id} generated by {requester.id}")

        report_dict = report.to_dict()
        report_dict['generatedBy'] = report.generated_by.summary()
        return report_dict
