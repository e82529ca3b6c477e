from flask import Blueprint
from flask_jwt_extended import jwt_required

from routes.responses import handle_errors, json_body, ok
from services.access_scope import current_requester
from services.report_service import ReportService

report_bp = Blueprint('report_bp', __name__)


@report_bp.route('/api/reports', methods=['GET'])
@jwt_required()
@handle_errors('Failed to get reports')
def list_reports():
    return ok({'reports': ReportService.list_reports(current_requester())})


@report_bp.route('/api/reports', methods=['POST'])
@jwt_required()
@handle_errors('Failed to generate report')
def generate_report():
    report = ReportService.generate_report(current_requester(), json_body())
    return ok({'report': report}, 'Report generated successfully', 201)


@report_bp.route('/api/reports/<report_id>', methods=['GET'])
@jwt_required()
@handle_errors('Failed to get report')
def get_report(report_id):
    return ok({'report': ReportService.get_report(report_id, current_requester())})
