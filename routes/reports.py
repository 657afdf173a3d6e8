"""
Report routes for the School Marksheet System
Marksheet PDF downloads and the class marks ledger
"""

import logging

from flask import Blueprint, current_app, make_response

from routes.auth import login_required
from services.errors import NotFoundError, RenderFailure
from services.excel_export_service import ExcelExportService
from services.management_service import ManagementService
from services.marks_service import MarksService
from services.reporting_service import ReportingService, sanitize_filename_part
from services.repository import SchoolRepository

logger = logging.getLogger(__name__)

reports_bp = Blueprint('reports', __name__)

XLSX_MIMETYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

def get_reporting_service():
    config = current_app.config
    return ReportingService(
        SchoolRepository(config['UPLOAD_FOLDER']),
        current_app.extensions['engine_pool'],
        school_name=config.get('SCHOOL_NAME', ''),
        engine_timeout=config.get('REPORT_ENGINE_TIMEOUT', 30),
    )

def generate_with_retry(generate, object_id):
    """Run a report generator, retrying render failures REPORT_RENDER_RETRIES times"""
    retries = current_app.config.get('REPORT_RENDER_RETRIES', 1)
    attempt = 0
    while True:
        try:
            return generate(object_id)
        except RenderFailure as e:
            if attempt >= retries:
                logger.error("Marksheet rendering failed after %d attempt(s): %s", attempt + 1, e,
                             exc_info=True)
                raise
            attempt += 1
            logger.warning("Marksheet rendering failed, retrying (%d/%d): %s", attempt, retries, e)

def download_response(content, filename, mimetype):
    response = make_response(content)
    response.headers['Content-Type'] = mimetype
    response.headers['Content-Disposition'] = f'attachment; filename="{filename}"'
    response.headers['Content-Length'] = str(len(content))
    response.headers['Cache-Control'] = 'no-cache'
    return response

@reports_bp.route('/marksheet/student/<int:student_id>', methods=['GET'])
@login_required()
def student_marksheet(student_id):
    """Single student's marksheet as a PDF download"""
    service = get_reporting_service()
    result = generate_with_retry(service.generate_student_report, student_id)
    return download_response(result.content, result.filename, 'application/pdf')

@reports_bp.route('/marksheet/class/<int:class_id>', methods=['GET'])
@login_required()
def class_marksheet(class_id):
    """Every student of a class, one marksheet per page group, as one PDF"""
    service = get_reporting_service()
    result = generate_with_retry(service.generate_class_report, class_id)
    return download_response(result.content, result.filename, 'application/pdf')

@reports_bp.route('/marks/export/class/<int:class_id>', methods=['GET'])
@login_required()
def export_class_marks(class_id):
    """Class marks ledger as an Excel workbook"""
    repository = SchoolRepository(current_app.config['UPLOAD_FOLDER'])
    school_class = repository.get_class(class_id)
    if not school_class:
        raise NotFoundError('Class not found')

    students = repository.get_students_by_class(class_id)
    subjects = ManagementService.get_subjects(class_id)
    marks = MarksService.get_marks(class_id=class_id)

    workbook = ExcelExportService.export_class_marks(school_class.name, subjects, students, marks)
    if workbook is None:
        raise RenderFailure('Could not build the marks workbook')

    content = ExcelExportService.workbook_to_bytes(workbook)
    filename = f'class-marks-{sanitize_filename_part(school_class.name)}.xlsx'
    return download_response(content, filename, XLSX_MIMETYPE)
