"""
Marks routes for the School Marksheet System
"""

from flask import Blueprint, jsonify, request

from routes.auth import login_required
from services.marks_service import MarksService

marks_bp = Blueprint('marks', __name__)

@marks_bp.route('/marks', methods=['GET'])
@login_required()
def list_marks():
    """Marks with student, subject, class and section details.

    Optional filters: class_id, subject_id, student_id.
    """
    marks = MarksService.get_marks(
        class_id=request.args.get('class_id', type=int),
        subject_id=request.args.get('subject_id', type=int),
        student_id=request.args.get('student_id', type=int),
    )
    return jsonify([m.to_dict() for m in marks])

@marks_bp.route('/marks', methods=['POST'])
@login_required()
def save_marks():
    """Record or replace one student's marks in one subject"""
    data = request.get_json(silent=True) or {}
    success, message, mark = MarksService.save_mark(
        data.get('student_id'),
        data.get('subject_id'),
        data.get('formative_20'),
        data.get('summative_80'),
    )
    if not success:
        status = 404 if message.endswith('not found') else 400
        return jsonify({'success': False, 'message': message}), status
    return jsonify({'success': True, 'message': message, 'mark': mark.to_dict()})
