"""
Management routes for the School Marksheet System
Teachers, classes, sections, subjects and students
"""

import os

from flask import Blueprint, current_app, jsonify, request, send_from_directory

from database import db
from models.student import Student
from models.user import User
from routes.auth import login_required
from services.auth_service import AuthService
from services.management_service import ManagementService
from services.repository import SchoolRepository

management_bp = Blueprint('management', __name__)

def request_data():
    """JSON body, or form fields for multipart submissions"""
    if request.is_json:
        return request.get_json(silent=True) or {}
    return request.form.to_dict()

def upload_config():
    return {
        'upload_folder': current_app.config['UPLOAD_FOLDER'],
        'max_size': current_app.config['MAX_PHOTO_SIZE'],
        'allowed_extensions': current_app.config['ALLOWED_PHOTO_EXTENSIONS'],
    }

# ---------------- Teachers ----------------
@management_bp.route('/teachers', methods=['GET'])
@login_required(User.ROLE_ADMIN)
def list_teachers():
    teachers = AuthService.get_teachers()
    return jsonify([t.to_dict() for t in teachers])

@management_bp.route('/teachers', methods=['POST'])
@login_required(User.ROLE_ADMIN)
def create_teacher():
    """Create a teacher account"""
    data = request_data()
    success, user, message = AuthService.create_teacher(
        data.get('username'), data.get('email'), data.get('password'), data.get('name')
    )
    if not success:
        return jsonify({'success': False, 'message': message}), 400
    return jsonify({'success': True, 'message': message, 'id': user.id, 'teacher': user.to_dict()}), 201

# ---------------- Classes ----------------
@management_bp.route('/classes', methods=['GET'])
@login_required()
def list_classes():
    return jsonify([c.to_dict() for c in ManagementService.get_classes()])

@management_bp.route('/classes', methods=['POST'])
@login_required(User.ROLE_ADMIN)
def create_class():
    success, message, school_class = ManagementService.create_class(request_data())
    if not success:
        return jsonify({'success': False, 'message': message}), 400
    return jsonify({'success': True, 'message': message, 'id': school_class.id}), 201

# ---------------- Sections ----------------
@management_bp.route('/sections', methods=['GET'])
@login_required()
def list_sections():
    return jsonify([s.to_dict() for s in ManagementService.get_sections()])

@management_bp.route('/sections', methods=['POST'])
@login_required(User.ROLE_ADMIN)
def create_section():
    success, message, section = ManagementService.create_section(request_data())
    if not success:
        return jsonify({'success': False, 'message': message}), 400
    return jsonify({'success': True, 'message': message, 'id': section.id}), 201

# ---------------- Subjects ----------------
@management_bp.route('/subjects', methods=['GET'])
@login_required()
def list_subjects():
    """Subjects with their class name; ?class_id= narrows to one class"""
    class_id = request.args.get('class_id', type=int)
    return jsonify([s.to_dict() for s in ManagementService.get_subjects(class_id)])

@management_bp.route('/subjects', methods=['POST'])
@login_required(User.ROLE_ADMIN)
def create_subject():
    success, message, subject = ManagementService.create_subject(request_data())
    if not success:
        return jsonify({'success': False, 'message': message}), 400
    return jsonify({'success': True, 'message': message, 'id': subject.id}), 201

# ---------------- Students ----------------
@management_bp.route('/students', methods=['GET'])
@login_required()
def list_students():
    """Students with class and section names, ordered by roll number"""
    class_id = request.args.get('class_id', type=int)
    section_id = request.args.get('section_id', type=int)
    return jsonify([s.to_dict() for s in ManagementService.get_students(class_id, section_id)])

@management_bp.route('/students', methods=['POST'])
@login_required(User.ROLE_ADMIN)
def create_student():
    """Create a student; accepts multipart form data with an optional 'photo' file"""
    photo = request.files.get('photo')
    success, message, student = ManagementService.add_student(request_data(), photo, upload_config())
    if not success:
        return jsonify({'success': False, 'message': message}), 400
    return jsonify({'success': True, 'message': message, 'id': student.id, 'student': student.to_dict()}), 201

@management_bp.route('/students/<int:student_id>/photo', methods=['GET'])
@login_required()
def student_photo(student_id):
    student = db.session.get(Student, student_id)
    if not student:
        return jsonify({'success': False, 'message': 'Student not found'}), 404

    repository = SchoolRepository(current_app.config['UPLOAD_FOLDER'])
    path = repository.photo_path(student.photo)
    if not path or not os.path.isfile(path):
        return jsonify({'success': False, 'message': 'Photo not found'}), 404

    return send_from_directory(os.path.dirname(path), os.path.basename(path))
