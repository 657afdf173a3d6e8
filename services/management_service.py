"""
Management service for the School Marksheet System
Business logic for classes, sections, subjects and students
"""

import logging
import os
from datetime import datetime

from werkzeug.utils import secure_filename

from database import db
from models.academic import SchoolClass, Section, Subject
from models.student import Student
from utils.db_helpers import safe_add_and_commit
from utils.validators import validate_date, validate_name, validate_photo_filename, validate_roll_number

logger = logging.getLogger(__name__)

# Optional student fields copied straight from the submitted form
STUDENT_TEXT_FIELDS = (
    'father_name', 'mother_name', 'guardian_name', 'gender', 'phone',
    'address', 'blood_group', 'height', 'weight',
)

def _to_int(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return None

def _clean(value):
    if value is None:
        return None
    value = str(value).strip()
    return value or None

class ManagementService:
    """Management service class"""

    @staticmethod
    def get_classes():
        return SchoolClass.query.order_by(SchoolClass.name.asc(), SchoolClass.id.asc()).all()

    @staticmethod
    def create_class(class_data):
        """Create new class"""
        try:
            name = _clean(class_data.get('class_name'))
            is_valid, message = validate_name(name, "Class name")
            if not is_valid:
                return False, message, None

            school_class = SchoolClass(name=name)
            success, message = safe_add_and_commit(school_class)
            if not success:
                return False, message, None
            logger.info("Class created: %s", school_class.name)
            return True, "Class created successfully", school_class

        except Exception as e:
            return False, f"Error creating class: {str(e)}", None

    @staticmethod
    def get_sections():
        return Section.query.order_by(Section.name.asc(), Section.id.asc()).all()

    @staticmethod
    def create_section(section_data):
        """Create new section"""
        try:
            name = _clean(section_data.get('section_name'))
            is_valid, message = validate_name(name, "Section name", max_length=50)
            if not is_valid:
                return False, message, None

            section = Section(name=name)
            success, message = safe_add_and_commit(section)
            if not success:
                return False, message, None
            logger.info("Section created: %s", section.name)
            return True, "Section created successfully", section

        except Exception as e:
            return False, f"Error creating section: {str(e)}", None

    @staticmethod
    def get_subjects(class_id=None):
        """Subjects ordered by name; with a class, those taught in it (including all-class subjects)"""
        query = Subject.query
        if class_id:
            query = query.filter(db.or_(Subject.class_id == class_id, Subject.class_id.is_(None)))
        return query.order_by(Subject.name.asc(), Subject.id.asc()).all()

    @staticmethod
    def create_subject(subject_data):
        """Create new subject"""
        try:
            name = _clean(subject_data.get('subject_name'))
            is_valid, message = validate_name(name, "Subject name")
            if not is_valid:
                return False, message, None

            code = _clean(subject_data.get('subject_code'))
            if code and len(code) > 20:
                return False, "Subject code must be 20 characters or less", None

            class_id = None
            if subject_data.get('class_id') not in (None, ''):
                class_id = _to_int(subject_data.get('class_id'))
                if class_id is None or not db.session.get(SchoolClass, class_id):
                    return False, "Invalid class selected", None

            subject = Subject(name=name, code=code, class_id=class_id)
            success, message = safe_add_and_commit(subject)
            if not success:
                return False, message, None
            logger.info("Subject created: %s", subject.name)
            return True, "Subject created successfully", subject

        except Exception as e:
            return False, f"Error creating subject: {str(e)}", None

    @staticmethod
    def get_students(class_id=None, section_id=None):
        """Students ordered by roll number, optionally filtered by class and section"""
        query = Student.query
        if class_id:
            query = query.filter_by(class_id=class_id)
        if section_id:
            query = query.filter_by(section_id=section_id)
        return query.order_by(Student.roll_number.asc(), Student.id.asc()).all()

    @staticmethod
    def add_student(student_data, photo_file=None, upload_config=None):
        """Add single student, storing the uploaded photo if one was sent"""
        try:
            name = _clean(student_data.get('name'))
            roll_number = _clean(student_data.get('roll_number'))
            class_id = _to_int(student_data.get('class_id'))
            section_id = _to_int(student_data.get('section_id'))

            if not all([name, roll_number, class_id, section_id]):
                return False, "Name, roll number, class and section are required", None

            is_valid, message = validate_name(name)
            if not is_valid:
                return False, message, None

            is_valid, message = validate_roll_number(roll_number)
            if not is_valid:
                return False, message, None

            # Check if roll number already exists
            if Student.query.filter_by(roll_number=roll_number).first():
                return False, "Roll number already exists", None

            # Validate class and section exist
            if not db.session.get(SchoolClass, class_id):
                return False, "Invalid class selected", None
            if not db.session.get(Section, section_id):
                return False, "Invalid section selected", None

            date_of_birth = None
            dob = _clean(student_data.get('dob'))
            if dob:
                is_valid, message = validate_date(dob)
                if not is_valid:
                    return False, message, None
                date_of_birth = datetime.strptime(dob, '%Y-%m-%d').date()

            student = Student(
                name=name,
                roll_number=roll_number,
                class_id=class_id,
                section_id=section_id,
                date_of_birth=date_of_birth,
                disability_status=_clean(student_data.get('divyang_status')) or 'No'
            )
            for field in STUDENT_TEXT_FIELDS:
                setattr(student, field, _clean(student_data.get(field)))

            if photo_file is not None and photo_file.filename:
                success, message, filename = ManagementService.save_student_photo(photo_file, **(upload_config or {}))
                if not success:
                    return False, message, None
                student.photo = filename

            success, message = safe_add_and_commit(student, duplicate_message="Roll number already exists")
            if not success:
                ManagementService.remove_student_photo(student.photo, (upload_config or {}).get('upload_folder'))
                return False, message, None

            logger.info("Student created: %s (%s)", student.name, student.roll_number)
            return True, "Student added successfully", student

        except Exception as e:
            return False, f"Error adding student: {str(e)}", None

    @staticmethod
    def save_student_photo(photo_file, upload_folder='uploads', max_size=1024 * 1024,
                           allowed_extensions=('png', 'jpg', 'jpeg', 'gif', 'webp')):
        """Validate and store an uploaded photo.

        Returns (success, message, stored filename)."""
        is_valid, message = validate_photo_filename(photo_file.filename, allowed_extensions)
        if not is_valid:
            return False, message, None

        mimetype = photo_file.mimetype or ''
        if mimetype and not mimetype.startswith('image/') and mimetype != 'application/octet-stream':
            return False, "Only image files are allowed", None

        stream = photo_file.stream
        stream.seek(0, os.SEEK_END)
        size = stream.tell()
        stream.seek(0)
        if size > max_size:
            return False, f"Photo must be {max_size // 1024} KB or smaller", None

        timestamp = datetime.utcnow().strftime('%Y%m%d%H%M%S%f')
        filename = f"student_{timestamp}_{secure_filename(photo_file.filename)}"
        os.makedirs(upload_folder, exist_ok=True)
        photo_file.save(os.path.join(upload_folder, filename))
        logger.info("Stored student photo %s (%d bytes)", filename, size)
        return True, "Photo uploaded successfully", filename

    @staticmethod
    def remove_student_photo(filename, upload_folder):
        if not filename or not upload_folder:
            return
        try:
            os.remove(os.path.join(upload_folder, filename))
        except OSError as e:
            logger.warning("Could not remove photo %s: %s", filename, e)
