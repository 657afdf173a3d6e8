"""
Read-side storage access used by the report pipeline
"""

import logging
import os

from database import db
from models.academic import SchoolClass, Subject
from models.marks import Mark
from models.student import Student

logger = logging.getLogger(__name__)


class SchoolRepository:
    """Queries the report pipeline needs, plus photo file access.

    One instance per request. Subject names are cached for the lifetime of
    the instance; call ``invalidate`` after writing subjects through it.
    """

    def __init__(self, upload_folder):
        self.upload_folder = upload_folder
        self._subject_names = {}

    def invalidate(self):
        self._subject_names.clear()

    def get_student(self, student_id):
        return db.session.get(Student, student_id)

    def get_class(self, class_id):
        return db.session.get(SchoolClass, class_id)

    def get_students_by_class(self, class_id):
        """Students of a class ordered by roll number (may be empty)"""
        return (Student.query
                .filter_by(class_id=class_id)
                .order_by(Student.roll_number.asc(), Student.id.asc())
                .all())

    def get_marks_for_student(self, student_id):
        """Marks of a student ordered by subject name"""
        return (Mark.query
                .join(Subject, Mark.subject_id == Subject.id)
                .filter(Mark.student_id == student_id)
                .order_by(Subject.name.asc(), Subject.id.asc())
                .all())

    def get_subject_name(self, subject_id):
        if subject_id not in self._subject_names:
            subject = db.session.get(Subject, subject_id)
            self._subject_names[subject_id] = subject.name if subject else 'Unknown Subject'
        return self._subject_names[subject_id]

    def photo_path(self, photo_ref):
        """Absolute path of a stored photo, or None if the reference escapes the upload folder"""
        if not photo_ref:
            return None
        root = os.path.abspath(self.upload_folder)
        path = os.path.abspath(os.path.join(root, photo_ref))
        if os.path.commonpath([root, path]) != root:
            return None
        return path

    def read_photo_bytes(self, photo_ref):
        """Photo contents, or None when missing or unreadable. Never raises."""
        path = self.photo_path(photo_ref)
        if path is None:
            return None
        try:
            with open(path, 'rb') as fh:
                return fh.read()
        except OSError as e:
            logger.warning("Could not read student photo %s: %s", photo_ref, e)
            return None
