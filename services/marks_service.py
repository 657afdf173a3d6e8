"""
Marks service for the School Marksheet System
Recording and listing formative/summative scores
"""

import logging

from sqlalchemy.exc import IntegrityError

from database import db
from models.academic import Subject
from models.marks import Mark
from models.student import Student
from utils.db_helpers import safe_update_and_commit
from utils.validators import parse_score

logger = logging.getLogger(__name__)

class MarksService:
    """Marks service class"""

    @staticmethod
    def save_mark(student_id, subject_id, formative_score, summative_score):
        """Create or replace the mark of a student in a subject.

        A second save for the same pair overwrites the scores of the existing
        row; there is never more than one row per (student, subject).
        """
        try:
            student = db.session.get(Student, student_id) if student_id is not None else None
            if not student:
                return False, "Student not found", None

            subject = db.session.get(Subject, subject_id) if subject_id is not None else None
            if not subject:
                return False, "Subject not found", None

            if not subject.applies_to_class(student.class_id):
                return False, "Subject is not taught in this student's class", None

            is_valid, message, formative = parse_score(formative_score, Mark.FORMATIVE_MAX, "Formative score")
            if not is_valid:
                return False, message, None

            is_valid, message, summative = parse_score(summative_score, Mark.SUMMATIVE_MAX, "Summative score")
            if not is_valid:
                return False, message, None

            student_id, subject_id = student.id, subject.id
            roll_number, subject_name = student.roll_number, subject.name

            mark = MarksService._find_mark(student_id, subject_id)
            created = mark is None
            if created:
                mark = Mark(student_id=student_id, subject_id=subject_id)
                db.session.add(mark)
            mark.set_scores(formative, summative)

            try:
                db.session.commit()
            except IntegrityError:
                # A concurrent save inserted the row first; overwrite it instead
                db.session.rollback()
                mark = MarksService._find_mark(student_id, subject_id)
                if mark is None:
                    raise
                created = False
                mark.set_scores(formative, summative)
                success, message = safe_update_and_commit()
                if not success:
                    return False, message, None

            logger.info("Marks %s for student %s subject %s: %d + %d",
                        'recorded' if created else 'updated', roll_number, subject_name,
                        formative, summative)
            return True, "Marks saved successfully", mark

        except Exception as e:
            db.session.rollback()
            return False, f"Error saving marks: {str(e)}", None

    @staticmethod
    def _find_mark(student_id, subject_id):
        return Mark.query.filter_by(student_id=student_id, subject_id=subject_id).first()

    @staticmethod
    def get_marks(class_id=None, subject_id=None, student_id=None):
        """Marks joined with student and subject, ordered by roll number then subject name"""
        query = (Mark.query
                 .join(Student, Mark.student_id == Student.id)
                 .join(Subject, Mark.subject_id == Subject.id))
        if class_id:
            query = query.filter(Student.class_id == class_id)
        if subject_id:
            query = query.filter(Mark.subject_id == subject_id)
        if student_id:
            query = query.filter(Mark.student_id == student_id)
        return query.order_by(Student.roll_number.asc(), Subject.name.asc(), Mark.id.asc()).all()
