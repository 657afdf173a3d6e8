"""
Reporting service for the School Marksheet System
Generates single-student and class-wide marksheet PDFs
"""

import logging
import re
from collections import namedtuple

from services.errors import NotFoundError, RenderFailure
from services.marksheet_renderer import aggregate_marksheets, render_marksheet
from services.report_builder import assemble_report

logger = logging.getLogger(__name__)


class MarksheetFile(namedtuple('MarksheetFile', ['content', 'filename'])):
    """Finished PDF plus the suggested download name"""

    __slots__ = ()

    @property
    def size(self):
        return len(self.content)


def sanitize_filename_part(value):
    """Replace every character outside [A-Za-z0-9_] with an underscore"""
    return re.sub(r'[^A-Za-z0-9_]', '_', str(value))


def student_marksheet_filename(name, roll_number):
    return f'marksheet-{sanitize_filename_part(name)}-{roll_number}.pdf'


def class_marksheet_filename(class_name):
    return f'class-marksheet-{sanitize_filename_part(class_name)}.pdf'


class ReportingService:
    """Ties storage, assembly, rendering and the PDF engine together"""

    def __init__(self, repository, engine_pool, school_name='', today=None, engine_timeout=30):
        self.repository = repository
        self.engine_pool = engine_pool
        self.school_name = school_name
        self._today = today
        self.engine_timeout = engine_timeout

    def build_report(self, student):
        """Assemble the Report for a loaded student"""
        marks = self.repository.get_marks_for_student(student.id)
        return assemble_report(student, marks, self.repository.get_subject_name)

    def render_student(self, student):
        """Assemble and render one student's marksheet Document"""
        report = self.build_report(student)
        photo = self.repository.read_photo_bytes(student.photo)
        return render_marksheet(
            report,
            photo_bytes=photo,
            generated_on=self._today() if self._today else None,
            school_name=self.school_name,
        )

    def generate_student_report(self, student_id):
        student = self.repository.get_student(student_id)
        if not student:
            raise NotFoundError('Student not found')

        logger.info("Generating marksheet for student %s (%s)", student.id, student.roll_number)
        with self.engine_pool.acquire(timeout=self.engine_timeout) as engine:
            document = self.render_student(student)
            content = engine.build(document, title=f'Marksheet - {student.name}')

        result = MarksheetFile(content, student_marksheet_filename(student.name, student.roll_number))
        logger.info("Marksheet %s generated, %d bytes", result.filename, result.size)
        return result

    def generate_class_report(self, class_id):
        """One PDF holding every student of the class in roll-number order.

        Students are rendered one after another inside a single engine
        checkout. If any student fails to render the whole batch fails.
        """
        school_class = self.repository.get_class(class_id)
        if not school_class:
            raise NotFoundError('Class not found')

        students = self.repository.get_students_by_class(class_id)
        logger.info("Generating class marksheet for %s (%d students)", school_class.name, len(students))

        with self.engine_pool.acquire(timeout=self.engine_timeout) as engine:
            documents = []
            for student in students:
                try:
                    documents.append(self.render_student(student))
                except Exception as e:
                    raise RenderFailure(
                        f'Failed to render marksheet for roll number {student.roll_number}: {e}'
                    ) from e
            combined = aggregate_marksheets(documents)
            content = engine.build(combined, title=f'Class Marksheet - {school_class.name}')

        result = MarksheetFile(content, class_marksheet_filename(school_class.name))
        logger.info("Class marksheet %s generated, %d bytes", result.filename, result.size)
        return result
