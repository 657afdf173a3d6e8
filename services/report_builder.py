"""
Report assembly for the School Marksheet System

Joins a student with its class, section and marks into a Report value.
A Report holds plain copies of the data, so it stays valid after the
session that loaded the student is gone.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Tuple

from services.grading import grade_of

MISSING = 'N/A'
DATE_FORMAT = '%d/%m/%Y'


@dataclass(frozen=True)
class StudentSnapshot:
    name: str
    roll_number: str
    father_name: str
    mother_name: str
    guardian_name: str
    date_of_birth: str
    gender: str
    phone: str
    address: str
    blood_group: str
    height: str
    weight: str
    disability_status: str
    photo: Optional[str] = None


@dataclass(frozen=True)
class ReportRow:
    subject: str
    formative: int
    summative: int
    total: int
    grade: str
    remark: str


@dataclass(frozen=True)
class Report:
    student: StudentSnapshot
    class_name: str
    section_name: str
    rows: Tuple[ReportRow, ...]


def _display(value, placeholder=MISSING):
    """Render an optional field as text, substituting the placeholder when empty"""
    if value is None:
        return placeholder
    if hasattr(value, 'strftime'):
        return value.strftime(DATE_FORMAT)
    text = str(value).strip()
    return text if text else placeholder


def snapshot_student(student) -> StudentSnapshot:
    """Copy the display fields of a student (ORM row or any object with the same attributes)"""
    father = getattr(student, 'father_name', None)
    guardian = getattr(student, 'guardian_name', None) or father
    return StudentSnapshot(
        name=_display(student.name),
        roll_number=_display(student.roll_number),
        father_name=_display(father),
        mother_name=_display(getattr(student, 'mother_name', None)),
        guardian_name=_display(guardian),
        date_of_birth=_display(getattr(student, 'date_of_birth', None)),
        gender=_display(getattr(student, 'gender', None)),
        phone=_display(getattr(student, 'phone', None)),
        address=_display(getattr(student, 'address', None)),
        blood_group=_display(getattr(student, 'blood_group', None)),
        height=_display(getattr(student, 'height', None)),
        weight=_display(getattr(student, 'weight', None)),
        disability_status=_display(getattr(student, 'disability_status', None), 'No'),
        photo=getattr(student, 'photo', None) or None,
    )


def assemble_report(student, marks: Iterable, subject_name_of: Callable[[int], str]) -> Report:
    """Build the Report for one student.

    Rows follow the order of ``marks``; callers wanting a stable order sort
    before calling. Totals are recomputed from the two components and graded
    with the grading policy.
    """
    rows = []
    for mark in marks:
        formative = mark.formative_score
        summative = mark.summative_score
        total = formative + summative
        grade = grade_of(total)
        rows.append(ReportRow(
            subject=subject_name_of(mark.subject_id),
            formative=formative,
            summative=summative,
            total=total,
            grade=grade.letter,
            remark=grade.remark,
        ))

    return Report(
        student=snapshot_student(student),
        class_name=_display(getattr(student, 'class_name', None)),
        section_name=_display(getattr(student, 'section_name', None)),
        rows=tuple(rows),
    )
