"""
Marksheet rendering for the School Marksheet System

render_marksheet turns one Report into a Document tree with a fixed layout:
header, student identity with photo, marks table, learning profile rubric
and signature footer. aggregate_marksheets joins several of them with page
breaks for the class-wide download.
"""

import logging
import os
from datetime import date
from io import BytesIO

from reportlab.lib.utils import ImageReader

from services.document import Cell, Document, Image, PageBreak, Placeholder, Row, Spacer, Table, Text
from services.errors import EmptyInputError
from services.report_builder import DATE_FORMAT

logger = logging.getLogger(__name__)

NO_PHOTO = 'No Photo'
REPORT_TITLE = 'Holistic Progress Report Card'

MARKS_HEADERS = ('Subject', 'Formative (20)', 'Summative (80)', 'Total (100)', 'Grade', 'Remarks')
MARKS_COL_WIDTHS = (0.30, 0.14, 0.14, 0.14, 0.10, 0.18)

# Rubric kept for layout parity with the printed card; proficiency cells stay empty
LEARNING_PROFILE_AREAS = (
    'Language and Communication',
    'Mathematics and Reasoning',
    'Science and Technology',
    'Social Science',
    'Arts and Culture',
    'Health and Physical Education',
    'Work and Education',
)
PROFICIENCY_LEVELS = ('A', 'B', 'C', 'D')


def photo_mime_type(photo_ref):
    """.png files are image/png, everything else is treated as JPEG"""
    ext = os.path.splitext(photo_ref or '')[1].lower()
    return 'image/png' if ext == '.png' else 'image/jpeg'


def photo_node(photo_bytes, photo_ref=None):
    """Image node for readable photo bytes, otherwise the 'No Photo' placeholder"""
    if not photo_bytes:
        return Placeholder(NO_PHOTO)
    try:
        ImageReader(BytesIO(photo_bytes)).getSize()
    except Exception as e:
        logger.warning("Unreadable student photo %r, using placeholder: %s", photo_ref, e)
        return Placeholder(NO_PHOTO)
    return Image(photo_bytes, photo_mime_type(photo_ref))


def _label(text):
    return Cell(text, bold=True)


def _identity_table(report):
    s = report.student
    pairs = [
        ('Name of Student', s.name, 'Roll No.', s.roll_number),
        ('Class', report.class_name, 'Section', report.section_name),
        ('Date of Birth', s.date_of_birth, 'Gender', s.gender),
        ("Father's Name", s.father_name, "Mother's Name", s.mother_name),
        ("Guardian's Name", s.guardian_name, 'Contact No.', s.phone),
        ('Blood Group', s.blood_group, 'Height', s.height),
        ('Weight', s.weight, 'CWSN (Divyang)', s.disability_status),
        ("Student's Address", s.address, '', ''),
    ]
    rows = [Row((_label(l1), Cell(v1), _label(l2), Cell(v2))) for l1, v1, l2, v2 in pairs]
    return Table(rows, (0.22, 0.28, 0.22, 0.28))


def _photo_column(photo):
    return Table(
        (
            Row((Cell(photo, align='CENTER'),)),
            Row((Cell(Text('Photograph of student', 'small'), align='CENTER'),)),
        ),
        (1.0,),
        style='plain',
    )


def _marks_table(report):
    rows = [Row(tuple(Cell(h, bold=True, align='CENTER') for h in MARKS_HEADERS), header=True)]
    for r in report.rows:
        rows.append(Row((
            Cell(r.subject),
            Cell(str(r.formative), align='CENTER'),
            Cell(str(r.summative), align='CENTER'),
            Cell(str(r.total), bold=True, align='CENTER'),
            Cell(r.grade, bold=True, align='CENTER'),
            Cell(r.remark, align='CENTER'),
        )))
    if not report.rows:
        rows.append(Row((Cell('No marks recorded'),) + tuple(Cell('') for _ in MARKS_HEADERS[1:])))
    return Table(rows, MARKS_COL_WIDTHS)


def _learning_profile_table():
    header = Row(
        (Cell('Subject Area', bold=True),) + tuple(Cell(level, bold=True, align='CENTER') for level in PROFICIENCY_LEVELS),
        header=True,
    )
    rows = [header]
    for area in LEARNING_PROFILE_AREAS:
        rows.append(Row((Cell(area, bold=True),) + tuple(Cell('') for _ in PROFICIENCY_LEVELS)))
    return Table(rows, (0.60, 0.10, 0.10, 0.10, 0.10))


def _signature_table():
    line = '_' * 24
    return Table(
        (
            Row((Cell(line, align='CENTER'), Cell(line, align='CENTER'))),
            Row((Cell('Class Teacher', align='CENTER'), Cell('Head Teacher', align='CENTER'))),
        ),
        (0.5, 0.5),
        style='plain',
    )


def render_marksheet(report, photo_bytes=None, generated_on=None, school_name=''):
    """Build the marksheet Document for one report.

    The output depends only on the arguments; ``generated_on`` defaults to
    today and is the only part that changes between otherwise identical calls.
    """
    generated_on = generated_on or date.today()

    header = Table(
        (
            Row((Cell(Text(school_name or REPORT_TITLE, 'title'), align='CENTER'),)),
            Row((Cell(Text(REPORT_TITLE, 'subtitle'), align='CENTER'),)),
            Row((Cell(Text(f'Class: {report.class_name}', 'subtitle'), align='CENTER'),)),
        ),
        (1.0,),
        style='banner',
    )

    identity = Table(
        (Row((Cell(_identity_table(report)), Cell(_photo_column(photo_node(photo_bytes, report.student.photo))))),),
        (0.78, 0.22),
        style='plain',
    )

    return Document((
        header,
        Spacer(8),
        identity,
        Spacer(8),
        Text('Academic Performance', 'heading'),
        _marks_table(report),
        Spacer(8),
        Text('Learning Profile', 'heading'),
        _learning_profile_table(),
        Spacer(28),
        _signature_table(),
        Spacer(10),
        Text(f'Date: {generated_on.strftime(DATE_FORMAT)}', 'centered'),
    ))


def aggregate_marksheets(documents):
    """Concatenate marksheets in the given order, one page break between each"""
    documents = list(documents)
    if not documents:
        raise EmptyInputError('No students found in this class')

    blocks = []
    for index, document in enumerate(documents):
        if index:
            blocks.append(PageBreak())
        blocks.extend(document.blocks)
    return Document(tuple(blocks))
