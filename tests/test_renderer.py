"""
Unit tests for marksheet rendering and batch aggregation
"""

import unittest
from datetime import date
from io import BytesIO
from types import SimpleNamespace

from PIL import Image as PILImage

from services.document import PageBreak
from services.errors import EmptyInputError
from services.marksheet_renderer import (
    LEARNING_PROFILE_AREAS, NO_PHOTO, REPORT_TITLE, aggregate_marksheets, photo_mime_type, render_marksheet,
)
from services.report_builder import assemble_report

def png_bytes():
    buffer = BytesIO()
    PILImage.new('RGB', (30, 40), (200, 30, 30)).save(buffer, format='PNG')
    return buffer.getvalue()

def make_report(name='Rahul Kumar', roll_number='001', photo=None):
    student = SimpleNamespace(
        name=name, roll_number=roll_number, father_name='Suresh Kumar', mother_name='Sunita Devi',
        guardian_name=None, date_of_birth=date(2008, 5, 15), gender='Male', phone=None,
        address=None, blood_group=None, height=None, weight=None, disability_status='No',
        photo=photo, class_name='Class 10', section_name='A',
    )
    marks = [SimpleNamespace(subject_id=1, formative_score=18, summative_score=67)]
    return assemble_report(student, marks, {1: 'Mathematics'}.get)

class TestMarksheetRenderer(unittest.TestCase):

    def test_layout_sections_present(self):
        document = render_marksheet(make_report(), generated_on=date(2024, 3, 1), school_name='Adarsha Vidyalaya')

        for text in ('Adarsha Vidyalaya', REPORT_TITLE, 'Rahul Kumar', '001', 'Academic Performance',
                     'Mathematics', '85', 'Very Good', 'Learning Profile', 'Class Teacher',
                     'Head Teacher', 'Date: 01/03/2024'):
            with self.subTest(text=text):
                self.assertTrue(document.contains_text(text))

        for area in LEARNING_PROFILE_AREAS:
            self.assertTrue(document.contains_text(area))

    def test_missing_photo_renders_placeholder(self):
        document = render_marksheet(make_report(), generated_on=date(2024, 3, 1))
        self.assertTrue(document.contains_text(NO_PHOTO))
        self.assertEqual(document.images(), [])

    def test_undecodable_photo_renders_placeholder(self):
        document = render_marksheet(make_report(photo='broken.jpg'), photo_bytes=b'not an image',
                                    generated_on=date(2024, 3, 1))
        self.assertTrue(document.contains_text(NO_PHOTO))
        self.assertEqual(document.images(), [])

    def test_png_photo_is_inlined(self):
        data = png_bytes()
        document = render_marksheet(make_report(photo='student_1_face.png'), photo_bytes=data,
                                    generated_on=date(2024, 3, 1))

        images = document.images()
        self.assertEqual(len(images), 1)
        self.assertEqual(images[0].data, data)
        self.assertTrue(images[0].data_uri.startswith('data:image/png;base64,'))
        self.assertFalse(document.contains_text(NO_PHOTO))

    def test_photo_mime_type(self):
        self.assertEqual(photo_mime_type('a.PNG'), 'image/png')
        self.assertEqual(photo_mime_type('a.jpg'), 'image/jpeg')
        self.assertEqual(photo_mime_type('a.webp'), 'image/jpeg')

    def test_rendering_is_deterministic(self):
        report = make_report()
        first = render_marksheet(report, generated_on=date(2024, 3, 1))
        second = render_marksheet(report, generated_on=date(2024, 3, 1))
        self.assertEqual(first, second)

        later = render_marksheet(report, generated_on=date(2024, 3, 2))
        self.assertNotEqual(first, later)

    def test_student_name_is_kept_as_plain_text(self):
        document = render_marksheet(make_report(name='<b>Ravi & Co</b>'), generated_on=date(2024, 3, 1))
        self.assertTrue(document.contains_text('<b>Ravi & Co</b>'))

    def test_no_marks_row(self):
        student = SimpleNamespace(name='New Kid', roll_number='010', class_name='Class 9', section_name='B')
        report = assemble_report(student, [], {}.get)
        document = render_marksheet(report, generated_on=date(2024, 3, 1))
        self.assertTrue(document.contains_text('No marks recorded'))

class TestAggregation(unittest.TestCase):

    def setUp(self):
        self.documents = [
            render_marksheet(make_report(name=name, roll_number=roll), generated_on=date(2024, 3, 1))
            for name, roll in (('Rahul Kumar', '001'), ('Priya Sharma', '002'), ('Amit Singh', '003'))
        ]

    def test_empty_input_raises(self):
        with self.assertRaises(EmptyInputError) as ctx:
            aggregate_marksheets([])
        self.assertEqual(ctx.exception.message, 'No students found in this class')

    def test_single_document_has_no_page_break(self):
        combined = aggregate_marksheets(self.documents[:1])
        self.assertEqual(combined, self.documents[0])
        self.assertFalse(any(isinstance(b, PageBreak) for b in combined.blocks))

    def test_page_breaks_between_documents_only(self):
        combined = aggregate_marksheets(self.documents)

        breaks = [b for b in combined.blocks if isinstance(b, PageBreak)]
        self.assertEqual(len(breaks), 2)
        self.assertNotIsInstance(combined.blocks[-1], PageBreak)

    def test_split_pages_returns_inputs_in_order(self):
        combined = aggregate_marksheets(self.documents)
        self.assertEqual(combined.split_pages(), self.documents)

if __name__ == '__main__':
    unittest.main()
