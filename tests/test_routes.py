"""
Integration tests for routes and workflows
"""

import shutil
import tempfile
import unittest
from io import BytesIO
from unittest.mock import patch

import openpyxl
from PIL import Image as PILImage

from app import create_app
from config import TestConfig
from database import db
from sample_data import load_sample_data
from services.auth_service import AuthService
from services.errors import RenderFailure
from services.reporting_service import MarksheetFile, ReportingService

class TestRoutes(unittest.TestCase):

    def setUp(self):
        """Set up test fixtures"""
        self.upload_dir = tempfile.mkdtemp()
        config = type('RouteTestConfig', (TestConfig,), {'UPLOAD_FOLDER': self.upload_dir})
        self.app = create_app(config)
        self.app_context = self.app.app_context()
        self.app_context.push()

        load_sample_data()
        AuthService.create_teacher('teacher1', 'teacher1@school.com', 'teach123', 'Anita Rao')

        self.client = self.app.test_client()

    def tearDown(self):
        """Clean up after tests"""
        db.session.remove()
        db.drop_all()
        self.app_context.pop()
        shutil.rmtree(self.upload_dir, ignore_errors=True)

    def login(self, username='admin', password='admin123', role=None):
        payload = {'username': username, 'password': password}
        if role:
            payload['role'] = role
        return self.client.post('/api/login', json=payload)

    # ---------------- Authentication ----------------

    def test_login_success(self):
        response = self.login()
        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        self.assertTrue(data['success'])
        self.assertEqual(data['user']['role'], 'admin')
        self.assertNotIn('password_hash', data['user'])

        me = self.client.get('/api/me').get_json()
        self.assertEqual(me['user']['username'], 'admin')

    def test_login_failure(self):
        response = self.login(password='wrongpassword')
        self.assertEqual(response.status_code, 401)
        self.assertFalse(response.get_json()['success'])

    def test_login_role_filter(self):
        self.assertEqual(self.login('teacher1', 'teach123', role='admin').status_code, 401)
        self.assertEqual(self.login('teacher1', 'teach123', role='teacher').status_code, 200)

    def test_login_requires_fields(self):
        response = self.client.post('/api/login', json={'username': 'admin'})
        self.assertEqual(response.status_code, 400)

    def test_logout(self):
        self.login()
        self.assertEqual(self.client.post('/api/logout').status_code, 200)
        self.assertEqual(self.client.get('/api/me').status_code, 401)

    def test_change_password(self):
        self.login()
        response = self.client.post('/api/change-password',
                                    json={'currentPassword': 'nope', 'newPassword': 'abcdef'})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()['message'], 'Current password is incorrect')

        response = self.client.post('/api/change-password',
                                    json={'currentPassword': 'admin123', 'newPassword': 'abcdef'})
        self.assertEqual(response.status_code, 200)

        self.client.post('/api/logout')
        self.assertEqual(self.login(password='abcdef').status_code, 200)

    def test_csrf_token_endpoint(self):
        response = self.client.get('/api/csrf-token')
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.get_json()['csrf_token'])

    # ---------------- Access control ----------------

    def test_unauthenticated_requests_rejected(self):
        for path in ('/api/classes', '/api/students', '/api/marks', '/api/teachers',
                     '/api/marksheet/student/1', '/api/marksheet/class/1'):
            with self.subTest(path=path):
                self.assertEqual(self.client.get(path).status_code, 401)

    def test_teacher_cannot_use_admin_endpoints(self):
        self.login('teacher1', 'teach123')

        self.assertEqual(self.client.get('/api/teachers').status_code, 403)
        self.assertEqual(self.client.post('/api/classes', json={'class_name': 'Class 7'}).status_code, 403)
        self.assertEqual(self.client.get('/api/classes').status_code, 200)

    # ---------------- Management ----------------

    def test_teacher_management(self):
        self.login()
        response = self.client.post('/api/teachers', json={
            'username': 'teacher2', 'email': 'teacher2@school.com', 'password': 'pass1234', 'name': 'Ravi Das'
        })
        self.assertEqual(response.status_code, 201)

        response = self.client.post('/api/teachers', json={
            'username': 'teacher2', 'email': 'another@school.com', 'password': 'pass1234', 'name': 'Ravi Das'
        })
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()['message'], 'Username or email already exists')

        teachers = self.client.get('/api/teachers').get_json()
        self.assertEqual(sorted(t['username'] for t in teachers), ['teacher1', 'teacher2'])

    def test_class_section_subject_listing(self):
        self.login()
        self.assertEqual(self.client.post('/api/classes', json={'class_name': 'Class 7'}).status_code, 201)
        self.assertEqual(self.client.post('/api/sections', json={'section_name': 'D'}).status_code, 201)

        classes = [c['class_name'] for c in self.client.get('/api/classes').get_json()]
        self.assertIn('Class 7', classes)

        subjects = self.client.get('/api/subjects?class_id=1').get_json()
        self.assertEqual(len(subjects), 5)
        self.assertTrue(all(s['class_name'] == 'Class 10' for s in subjects))

    def test_create_student_with_photo(self):
        self.login()
        buffer = BytesIO()
        PILImage.new('RGB', (20, 20), (0, 0, 255)).save(buffer, format='PNG')
        buffer.seek(0)

        response = self.client.post('/api/students', data={
            'name': 'Neha Gupta', 'roll_number': '004', 'class_id': '1', 'section_id': '1',
            'dob': '2008-09-01', 'photo': (buffer, 'neha.png'),
        }, content_type='multipart/form-data')
        self.assertEqual(response.status_code, 201)
        student_id = response.get_json()['id']

        photo = self.client.get(f'/api/students/{student_id}/photo')
        self.assertEqual(photo.status_code, 200)
        self.assertEqual(photo.mimetype, 'image/png')
        photo.close()

        listing = self.client.get('/api/students?class_id=1').get_json()
        self.assertEqual([s['roll_number'] for s in listing], ['001', '002', '003', '004'])
        self.assertEqual(listing[3]['section_name'], 'A')
        self.assertEqual(listing[3]['divyang_status'], 'No')

    def test_create_student_duplicate_roll(self):
        self.login()
        response = self.client.post('/api/students', data={
            'name': 'Someone', 'roll_number': '001', 'class_id': '1', 'section_id': '1'
        })
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()['message'], 'Roll number already exists')

    def test_student_without_photo(self):
        self.login()
        self.assertEqual(self.client.get('/api/students/1/photo').status_code, 404)
        self.assertEqual(self.client.get('/api/students/999/photo').status_code, 404)

    # ---------------- Marks ----------------

    def test_save_and_list_marks(self):
        self.login('teacher1', 'teach123')
        response = self.client.post('/api/marks', json={
            'student_id': 2, 'subject_id': 3, 'formative_20': 20, 'summative_80': 78
        })
        self.assertEqual(response.status_code, 200)
        mark = response.get_json()['mark']
        self.assertEqual(mark['marks_obtained'], 98)
        self.assertEqual(mark['grade'], 'A+')

        marks = self.client.get('/api/marks?student_id=2').get_json()
        self.assertEqual(len(marks), 3)
        english = [m for m in marks if m['subject_name'] == 'English'][0]
        self.assertEqual((english['formative_20'], english['summative_80']), (20, 78))

    def test_save_marks_validation(self):
        self.login()
        response = self.client.post('/api/marks', json={
            'student_id': 1, 'subject_id': 1, 'formative_20': 25, 'summative_80': 70
        })
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()['message'], 'Formative score cannot exceed 20')

        response = self.client.post('/api/marks', json={
            'student_id': 99, 'subject_id': 1, 'formative_20': 10, 'summative_80': 70
        })
        self.assertEqual(response.status_code, 404)

    # ---------------- Reports ----------------

    def test_student_marksheet_download(self):
        self.login()
        response = self.client.get('/api/marksheet/student/1')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.headers['Content-Type'], 'application/pdf')
        self.assertEqual(response.headers['Content-Disposition'],
                         'attachment; filename="marksheet-Rahul_Kumar-001.pdf"')
        self.assertEqual(int(response.headers['Content-Length']), len(response.data))
        self.assertEqual(response.headers['Cache-Control'], 'no-cache')
        self.assertTrue(response.data.startswith(b'%PDF'))

    def test_marksheet_filename_keeps_hyphenated_roll(self):
        self.login()
        response = self.client.post('/api/students', json={
            'name': 'Kiran Rao', 'roll_number': '10-A', 'class_id': 1, 'section_id': 1
        })
        self.assertEqual(response.status_code, 201)
        student_id = response.get_json()['id']

        response = self.client.get(f'/api/marksheet/student/{student_id}')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.headers['Content-Disposition'],
                         'attachment; filename="marksheet-Kiran_Rao-10-A.pdf"')

        response = self.client.post('/api/students', json={
            'name': 'Kiran Rao', 'roll_number': '10/A', 'class_id': 1, 'section_id': 1
        })
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()['message'],
                         'Roll number can only contain letters, numbers, hyphens, and underscores')

    def test_class_marksheet_download(self):
        self.login('teacher1', 'teach123')
        response = self.client.get('/api/marksheet/class/1')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.headers['Content-Disposition'],
                         'attachment; filename="class-marksheet-Class_10.pdf"')
        self.assertTrue(response.data.startswith(b'%PDF'))

    def test_marksheet_errors(self):
        self.login()

        response = self.client.get('/api/marksheet/student/999')
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.get_json(),
                         {'success': False, 'error': 'not_found', 'message': 'Student not found'})

        response = self.client.get('/api/marksheet/class/2')
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.get_json()['error'], 'empty_input')
        self.assertEqual(response.get_json()['message'], 'No students found in this class')

        response = self.client.get('/api/marksheet/class/999')
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.get_json()['message'], 'Class not found')

    def test_render_failure_is_retried_once(self):
        self.login()
        outcomes = [RenderFailure('engine crashed'), MarksheetFile(b'%PDF-1.4 retry', 'retry.pdf')]
        with patch.object(ReportingService, 'generate_student_report', side_effect=outcomes) as generate:
            response = self.client.get('/api/marksheet/student/1')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data, b'%PDF-1.4 retry')
        self.assertEqual(generate.call_count, 2)

    def test_persistent_render_failure(self):
        self.login()
        with patch.object(ReportingService, 'generate_class_report',
                          side_effect=RenderFailure('engine crashed')) as generate:
            response = self.client.get('/api/marksheet/class/1')

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.get_json()['error'], 'render_failure')
        self.assertEqual(generate.call_count, 2)

    def test_class_marks_export(self):
        self.login()
        response = self.client.get('/api/marks/export/class/1')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.headers['Content-Disposition'],
                         'attachment; filename="class-marks-Class_10.xlsx"')

        ws = openpyxl.load_workbook(BytesIO(response.data)).active
        headers = [cell.value for cell in ws[5]]
        self.assertIn('Mathematics Total', headers)
        grade_col = headers.index('Grade') + 1

        rows = list(ws.iter_rows(min_row=6, values_only=True))
        self.assertEqual([r[0] for r in rows], ['001', '002', '003'])
        # Rahul Kumar: (85 + 78 + 92) / 3 = 85
        self.assertEqual(ws.cell(row=6, column=grade_col).value, 'A')

        self.assertEqual(self.client.get('/api/marks/export/class/999').status_code, 404)

if __name__ == '__main__':
    unittest.main()
