"""
Unit tests for database models
"""

import unittest
from datetime import date

from sqlalchemy.exc import IntegrityError

from app import create_app
from config import TestConfig
from database import db
from models.academic import SchoolClass, Section, Subject
from models.marks import Mark
from models.student import Student
from models.user import User

class TestModels(unittest.TestCase):

    def setUp(self):
        """Set up test fixtures"""
        self.app = create_app(TestConfig)
        self.app_context = self.app.app_context()
        self.app_context.push()

        self.school_class = SchoolClass(name='Class 10')
        self.section = Section(name='A')
        db.session.add_all([self.school_class, self.section])
        db.session.commit()

        self.subject = Subject(name='Mathematics', code='MATH', class_id=self.school_class.id)
        self.student = Student(
            name='Rahul Kumar', roll_number='001',
            class_id=self.school_class.id, section_id=self.section.id,
            father_name='Suresh Kumar', date_of_birth=date(2008, 5, 15)
        )
        db.session.add_all([self.subject, self.student])
        db.session.commit()

    def tearDown(self):
        """Clean up after tests"""
        db.session.remove()
        db.drop_all()
        self.app_context.pop()

    def test_user_password(self):
        """Test password hashing and to_dict"""
        user = User(username='teacher1', email='t1@school.com', name='Anita Rao', role=User.ROLE_TEACHER)
        user.set_password('secret1')
        db.session.add(user)
        db.session.commit()

        self.assertTrue(user.check_password('secret1'))
        self.assertFalse(user.check_password('secret2'))
        self.assertFalse(user.is_admin)
        self.assertNotIn('password_hash', user.to_dict())

    def test_default_admin_seeded(self):
        admin = User.query.filter_by(username='admin').first()
        self.assertIsNotNone(admin)
        self.assertTrue(admin.is_admin)
        self.assertEqual(admin.name, 'System Administrator')

    def test_student_defaults_and_names(self):
        self.assertEqual(self.student.disability_status, 'No')
        self.assertEqual(self.student.class_name, 'Class 10')
        self.assertEqual(self.student.section_name, 'A')

        data = self.student.to_dict()
        self.assertEqual(data['dob'], '2008-05-15')
        self.assertEqual(data['divyang_status'], 'No')
        self.assertEqual(self.school_class.get_student_count(), 1)

    def test_roll_number_unique(self):
        db.session.add(Student(name='Other', roll_number='001',
                               class_id=self.school_class.id, section_id=self.section.id))
        with self.assertRaises(IntegrityError):
            db.session.commit()
        db.session.rollback()

    def test_mark_total_and_grade(self):
        mark = Mark(student_id=self.student.id, subject_id=self.subject.id)
        mark.set_scores(18, 67)
        db.session.add(mark)
        db.session.commit()

        self.assertEqual(mark.total, 85)
        data = mark.to_dict()
        self.assertEqual(data['grade'], 'A')
        self.assertEqual(data['max_marks'], 100)
        self.assertEqual(data['subject_name'], 'Mathematics')
        self.assertEqual(data['roll_number'], '001')

    def test_one_mark_per_student_and_subject(self):
        for formative, summative in ((10, 40), (12, 50)):
            mark = Mark(student_id=self.student.id, subject_id=self.subject.id)
            mark.set_scores(formative, summative)
            db.session.add(mark)
        with self.assertRaises(IntegrityError):
            db.session.commit()
        db.session.rollback()

    def test_subject_applies_to_class(self):
        shared = Subject(name='Art')
        self.assertTrue(shared.applies_to_class(self.school_class.id))
        self.assertTrue(self.subject.applies_to_class(self.school_class.id))
        self.assertFalse(self.subject.applies_to_class(self.school_class.id + 1))

if __name__ == '__main__':
    unittest.main()
