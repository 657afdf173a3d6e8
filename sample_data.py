#!/usr/bin/env python3
"""
Sample data generator for the School Marksheet System
Creates sample data for testing and demonstration
"""

from datetime import date

from database import db
from models.academic import SchoolClass, Section, Subject
from models.marks import Mark
from models.student import Student

CLASSES = ['Class 10', 'Class 9', 'Class 8']
SECTIONS = ['A', 'B', 'C']
SUBJECTS = [
    ('Mathematics', 'MATH'),
    ('Science', 'SCI'),
    ('English', 'ENG'),
    ('Hindi', 'HIN'),
    ('Social Science', 'SST'),
]
STUDENTS = [
    {'name': 'Rahul Kumar', 'roll_number': '001', 'father_name': 'Suresh Kumar',
     'mother_name': 'Sunita Devi', 'date_of_birth': date(2008, 5, 15), 'gender': 'Male'},
    {'name': 'Priya Sharma', 'roll_number': '002', 'father_name': 'Rajesh Sharma',
     'mother_name': 'Meera Sharma', 'date_of_birth': date(2008, 7, 20), 'gender': 'Female'},
    {'name': 'Amit Singh', 'roll_number': '003', 'father_name': 'Vikram Singh',
     'mother_name': 'Kavita Singh', 'date_of_birth': date(2008, 3, 10), 'gender': 'Male'},
]
# (student index, subject index, formative, summative)
MARKS = [
    (0, 0, 18, 67), (0, 1, 16, 62), (0, 2, 19, 73),
    (1, 0, 17, 71), (1, 1, 18, 64), (1, 2, 20, 75),
    (2, 0, 15, 61), (2, 1, 17, 63), (2, 2, 18, 69),
]

def load_sample_data():
    """Insert the sample school. Needs an application context.

    Returns False without touching anything when classes already exist.
    """
    if SchoolClass.query.first():
        return False

    classes = [SchoolClass(name=name) for name in CLASSES]
    sections = [Section(name=name) for name in SECTIONS]
    db.session.add_all(classes + sections)
    db.session.commit()

    subjects = [Subject(name=name, code=code, class_id=classes[0].id) for name, code in SUBJECTS]
    db.session.add_all(subjects)

    students = [
        Student(class_id=classes[0].id, section_id=sections[0].id, **data)
        for data in STUDENTS
    ]
    db.session.add_all(students)
    db.session.commit()

    for student_idx, subject_idx, formative, summative in MARKS:
        mark = Mark(student_id=students[student_idx].id, subject_id=subjects[subject_idx].id)
        mark.set_scores(formative, summative)
        db.session.add(mark)
    db.session.commit()
    return True

def create_sample_data(app=None):
    """Create sample data for the system"""
    if app is None:
        from app import create_app
        app = create_app()

    with app.app_context():
        print("Creating sample data...")
        print(f"✓ Admin user already exists (admin/{app.config['DEFAULT_ADMIN_PASSWORD']})")

        if not load_sample_data():
            print("Sample data already present, nothing to do.")
            return

        print(f"✓ Created {len(CLASSES)} classes")
        print(f"✓ Created {len(SECTIONS)} sections")
        print(f"✓ Created {len(SUBJECTS)} subjects for {CLASSES[0]}")
        print(f"✓ Created {len(STUDENTS)} students")
        print(f"✓ Created {len(MARKS)} marks entries")
        print("\nSample data created successfully!")

if __name__ == '__main__':
    create_sample_data()
