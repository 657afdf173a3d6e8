"""
Academic structure models for the School Marksheet System
SchoolClass, Section, and Subject models
"""

from database import db
from datetime import datetime

class SchoolClass(db.Model):
    """A class (grade level) such as 'Class 10'"""
    __tablename__ = 'school_class'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    students = db.relationship('Student', backref='school_class', lazy='dynamic')
    subjects = db.relationship('Subject', backref='school_class', lazy='dynamic')

    def get_student_count(self):
        """Get count of students in this class"""
        return self.students.count()

    def to_dict(self):
        """Convert class to dictionary"""
        return {
            'id': self.id,
            'class_name': self.name,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }

    def __repr__(self):
        return f'<SchoolClass {self.name}>'

class Section(db.Model):
    """A section within a class, such as 'A'"""
    __tablename__ = 'section'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(50), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    students = db.relationship('Student', backref='section', lazy='dynamic')

    def to_dict(self):
        """Convert section to dictionary"""
        return {
            'id': self.id,
            'section_name': self.name,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }

    def __repr__(self):
        return f'<Section {self.name}>'

class Subject(db.Model):
    """Subject taught to one class, or to every class when class_id is null"""
    __tablename__ = 'subject'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    code = db.Column(db.String(20), nullable=True, index=True)
    class_id = db.Column(db.Integer, db.ForeignKey('school_class.id'), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    marks = db.relationship('Mark', backref='subject', lazy='dynamic')

    def applies_to_class(self, class_id):
        """Check whether this subject is taught in the given class"""
        return self.class_id is None or self.class_id == class_id

    def to_dict(self):
        """Convert subject to dictionary"""
        return {
            'id': self.id,
            'subject_name': self.name,
            'subject_code': self.code,
            'class_id': self.class_id,
            'class_name': self.school_class.name if self.school_class else None,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }

    def __repr__(self):
        return f'<Subject {self.code or "-"}: {self.name}>'
