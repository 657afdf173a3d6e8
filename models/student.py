"""
Student model for the School Marksheet System
"""

from database import db
from datetime import datetime

class Student(db.Model):
    """Student model"""
    __tablename__ = 'student'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    roll_number = db.Column(db.String(20), unique=True, nullable=False, index=True)
    class_id = db.Column(db.Integer, db.ForeignKey('school_class.id'), nullable=False)
    section_id = db.Column(db.Integer, db.ForeignKey('section.id'), nullable=False)
    father_name = db.Column(db.String(100), nullable=True)
    mother_name = db.Column(db.String(100), nullable=True)
    guardian_name = db.Column(db.String(100), nullable=True)
    date_of_birth = db.Column(db.Date, nullable=True)
    gender = db.Column(db.String(20), nullable=True)
    phone = db.Column(db.String(20), nullable=True)
    address = db.Column(db.Text, nullable=True)
    blood_group = db.Column(db.String(10), nullable=True)
    height = db.Column(db.String(20), nullable=True)
    weight = db.Column(db.String(20), nullable=True)
    disability_status = db.Column(db.String(10), nullable=False, default='No')
    photo = db.Column(db.String(255), nullable=True)  # filename inside UPLOAD_FOLDER
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    marks = db.relationship('Mark', backref='student', lazy='dynamic')

    @property
    def class_name(self):
        return self.school_class.name if self.school_class else None

    @property
    def section_name(self):
        return self.section.name if self.section else None

    def to_dict(self):
        """Convert student to dictionary"""
        return {
            'id': self.id,
            'name': self.name,
            'roll_number': self.roll_number,
            'class_id': self.class_id,
            'class_name': self.class_name,
            'section_id': self.section_id,
            'section_name': self.section_name,
            'father_name': self.father_name,
            'mother_name': self.mother_name,
            'guardian_name': self.guardian_name,
            'dob': self.date_of_birth.isoformat() if self.date_of_birth else None,
            'gender': self.gender,
            'phone': self.phone,
            'address': self.address,
            'blood_group': self.blood_group,
            'height': self.height,
            'weight': self.weight,
            'divyang_status': self.disability_status,
            'photo': self.photo,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }

    def __repr__(self):
        return f'<Student {self.roll_number}: {self.name}>'
