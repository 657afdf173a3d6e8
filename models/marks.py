"""
Marks model for the School Marksheet System
One row per (student, subject): a formative and a summative component
"""

from database import db
from datetime import datetime

class Mark(db.Model):
    """Formative (0-20) and summative (0-80) scores of a student in a subject"""
    __tablename__ = 'mark'

    FORMATIVE_MAX = 20
    SUMMATIVE_MAX = 80

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey('student.id'), nullable=False)
    subject_id = db.Column(db.Integer, db.ForeignKey('subject.id'), nullable=False)
    formative_score = db.Column(db.Integer, nullable=False)
    summative_score = db.Column(db.Integer, nullable=False)
    total = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # At most one row per student and subject; a resave replaces the scores
    __table_args__ = (db.UniqueConstraint('student_id', 'subject_id', name='unique_student_subject_mark'),)

    def set_scores(self, formative_score, summative_score):
        """Store both components and recompute the total"""
        self.formative_score = formative_score
        self.summative_score = summative_score
        self.total = formative_score + summative_score

    def to_dict(self):
        """Convert mark to dictionary, using the field names the dashboards expect"""
        from services.grading import grade_of

        grade = grade_of(self.total)
        student = self.student
        return {
            'id': self.id,
            'student_id': self.student_id,
            'student_name': student.name if student else None,
            'roll_number': student.roll_number if student else None,
            'class_name': student.class_name if student else None,
            'section_name': student.section_name if student else None,
            'subject_id': self.subject_id,
            'subject_name': self.subject.name if self.subject else None,
            'formative_20': self.formative_score,
            'summative_80': self.summative_score,
            'marks_obtained': self.total,
            'max_marks': self.FORMATIVE_MAX + self.SUMMATIVE_MAX,
            'grade': grade.letter,
            'remark': grade.remark,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }

    def __repr__(self):
        return f'<Mark student={self.student_id} subject={self.subject_id}: {self.total}>'
