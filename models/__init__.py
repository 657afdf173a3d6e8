"""
Database models package for the School Marksheet System
"""

from .user import User
from .academic import SchoolClass, Section, Subject
from .student import Student
from .marks import Mark

__all__ = [
    'User', 'SchoolClass', 'Section', 'Subject', 'Student', 'Mark'
]
