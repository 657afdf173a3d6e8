"""
Configuration settings for the School Marksheet System
"""

import os
import tempfile
from datetime import timedelta

class Config:
    """Base configuration class"""

    # Flask settings
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'school-marksheet-secret-key'

    # Database settings
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///school_management.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Session settings
    PERMANENT_SESSION_LIFETIME = timedelta(hours=24)
    SESSION_COOKIE_SECURE = False  # Set to True in production with HTTPS
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'

    # File upload settings
    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER') or 'uploads'
    MAX_PHOTO_SIZE = 1024 * 1024  # 1MB per student photo
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024
    ALLOWED_PHOTO_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'webp'}

    # Report settings
    SCHOOL_NAME = os.environ.get('SCHOOL_NAME') or 'Adarsha Vidyalaya'
    REPORT_FONT_PATH = os.environ.get('REPORT_FONT_PATH')  # TTF for non-Latin labels
    REPORT_ENGINE_POOL_SIZE = int(os.environ.get('REPORT_ENGINE_POOL_SIZE', 1))
    REPORT_RENDER_RETRIES = int(os.environ.get('REPORT_RENDER_RETRIES', 1))
    REPORT_ENGINE_TIMEOUT = float(os.environ.get('REPORT_ENGINE_TIMEOUT', 30))  # seconds

    # Bootstrap
    DEFAULT_ADMIN_PASSWORD = os.environ.get('DEFAULT_ADMIN_PASSWORD') or 'admin123'

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'INFO'

    # Security settings
    WTF_CSRF_ENABLED = True
    WTF_CSRF_TIME_LIMIT = None


class TestConfig(Config):
    """Configuration used by the test suite"""

    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    WTF_CSRF_ENABLED = False
    UPLOAD_FOLDER = os.path.join(tempfile.gettempdir(), 'school-marksheet-test-uploads')
    LOG_LEVEL = 'WARNING'
