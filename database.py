"""
Database configuration and initialization for the School Marksheet System
"""

import logging
import sqlite3

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

# Initialize SQLAlchemy instance
db = SQLAlchemy()

@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    """Enable foreign key constraints for SQLite"""
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

def init_db(app):
    """Initialize database with application context"""
    with app.app_context():
        # Import all models to ensure they are registered
        from models import User, SchoolClass, Section, Subject, Student, Mark  # noqa: F401

        db.create_all()

        create_default_admin_user(app.config.get('DEFAULT_ADMIN_PASSWORD', 'admin123'))

        logger.info("Database initialized")

def create_default_admin_user(password='admin123'):
    """Create the seeded admin account for initial access"""
    from models.user import User

    existing_user = User.query.filter_by(username='admin').first()
    if existing_user:
        return existing_user

    admin = User(
        username='admin',
        email='admin@school.com',
        role=User.ROLE_ADMIN,
        name='System Administrator'
    )
    admin.set_password(password)

    try:
        db.session.add(admin)
        db.session.commit()
        logger.info("Default admin user created: admin")
        return admin
    except Exception:
        db.session.rollback()
        logger.exception("Error creating default admin user")
        raise

def reset_database(app):
    """Reset database - WARNING: This will delete all data"""
    with app.app_context():
        db.drop_all()
        db.create_all()
        create_default_admin_user(app.config.get('DEFAULT_ADMIN_PASSWORD', 'admin123'))
        logger.info("Database reset completed")

class DatabaseError(Exception):
    """Custom exception for database operations"""
    pass

def handle_db_error(func):
    """Decorator to handle database errors gracefully"""
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except Exception as e:
            db.session.rollback()
            raise DatabaseError(f"Database operation failed: {str(e)}") from e
    wrapper.__name__ = func.__name__
    wrapper.__doc__ = func.__doc__
    return wrapper
