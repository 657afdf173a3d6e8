"""
Database helper utilities for the School Marksheet System
"""

import logging

from database import db
from sqlalchemy.exc import IntegrityError

logger = logging.getLogger(__name__)

def safe_add_and_commit(obj, duplicate_message="Record with this identifier already exists"):
    """Safely add object to database with error handling"""
    try:
        db.session.add(obj)
        db.session.commit()
        return True, "Record added successfully"
    except IntegrityError as e:
        db.session.rollback()
        if 'UNIQUE constraint failed' in str(e) or 'duplicate key' in str(e):
            return False, duplicate_message
        logger.warning("Constraint violation on insert: %s", e)
        return False, "Database constraint violation"
    except Exception as e:
        db.session.rollback()
        logger.exception("Database error on insert")
        return False, f"Database error: {str(e)}"

def safe_update_and_commit():
    """Safely commit database changes with error handling"""
    try:
        db.session.commit()
        return True, "Records updated successfully"
    except IntegrityError as e:
        db.session.rollback()
        if 'UNIQUE constraint failed' in str(e) or 'duplicate key' in str(e):
            return False, "Duplicate entry found"
        logger.warning("Constraint violation on update: %s", e)
        return False, "Database constraint violation"
    except Exception as e:
        db.session.rollback()
        logger.exception("Database error on update")
        return False, f"Database error: {str(e)}"
