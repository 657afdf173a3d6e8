"""
Validation utilities for the School Marksheet System
"""

import re
from datetime import datetime, date

def validate_roll_number(roll_number):
    """Validate student roll number format"""
    if not roll_number or len(str(roll_number).strip()) == 0:
        return False, "Roll number is required"

    if len(roll_number) > 20:
        return False, "Roll number must be 20 characters or less"

    # Allow alphanumeric and some special characters
    if not re.match(r'^[A-Za-z0-9_-]+$', roll_number):
        return False, "Roll number can only contain letters, numbers, hyphens, and underscores"

    return True, "Valid roll number"

def validate_name(name, field_name="Name", max_length=100):
    """Validate a required display name (person, class, section or subject)"""
    if not name or len(str(name).strip()) == 0:
        return False, f"{field_name} is required"

    if len(name) > max_length:
        return False, f"{field_name} must be {max_length} characters or less"

    return True, f"Valid {field_name.lower()}"

def validate_username(username):
    """Validate username format"""
    if not username or len(username.strip()) == 0:
        return False, "Username is required"

    if len(username) < 3:
        return False, "Username must be at least 3 characters long"

    if len(username) > 80:
        return False, "Username must be 80 characters or less"

    # Allow alphanumeric and underscore
    if not re.match(r'^[A-Za-z0-9_.]+$', username):
        return False, "Username can only contain letters, numbers, periods, and underscores"

    return True, "Valid username"

def validate_email(email):
    """Validate email address format"""
    if not email or len(email.strip()) == 0:
        return False, "Email is required"

    if len(email) > 120:
        return False, "Email must be 120 characters or less"

    if not re.match(r'^[^@\s]+@[^@\s]+\.[^@\s]+$', email):
        return False, "Invalid email address"

    return True, "Valid email"

def validate_password(password):
    """Validate password strength"""
    if not password:
        return False, "Password is required"

    if len(password) < 6:
        return False, "Password must be at least 6 characters long"

    if len(password) > 128:
        return False, "Password must be 128 characters or less"

    return True, "Valid password"

def parse_score(value, max_score, label="Score"):
    """Parse a whole-number score in [0, max_score].

    Returns (is_valid, message, score)."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return False, f"{label} is required", None

    if isinstance(value, bool):
        return False, f"{label} must be a whole number", None

    try:
        if isinstance(value, float):
            if not value.is_integer():
                return False, f"{label} must be a whole number", None
            score = int(value)
        else:
            score = int(str(value).strip())
    except (ValueError, TypeError):
        return False, f"{label} must be a whole number", None

    if score < 0:
        return False, f"{label} cannot be negative", None

    if score > max_score:
        return False, f"{label} cannot exceed {max_score}", None

    return True, f"Valid {label.lower()}", score

def validate_date(date_str):
    """Validate date format"""
    try:
        if isinstance(date_str, str):
            datetime.strptime(date_str, '%Y-%m-%d')
        elif isinstance(date_str, date):
            pass  # Already a date object
        else:
            return False, "Invalid date format"

        return True, "Valid date"
    except ValueError:
        return False, "Date must be in YYYY-MM-DD format"

def validate_photo_filename(filename, allowed_extensions):
    """Validate that an uploaded file looks like an allowed image"""
    if not filename or '.' not in filename:
        return False, "Only image files are allowed"

    ext = filename.rsplit('.', 1)[1].lower()
    if ext not in allowed_extensions:
        return False, "Only image files are allowed"

    return True, "Valid photo"
