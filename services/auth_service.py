"""
Authentication service for the School Marksheet System
Handles login, password management, teacher accounts and session utilities
"""

import logging
from datetime import datetime

from sqlalchemy import func, or_

from database import db
from models.user import User
from utils.validators import validate_email, validate_name, validate_password, validate_username

logger = logging.getLogger(__name__)

class AuthService:
    """Authentication service class"""

    @staticmethod
    def authenticate(username, password, role=None):
        """Authenticate a user, optionally restricted to one role"""
        try:
            # Case-insensitive username match
            normalized = (username or '').strip()
            query = User.query.filter(func.lower(User.username) == func.lower(normalized))
            if role:
                query = query.filter_by(role=role)
            user = query.first()

            if user and user.check_password(password or ''):
                user.update_last_login()
                logger.info("User %s logged in as %s", user.username, user.role)
                return True, user, "Login successful"

            logger.warning("Failed login attempt for %r", normalized)
            return False, None, "Invalid credentials"

        except Exception as e:
            db.session.rollback()
            logger.exception("Authentication error")
            return False, None, f"Authentication error: {str(e)}"

    @staticmethod
    def change_password(user_id, old_password, new_password):
        """Change user password"""
        try:
            if not old_password or not new_password:
                return False, "Current password and new password are required"

            is_valid, message = validate_password(new_password)
            if not is_valid:
                return False, message

            user = db.session.get(User, user_id)
            if not user:
                return False, "User not found"

            if not user.check_password(old_password):
                return False, "Current password is incorrect"

            user.set_password(new_password)
            db.session.commit()
            logger.info("Password changed for %s", user.username)

            return True, "Password changed successfully"

        except Exception as e:
            db.session.rollback()
            return False, f"Error changing password: {str(e)}"

    @staticmethod
    def create_teacher(username, email, password, name):
        """Create new teacher account"""
        try:
            if not all([username, email, password, name]):
                return False, None, "Username, email, password and name are required"

            for is_valid, message in (validate_username(username),
                                      validate_email(email),
                                      validate_password(password),
                                      validate_name(name)):
                if not is_valid:
                    return False, None, message

            # Check if username or email already exists
            existing_user = User.query.filter(
                or_(func.lower(User.username) == func.lower(username.strip()),
                    func.lower(User.email) == func.lower(email.strip()))
            ).first()
            if existing_user:
                return False, None, "Username or email already exists"

            user = User(
                username=username.strip(),
                email=email.strip(),
                name=name.strip(),
                role=User.ROLE_TEACHER
            )
            user.set_password(password)

            db.session.add(user)
            db.session.commit()
            logger.info("Teacher account created: %s", user.username)

            return True, user, "Teacher created successfully"

        except Exception as e:
            db.session.rollback()
            return False, None, f"Error creating teacher: {str(e)}"

    @staticmethod
    def get_teachers():
        """All teacher accounts, newest first"""
        return (User.query
                .filter_by(role=User.ROLE_TEACHER)
                .order_by(User.created_at.desc(), User.id.desc())
                .all())

    @staticmethod
    def get_user_info(user_id):
        """Get user information"""
        try:
            user = db.session.get(User, user_id)

            if not user:
                return None, "User not found"

            return user, "User found"

        except Exception as e:
            return None, f"Error getting user info: {str(e)}"

class SessionManager:
    """Session management utilities"""

    @staticmethod
    def create_session(session, role, user_id, username):
        """Create user session"""
        session.clear()
        session['role'] = role
        session['user_id'] = user_id
        session['username'] = username
        session['login_time'] = datetime.utcnow().isoformat()
        session.permanent = True

    @staticmethod
    def clear_session(session):
        """Clear user session"""
        session.clear()

    @staticmethod
    def is_authenticated(session):
        """Check if user is authenticated"""
        return 'role' in session and 'user_id' in session

    @staticmethod
    def is_admin(session):
        """Check if current user is the administrator"""
        return session.get('role') == User.ROLE_ADMIN

    @staticmethod
    def is_teacher(session):
        """Check if current user is a teacher"""
        return session.get('role') == User.ROLE_TEACHER

    @staticmethod
    def get_current_user_id(session):
        """Get current user ID from session"""
        return session.get('user_id')

    @staticmethod
    def get_session_info(session):
        """Get complete session information"""
        if not SessionManager.is_authenticated(session):
            return None

        return {
            'role': session.get('role'),
            'user_id': session.get('user_id'),
            'username': session.get('username'),
            'login_time': session.get('login_time')
        }
