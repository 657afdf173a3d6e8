"""
Authentication routes for the School Marksheet System
Handles login, logout, session info and password changes
"""

import logging

from flask import Blueprint, jsonify, request, session
from flask_wtf.csrf import generate_csrf

from models.user import User
from services.auth_service import AuthService, SessionManager

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__)

@auth_bp.route('/csrf-token', methods=['GET'])
def csrf_token():
    """Token for the X-CSRFToken header of state-changing requests"""
    return jsonify({'csrf_token': generate_csrf()})

@auth_bp.route('/login', methods=['POST'])
def login():
    """Login handler for both roles"""
    data = request.get_json(silent=True) or {}
    username = (data.get('username') or '').strip()
    password = data.get('password') or ''
    role = data.get('role') or None

    # Validate input
    if not username or not password:
        return jsonify({'success': False, 'message': 'Username and password are required'}), 400

    if role and role not in User.ROLES:
        return jsonify({'success': False, 'message': 'Invalid role'}), 400

    success, user, message = AuthService.authenticate(username, password, role)
    if not success:
        return jsonify({'success': False, 'message': message}), 401

    SessionManager.create_session(session, user.role, user.id, user.username)
    return jsonify({'success': True, 'message': message, 'user': user.to_dict()})

@auth_bp.route('/logout', methods=['POST'])
def logout():
    """Logout handler for both roles"""
    SessionManager.clear_session(session)
    return jsonify({'success': True, 'message': 'Logged out successfully'})

@auth_bp.route('/me', methods=['GET'])
def me():
    """Current user"""
    if not SessionManager.is_authenticated(session):
        return jsonify({'success': False, 'message': 'Not authenticated'}), 401

    user, message = AuthService.get_user_info(SessionManager.get_current_user_id(session))
    if not user:
        SessionManager.clear_session(session)
        return jsonify({'success': False, 'message': message}), 401

    return jsonify({'success': True, 'user': user.to_dict()})

@auth_bp.route('/change-password', methods=['POST'])
def change_password():
    """Change password for authenticated users"""
    if not SessionManager.is_authenticated(session):
        return jsonify({'success': False, 'message': 'Not authenticated'}), 401

    data = request.get_json(silent=True) or {}
    success, message = AuthService.change_password(
        SessionManager.get_current_user_id(session),
        data.get('currentPassword'),
        data.get('newPassword')
    )
    if not success:
        return jsonify({'success': False, 'message': message}), 400

    return jsonify({'success': True, 'message': message})

# Authentication decorator
def login_required(role=None):
    """Decorator to require authentication, and optionally a role"""
    def decorator(f):
        def decorated_function(*args, **kwargs):
            if not SessionManager.is_authenticated(session):
                return jsonify({'success': False, 'message': 'Not authenticated'}), 401

            if role and session.get('role') != role:
                logger.warning("User %s denied access to %s", session.get('username'), request.path)
                return jsonify({'success': False, 'message': 'Access denied'}), 403

            return f(*args, **kwargs)

        decorated_function.__name__ = f.__name__
        decorated_function.__doc__ = f.__doc__
        return decorated_function
    return decorator
