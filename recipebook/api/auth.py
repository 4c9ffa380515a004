from flask import current_app, request, jsonify, session
from flask_jwt_extended import create_access_token, get_jwt_identity, jwt_required

from . import auth_bp
from .session import current_user_id
from ..services import AuthService


@auth_bp.route('/register', methods=['POST'])
def register():
    """Register a new user"""
    user = AuthService.register_user(request.get_json(silent=True), current_app.country_cache)
    return jsonify({
        'message': 'user created, please login',
        'success': True,
        'user': user.to_dict(),
        **AuthService.issue_tokens(user)
    }), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    """Login a user"""
    data = request.get_json(silent=True) or {}
    user = AuthService.login_user(data.get('username'), data.get('password'))
    return jsonify({
        'message': 'login succeeded',
        'success': True,
        'user': user.to_dict(),
        **AuthService.issue_tokens(user)
    }), 200


@auth_bp.route('/logout', methods=['POST'])
@jwt_required(optional=True)
def logout():
    """Logout a user"""
    # Tokens are discarded client-side; cooking progress lives in the session cookie
    session.clear()
    return jsonify({'message': 'logout succeeded', 'success': True}), 200


@auth_bp.route('/me', methods=['GET'])
@jwt_required()
def get_me():
    """Get current user information"""
    user = AuthService.get_user_by_id(current_user_id(required=True))
    return jsonify({'user': user.to_dict(), 'success': True}), 200


@auth_bp.route('/refresh', methods=['POST'])
@jwt_required(refresh=True)
def refresh():
    """Refresh access token"""
    current_user = get_jwt_identity()
    return jsonify({
        'access_token': create_access_token(identity=str(current_user)),
        'success': True
    }), 200


@auth_bp.route('/countries', methods=['GET'])
def countries():
    return jsonify(current_app.country_cache.get()), 200
