"""Admin login routes."""
from flask import Blueprint, current_app, jsonify

from ..services import admin as admin_service
from . import get_session, json_body, bearer_token

bp = Blueprint('admin', __name__)


@bp.route('/login', methods=['POST'])
def login():
    payload = json_body()
    user, token = admin_service.login(
        get_session(),
        payload.get('username'),
        payload.get('password'),
        secret_key=current_app.config['SECRET_KEY'],
    )
    return jsonify({'success': True, 'user': user.to_dict(), 'token': token})


@bp.route('/session', methods=['GET'])
def session():
    """Identity behind the bearer token, so a client can check a stored token."""
    identity = admin_service.current_admin(bearer_token(), current_app.config['SECRET_KEY'])
    return jsonify({'success': True, 'user': {'id': identity['user_id'], 'name': identity['username']}})
