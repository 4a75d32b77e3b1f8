import logging
from flask import request, jsonify, g
from flask_restx import Namespace, Resource, fields
from flask_jwt_extended import create_access_token, set_access_cookies, unset_jwt_cookies
from catalogue_hub import bcrypt
from catalogue_hub.storage import get_storage
from catalogue_hub.utils.auth_middleware import token_required
from catalogue_hub.validators import validate_user

auth_ns = Namespace('auth', description='Distributor registration and sign-in', path='/auth')

logger = logging.getLogger(__name__)

register_model = auth_ns.model('Register', {
    'username': fields.String(required=True, description='Username'),
    'password': fields.String(required=True, description='Password'),
    'email': fields.String(required=True, description='Email'),
    'company': fields.String(description='Company name')
})

login_model = auth_ns.model('Login', {
    'username': fields.String(required=True, description='Username'),
    'password': fields.String(required=True, description='Password')
})


def issue_token(user, status_code, message):
    access_token = create_access_token(identity=str(user['id']), additional_claims={'username': user['username']})
    response = jsonify({
        'message': message,
        'access_token': access_token,
        'user': user
    })
    response.status_code = status_code
    set_access_cookies(response, access_token)
    return response


@auth_ns.route('/register')
class Register(Resource):
    @auth_ns.expect(register_model)
    def post(self):
        """Register a new distributor"""
        data = validate_user(request.get_json(silent=True) or {})
        storage = get_storage()

        if storage.get_user_by_username(data['username']):
            return {'message': 'Username already exists'}, 400
        if storage.get_user_by_email(data['email']):
            return {'message': 'Email already registered'}, 400

        user = storage.create_user({
            **data,
            'password': bcrypt.generate_password_hash(data['password']).decode('utf-8')
        })
        logger.info(f"Registered user {user['id']} ({user['username']})")
        return issue_token(user, 201, 'User registered successfully')


@auth_ns.route('/login')
class Login(Resource):
    @auth_ns.expect(login_model)
    def post(self):
        """Sign in and receive an access token"""
        data = request.get_json(silent=True) or {}
        if not data.get('username') or not data.get('password'):
            return {'message': 'Missing required fields: username, password'}, 400

        user = get_storage().get_user_by_username(data['username'])
        if not user or not bcrypt.check_password_hash(user['password'], data['password']):
            logger.info(f"Failed login for {data['username']}")
            return {'message': 'Invalid username or password'}, 401

        user.pop('password')
        return issue_token(user, 200, 'Logged in successfully')


@auth_ns.route('/logout')
class Logout(Resource):
    def post(self):
        """Sign out by clearing the token cookie"""
        response = jsonify({'message': 'Logged out successfully'})
        unset_jwt_cookies(response)
        return response


@auth_ns.route('/user')
class CurrentUser(Resource):
    @token_required
    @auth_ns.doc('current_user', security='BearerAuth')
    def get(self):
        """Return the signed-in distributor"""
        return g.user, 200
