import logging
from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException
from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager
from flask_cors import CORS
from flask_bcrypt import Bcrypt
from flask_migrate import Migrate
from flask_restx import Api
from catalogue_hub.config import Config

migrate = Migrate()
db = SQLAlchemy()
jwt = JWTManager()
bcrypt = Bcrypt()

logger = logging.getLogger(__name__)


def create_api():
    return Api(
        title='Catalogue Hub API',
        version='1.0',
        description='Distributor catalogues, retailer access requests and order intake',
        doc='/docs',
        prefix='/api',
        ui_config={
            'displayOperationId': True,
            'docExpansion': 'none',
            'filter': True,
            'defaultModelsExpandDepth': 1,
            'defaultModelExpandDepth': 1
        },
        security=[{'BearerAuth': []}],
        authorizations={
            'BearerAuth': {
                'type': 'apiKey',
                'in': 'header',
                'name': 'Authorization',
                'description': 'Enter your token as "Bearer <token>"'
            }
        }
    )


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.basicConfig(
        level=app.config.get('LOG_LEVEL', 'INFO'),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    bcrypt.init_app(app)

    # Enable CORS
    CORS(app, resources={r"/*": {"origins": app.config.get('CORS_ORIGINS', '*')}},
         supports_credentials=app.config.get('CORS_SUPPORTS_CREDENTIALS', True),
         allow_headers=app.config.get('CORS_ALLOW_HEADERS', ["Content-Type", "Authorization"]),
         methods=app.config.get('CORS_METHODS', ["GET", "POST", "PUT", "DELETE", "OPTIONS"]))

    from .utils.auth_middleware import setup_auth_middleware
    setup_auth_middleware(jwt)

    from .storage import init_storage
    init_storage(app)

    # Register API namespaces
    from .routes import register_namespaces
    api = create_api()
    api.init_app(app)
    register_namespaces(api)

    from .validators import ValidationError

    @app.errorhandler(ValidationError)
    def validation_failed(error):
        return jsonify({'message': str(error), 'errors': error.errors}), 400

    @app.errorhandler(Exception)
    def unhandled_error(error):
        if isinstance(error, HTTPException):
            return error
        logger.exception(f"Unhandled error on {request.method} {request.path}")
        return jsonify({'message': 'Internal server error', 'error': str(error)}), 500

    logger.info(f"Application created with {app.config['STORAGE_BACKEND']} storage")
    return app
