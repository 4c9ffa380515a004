import logging
import os
from datetime import timedelta
from functools import partial

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from .api import auth_bp, recipes_bp, users_bp
from .errors import RecipeBookError
from .extensions import db, jwt, migrate
from .services.catalog_client import CatalogClient
from .services.country_cache import CountryCache, fetch_country_names

load_dotenv()

logging.basicConfig(
    level=os.getenv('LOG_LEVEL', 'INFO').upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


def _env_flag(name, default):
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


def create_app(test_config=None):
    app = Flask(__name__)

    app.config.update(
        SECRET_KEY=os.getenv('SECRET_KEY', 'dev-secret-key'),
        SQLALCHEMY_DATABASE_URI=os.getenv('DATABASE_URL', 'sqlite:///recipebook.db'),
        SQLALCHEMY_TRACK_MODIFICATIONS=False,
        JWT_SECRET_KEY=os.getenv('JWT_SECRET_KEY', 'dev-jwt-secret-key'),
        JWT_TOKEN_LOCATION=["headers"],
        JWT_HEADER_NAME="Authorization",
        JWT_HEADER_TYPE="Bearer",
        JWT_ACCESS_TOKEN_EXPIRES=timedelta(hours=int(os.getenv('JWT_ACCESS_TOKEN_HOURS', '24'))),
        CATALOG_BASE_URL=os.getenv('CATALOG_BASE_URL', 'https://api.spoonacular.com/recipes'),
        CATALOG_API_KEY=os.getenv('CATALOG_API_KEY'),
        CATALOG_TIMEOUT=float(os.getenv('CATALOG_TIMEOUT', '10')),
        COUNTRIES_URL=os.getenv('COUNTRIES_URL', 'https://restcountries.com/v3.1/all?fields=name'),
        COUNTRIES_TTL=int(os.getenv('COUNTRIES_TTL', str(24 * 60 * 60))),
        CORS_ORIGINS=[o.strip() for o in os.getenv('CORS_ORIGINS', 'http://localhost:8080').split(',') if o.strip()],
        COOKING_PROGRESS_LIMIT=int(os.getenv('COOKING_PROGRESS_LIMIT', '10')),
        AUTO_CREATE_TABLES=_env_flag('AUTO_CREATE_TABLES', 'true'),
    )
    if test_config:
        app.config.update(test_config)

    CORS(app, supports_credentials=True, resources={
        r"/api/*": {"origins": app.config['CORS_ORIGINS'], "allow_headers": ["Authorization", "Content-Type"]},
    })

    db.init_app(app)
    jwt.init_app(app)
    migrate.init_app(app, db)

    app.catalog_client = CatalogClient(
        app.config['CATALOG_BASE_URL'],
        app.config['CATALOG_API_KEY'],
        timeout=app.config['CATALOG_TIMEOUT'],
    )
    if not app.config['CATALOG_API_KEY']:
        logger.warning("CATALOG_API_KEY is not set; catalog requests will be rejected upstream")

    app.country_cache = CountryCache(
        partial(fetch_country_names, app.config['COUNTRIES_URL']),
        ttl=app.config['COUNTRIES_TTL'],
    )

    if app.config['AUTO_CREATE_TABLES']:
        with app.app_context():
            # create_all runs inside one transaction and rolls back on failure
            db.create_all()
            logger.info("Database tables checked/created")

    register_error_handlers(app)

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(recipes_bp, url_prefix='/api/recipes')
    app.register_blueprint(users_bp, url_prefix='/api/users')

    @app.route('/health', methods=['GET'])
    def health():
        return jsonify({'ok': True}), 200

    logger.info("App creation complete")
    return app


def register_error_handlers(app):
    @app.errorhandler(RecipeBookError)
    def handle_recipebook_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'message': error.description, 'success': False}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        logger.exception("Unhandled error: %s", error)
        return jsonify({'message': 'Internal server error', 'success': False}), 500

    @jwt.unauthorized_loader
    def missing_token(reason):
        return jsonify({'message': 'Login required', 'success': False}), 401

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return jsonify({'message': f'Invalid token: {reason}', 'success': False}), 401

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return jsonify({'message': 'Token has expired', 'success': False}), 401
