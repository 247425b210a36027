"""Flask application: JSON API for the catalog, admin login and customer pipeline."""
import logging

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from . import config
from .database import make_engine, make_session_factory, init_db
from .errors import ServiceError
from .routes import SESSION_FACTORY_KEY, close_session
from .routes import admin, customers, listings

logger = logging.getLogger(__name__)


def create_app(overrides: dict = None) -> Flask:
    """Build the app. `overrides` replaces any setting from storefront.config."""
    app = Flask(__name__)
    app.config.update(
        DATABASE_URL=config.DATABASE_URL,
        SQL_ECHO=config.SQL_ECHO,
        SECRET_KEY=config.SECRET_KEY,
        API_PREFIX=config.API_PREFIX,
        REQUIRE_ADMIN_TOKEN=config.REQUIRE_ADMIN_TOKEN,
        CREATE_TABLES=False,
    )
    if overrides:
        app.config.update(overrides)

    engine = make_engine(app.config['DATABASE_URL'], echo=app.config['SQL_ECHO'])
    if app.config['CREATE_TABLES']:
        init_db(engine)
    app.extensions['storefront.engine'] = engine
    app.extensions[SESSION_FACTORY_KEY] = make_session_factory(engine)
    app.teardown_appcontext(close_session)

    prefix = app.config['API_PREFIX'].rstrip('/')
    app.register_blueprint(admin.bp, url_prefix=f"{prefix}/admin")
    app.register_blueprint(customers.bp, url_prefix=f"{prefix}/customers")
    app.register_blueprint(listings.bp, url_prefix=f"{prefix}/listings")

    register_error_handlers(app)
    return app


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ServiceError)
    def handle_service_error(e):
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({'success': False, 'message': e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        logger.exception(f"Unhandled error: {e}")
        return jsonify({'success': False, 'message': 'Server error'}), 500


def main():
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
    app = create_app()
    logger.info(f"Serving API on {config.HOST}:{config.PORT}{config.API_PREFIX}")
    app.run(host=config.HOST, port=config.PORT)


if __name__ == '__main__':
    main()
