"""
Fleet Dashboard Backend - Flask Application

Fuel ledger, driver directory and vehicle reports for the fleet dashboard.
"""

import logging
from flask import Flask, jsonify

import database
from config import Config
from exceptions import (
    FleetError,
    ReadOnlyRecordError,
    RecordNotFoundError,
    ReferenceDataError,
    StorageError,
    ValidationError,
)
from extensions import init_cache, limiter
from routes import register_blueprints
from utils.error_codes import StructuredError

logging.basicConfig(
    level=getattr(logging, Config.LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ValidationError: 400,
    ReadOnlyRecordError: 403,
    RecordNotFoundError: 404,
    ReferenceDataError: 500,
    StorageError: 500,
}


def status_for(error: FleetError) -> int:
    for error_type, status in ERROR_STATUS.items():
        if isinstance(error, error_type):
            return status
    return 500


def register_error_handlers(app):
    """Map application exceptions to JSON error responses."""

    @app.errorhandler(FleetError)
    def handle_fleet_error(error):
        status = status_for(error)
        structured = StructuredError.from_exception(error)
        if status >= 500:
            logger.error(f"{structured} {error.details}")
        else:
            logger.info(f"Rejected request: {structured}")

        return jsonify({
            'error': error.message,
            'code': structured.code.value,
            'details': error.details,
        }), status


def create_app(config_object=Config):
    """Build the Flask app: config, cache, rate limiter, database, blueprints."""
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_object)

    init_cache(flask_app)
    limiter.init_app(flask_app)
    database.init_app(flask_app)

    register_blueprints(flask_app)
    register_error_handlers(flask_app)

    return flask_app


app = create_app()


if __name__ == '__main__':
    app.run(host=Config.FLASK_HOST, port=Config.FLASK_PORT, debug=Config.DEBUG)
