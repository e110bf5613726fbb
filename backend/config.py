import os


class Config:
    """Application configuration from environment variables."""

    # Database
    DATABASE_URL = os.environ.get('DATABASE_URL', 'sqlite:///fleet.db')

    # Flask
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')
    FLASK_ENV = os.environ.get('FLASK_ENV', 'production')
    DEBUG = FLASK_ENV == 'development'

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Reference data (read-only JSON sources)
    DATA_DIR = os.environ.get(
        'DATA_DIR',
        os.path.join(os.path.dirname(os.path.abspath(__file__)), '..', 'data')
    )
    VEHICLE_MASTER_PATH = os.environ.get(
        'VEHICLE_MASTER_PATH', os.path.join(DATA_DIR, 'Vehicle Master.json')
    )
    FUEL_HISTORY_PATH = os.environ.get(
        'FUEL_HISTORY_PATH', os.path.join(DATA_DIR, 'fuel.json')
    )

    # Reports
    DEFAULT_REPORT_FROM = os.environ.get('DEFAULT_REPORT_FROM', '2024-05-01')
    DEFAULT_REPORT_TO = os.environ.get('DEFAULT_REPORT_TO', '2024-06-30')
    CHART_TOP_VEHICLES = int(os.environ.get('CHART_TOP_VEHICLES', 6))

    # API Configuration
    FLASK_HOST = os.environ.get('FLASK_HOST', '0.0.0.0')
    FLASK_PORT = int(os.environ.get('FLASK_PORT', 5000))
    CACHE_TIMEOUT_SECONDS = int(os.environ.get('CACHE_TIMEOUT', 60))

    # Rate limiting (disabled under test)
    RATELIMIT_ENABLED = not os.environ.get('FLASK_TESTING')
