"""
Pytest fixtures for the fleet backend tests.
"""

import json
import os
import sys

import pytest

# Add backend to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend'))

# Set DATABASE_URL BEFORE importing app to use SQLite for tests
os.environ['DATABASE_URL'] = 'sqlite:///:memory:'
os.environ['FLASK_TESTING'] = 'true'

from app import app as flask_app  # noqa: E402
from database import SessionLocal, engine  # noqa: E402
from extensions import init_cache  # noqa: E402
from models import Base  # noqa: E402


VEHICLE_MASTER = [
    {
        "Vehicle Master": "Vehicle No",
        "Column4": "City",
        "Column5": "Zone",
        "Column10": "Driver Name",
        "Column11": "Driver Mobile",
        "Column12": "Inspector",
        "Column13": "Inspector Mobile",
        "Column14": "HH Target",
        "Column15": "Mileage",
    },
    {
        "Vehicle Master": "KA25AB0542",
        "Column4": "Hubli",
        "Column5": "North",
        "Column10": "Ravi Kumar",
        "Column11": "9845000001",
        "Column12": "Suresh Patil",
        "Column13": "9845000101",
        "Column14": 850,
        "Column15": 12,
    },
    {
        "Vehicle Master": "KA25AB0613",
        "Column4": "Dharwad",
        "Column5": "North",
        "Column10": "Imran Sheikh",
        "Column11": "9845000002",
        "Column12": "Suresh Patil",
        "Column13": "9845000101",
        "Column14": 1200,
        "Column15": 10,
    },
    {
        "Vehicle Master": "KA22CD1187",
        "Column4": "Belagavi",
        "Column5": "West",
        "Column10": "Mahesh Naik",
        "Column11": "9845000003",
        "Column12": "Anita Desai",
        "Column13": "9845000102",
        "Column14": 1650,
        "Column15": 11,
    },
]

FUEL_HISTORY = [
    {
        "vehicleNo": "KA25AB0542",
        "fuelAmount": 20,
        "odometerStart": 15200,
        "odometerEnd": 15440,
        "distanceTraveled": 240,
        "fuelEfficiency": 12,
        "location": "Hubli",
        "date": "2024-05-02T09:30:00.000Z",
    },
    {
        "vehicleNo": "KA25AB0613",
        "fuelAmount": 25,
        "odometerStart": 40210,
        "odometerEnd": 40460,
        "distanceTraveled": 250,
        "fuelEfficiency": 10,
        "location": "Dharwad",
        "date": "2024-05-03T08:00:00.000Z",
    },
]


@pytest.fixture
def reference_files(tmp_path):
    """Write vehicle master and fuel history files; return their paths."""
    vehicle_path = tmp_path / "Vehicle Master.json"
    fuel_path = tmp_path / "fuel.json"
    vehicle_path.write_text(json.dumps(VEHICLE_MASTER), encoding="utf-8")
    fuel_path.write_text(json.dumps(FUEL_HISTORY), encoding="utf-8")
    return {"vehicle_master": str(vehicle_path), "fuel_history": str(fuel_path)}


@pytest.fixture
def app(reference_files):
    """Create application for testing."""
    flask_app.config['TESTING'] = True
    flask_app.config['VEHICLE_MASTER_PATH'] = reference_files["vehicle_master"]
    flask_app.config['FUEL_HISTORY_PATH'] = reference_files["fuel_history"]

    # Reinitialize cache to ensure it uses NullCache
    init_cache(flask_app)

    Base.metadata.create_all(engine)

    yield flask_app

    SessionLocal.remove()
    Base.metadata.drop_all(engine)


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def db_session(app):
    """Provide a database session for tests."""
    session = SessionLocal()
    yield session
    session.rollback()
    SessionLocal.remove()


@pytest.fixture
def vehicle_master():
    return [dict(v) for v in VEHICLE_MASTER]


@pytest.fixture
def fuel_history_entries():
    return [dict(e) for e in FUEL_HISTORY]
