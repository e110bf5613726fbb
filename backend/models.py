from datetime import datetime
from sqlalchemy import (
    Column, Integer, String, Float, DateTime, Text, create_engine, JSON
)
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy import TypeDecorator
import uuid as uuid_module


Base = declarative_base()


# Custom UUID type that works with both PostgreSQL and SQLite
class GUID(TypeDecorator):
    """Platform-independent GUID type.

    Uses PostgreSQL's UUID type when available, otherwise stores as String(36).
    """
    impl = String(36)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            return dialect.type_descriptor(UUID(as_uuid=True))
        else:
            return dialect.type_descriptor(String(36))

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        elif dialect.name == 'postgresql':
            return value
        else:
            return str(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return value
        elif isinstance(value, uuid_module.UUID):
            return value
        else:
            return uuid_module.UUID(value)


# Custom JSON type that works with both PostgreSQL (JSONB) and SQLite (JSON)
class JSONType(TypeDecorator):
    """Platform-independent JSON type.

    Uses PostgreSQL's JSONB type when available, otherwise uses JSON.
    """
    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            return dialect.type_descriptor(JSONB)
        else:
            return dialect.type_descriptor(JSON)


class FuelEvent(Base):
    """Fill-up events with odometer readings bounding a trip segment.

    ``date`` is kept as the ISO-8601 text the caller supplied so that range
    filters and "last before" lookups compare lexically.
    """

    __tablename__ = 'fuel'

    id = Column(Integer, primary_key=True, autoincrement=True)
    vehicle_no = Column(String(64), nullable=False, index=True)
    fuel_amount = Column(Float, nullable=False)
    cost = Column(Float, default=0)
    odometer_start = Column(Integer, nullable=False)
    odometer_end = Column(Integer, nullable=False)
    distance_traveled = Column(Float, nullable=False)
    fuel_efficiency = Column(Float, nullable=False)
    location = Column(Text, nullable=False)
    date = Column(String(40), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'vehicle_no': self.vehicle_no,
            'fuel_amount': self.fuel_amount,
            'cost': self.cost,
            'odometer_start': self.odometer_start,
            'odometer_end': self.odometer_end,
            'distance_traveled': self.distance_traveled,
            'fuel_efficiency': self.fuel_efficiency,
            'location': self.location,
            'date': self.date,
        }


class Driver(Base):
    """Driver and inspector contacts assigned to a vehicle."""

    __tablename__ = 'drivers'

    id = Column(Integer, primary_key=True, autoincrement=True)
    vehicle_no = Column(String(64), nullable=False, index=True)
    driver_name = Column(String(255), nullable=False)
    mobile = Column(String(32), nullable=False)
    inspector = Column(String(255))
    inspector_mobile = Column(String(32))
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'vehicle_no': self.vehicle_no,
            'driver_name': self.driver_name,
            'mobile': self.mobile,
            'inspector': self.inspector,
            'inspector_mobile': self.inspector_mobile,
        }


class ReportSnapshot(Base):
    """A generated vehicle report, stored so other views can load it by id."""

    __tablename__ = 'report_snapshots'

    id = Column(GUID(), primary_key=True, default=uuid_module.uuid4)
    vehicle_no = Column(String(64), nullable=False, index=True)
    from_date = Column(String(40), nullable=False)
    to_date = Column(String(40), nullable=False)
    reference_mileage = Column(Float, default=0)
    rows = Column(JSONType(), nullable=False)
    driver = Column(JSONType())
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': str(self.id),
            'vehicle_no': self.vehicle_no,
            'from_date': self.from_date,
            'to_date': self.to_date,
            'reference_mileage': self.reference_mileage,
            'rows': self.rows,
            'driver': self.driver,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }


def get_engine(database_url):
    """Create database engine."""
    return create_engine(database_url, pool_pre_ping=True)


