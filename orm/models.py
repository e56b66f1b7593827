"""
orm/models.py
-------------
SQLAlchemy declarative models mirroring the migrated schema.
"""

from sqlalchemy import Column, Float, ForeignKey, Integer, String, TypeDecorator
from sqlalchemy.orm import DeclarativeBase, relationship

from models.city import City
from models.metro import MetroLine, MetroSystem, TrackType


class TrackTypeColumn(TypeDecorator):
    """Store TrackType as its integer code."""

    impl = Integer
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return int(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return TrackType.by_id(value)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class CityModel(Base):
    __tablename__ = "city"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    population = Column(Integer, nullable=False)
    area = Column(Float, nullable=False)
    link = Column(String(255))

    # Relationships
    systems = relationship("MetroSystemModel", back_populates="city")

    def to_domain(self) -> City:
        return City(id=self.id, name=self.name, population=self.population, area=self.area, link=self.link)


class MetroSystemModel(Base):
    __tablename__ = "metro_system"

    id = Column(Integer, primary_key=True)
    city_id = Column(Integer, ForeignKey("city.id"), nullable=False)
    name = Column(String(255), nullable=False)
    daily_ridership = Column(Integer, nullable=False)

    # Relationships
    city = relationship("CityModel", back_populates="systems")
    lines = relationship("MetroLineModel", back_populates="system")

    def to_domain(self) -> MetroSystem:
        return MetroSystem(
            id=self.id, city_id=self.city_id, name=self.name, daily_ridership=self.daily_ridership
        )


class MetroLineModel(Base):
    __tablename__ = "metro_line"

    id = Column(Integer, primary_key=True)
    system_id = Column(Integer, ForeignKey("metro_system.id"), nullable=False)
    name = Column(String(255), nullable=False)
    station_count = Column(Integer, nullable=False)
    track_type = Column(TrackTypeColumn, nullable=False)

    # Relationships
    system = relationship("MetroSystemModel", back_populates="lines")

    def to_domain(self) -> MetroLine:
        return MetroLine(
            id=self.id,
            system_id=self.system_id,
            name=self.name,
            station_count=self.station_count,
            track_type=self.track_type,
        )
