"""
Database schema for the menu benchmark system
"""

from sqlalchemy import (
    create_engine,
    Column,
    Integer,
    String,
    Float,
    DateTime,
    Index,
    Text
)
from sqlalchemy.orm import declarative_base, sessionmaker
from datetime import datetime
import json
import os

from loguru import logger

Base = declarative_base()


class Dish(Base):
    """Our own catalog dishes, grouped by brand"""
    __tablename__ = "dishes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    dish_id = Column(String(100), unique=True, nullable=False, index=True)
    brand = Column(String(200), nullable=False, default="")
    category = Column(String(200), default="")
    name = Column(String(500), default="")
    description = Column(Text, default="")
    image = Column(String(1000), default="")
    full_price = Column(Float, default=0.0)
    promo_price = Column(Float)
    discount = Column(Float)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index('idx_dish_brand', 'brand'),
    )

    def to_dict(self) -> dict:
        return {
            'id': self.dish_id,
            'brand': self.brand or '',
            'category': self.category or '',
            'name': self.name or '',
            'description': self.description or '',
            'image': self.image or '',
            'fullPrice': self.full_price or 0.0,
            'promoPrice': self.promo_price,
            'discount': self.discount,
        }

    def __repr__(self):
        return f"<Dish(id='{self.dish_id}', brand='{self.brand}', name='{(self.name or '')[:30]}')>"


class BenchmarkAnalysis(Base):
    """Store benchmark runs for the history view"""
    __tablename__ = "benchmark_analyses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    analysis_id = Column(String(64), unique=True, nullable=False, index=True)
    brand = Column(String(200), nullable=False)
    url = Column(String(2000), default="")
    total_results = Column(Integer, default=0)
    results_json = Column(Text, nullable=False, default="[]")
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    @property
    def results(self) -> list:
        return json.loads(self.results_json or "[]")

    def to_summary(self) -> dict:
        return {
            'id': self.analysis_id,
            'date': self.created_at.isoformat() if self.created_at else None,
            'brand': self.brand,
            'url': self.url or '',
            'totalResults': self.total_results or 0,
        }

    def to_dict(self) -> dict:
        return {
            'id': self.analysis_id,
            'date': self.created_at.isoformat() if self.created_at else None,
            'brand': self.brand,
            'url': self.url or '',
            'results': self.results,
        }

    def __repr__(self):
        return f"<BenchmarkAnalysis(id='{self.analysis_id}', brand='{self.brand}', results={self.total_results})>"


# Database initialization
def init_database(db_path):
    """
    Initialize the database and create all tables

    Args:
        db_path: Path to SQLite database file
    """
    # Create data directory if it doesn't exist
    db_dir = os.path.dirname(db_path)
    if db_dir:  # Only create if path contains a directory
        os.makedirs(db_dir, exist_ok=True)

    engine = create_engine(f'sqlite:///{db_path}', echo=False)
    Base.metadata.create_all(engine)

    logger.info("Database initialized at: {}", db_path)

    Session = sessionmaker(bind=engine)

    return engine, Session


def get_session(db_path):
    """Get a database session"""
    engine = create_engine(f'sqlite:///{db_path}', echo=False)
    Session = sessionmaker(bind=engine)
    return Session()
