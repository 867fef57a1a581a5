from sqlalchemy import JSON, Column, DateTime, Float, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func

from .db import Base


class Recipe(Base):
    __tablename__ = "recipes"
    id = Column(Integer, primary_key=True, autoincrement=True)
    cuisine = Column(String(100), nullable=True, index=True)
    title = Column(String(255), nullable=True)
    rating = Column(Float, nullable=True, index=True)
    prep_time = Column(Integer, nullable=True)  # minutes
    cook_time = Column(Integer, nullable=True)
    total_time = Column(Integer, nullable=True, index=True)
    description = Column(Text, nullable=True)
    nutrients = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=True)
    serves = Column(String(50), nullable=True)
    # numeric form of nutrients["calories"], filled at import time
    calories = Column(Integer, nullable=True, index=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    def __repr__(self) -> str:
        return f"<Recipe(id={self.id}, title='{self.title}')>"
