"""
Base model for SQLAlchemy models.
"""
from sqlalchemy.orm import declarative_base

# Create declarative base for all models
Base = declarative_base()
