"""
Declarative base for all SQLAlchemy ORM models managed by crudkit.
Import `Base` in any model module that defines ORM classes.
"""

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    # Naming convention for constraints and indexes, so unique violations
    # carry predictable constraint names (see exceptions/integrity_classifier.py)
    metadata = MetaData(
        naming_convention={
            "ix": "ix_%(column_0_label)s",
            "uq": "uq_%(table_name)s_%(column_0_name)s",
            "ck": "ck_%(table_name)s_%(constraint_name)s",
            "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
            "pk": "pk_%(table_name)s",
        }
    )
