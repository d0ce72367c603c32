r"""
Entity building blocks shared by every model.

Example:

# Concrete models combine the mixin with the declarative base
from crudkit.database import Base
from crudkit.models import Entity

class Widget(Entity, Base):
    __tablename__ = "widgets"
    ...
"""

from .base import ID, HasId, Equatable, EntityLike, Entity

__all__ = [
    "ID",
    "HasId",
    "Equatable",
    "EntityLike",
    "Entity",
]
