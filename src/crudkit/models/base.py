"""
Entity building blocks.

Two layers live here:

- Capability protocols (`HasId`, `Equatable`, `EntityLike`) describe what the
  generic service needs from an entity. The service is typed against these,
  not against a base class, so any object with an `id` and a `matches()`
  method can flow through it.

- `Entity`, a declarative mixin that satisfies both protocols for SQLAlchemy
  models: an integer surrogate key assigned by the store on insert, and value
  equality over the mapped columns.

Example:
    class Widget(Entity, Base):
        __tablename__ = "widgets"

        name: Mapped[str] = mapped_column(String(100))
"""

from typing import Any, Protocol, TypeVar, runtime_checkable

from sqlalchemy import Integer
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import Mapped, mapped_column, validates

ID = TypeVar("ID")


@runtime_checkable
class HasId(Protocol[ID]):
    """Anything with a surrogate key. `None` means never persisted."""

    id: ID | None


@runtime_checkable
class Equatable(Protocol):
    """Anything that can tell whether another object holds the same values."""

    def matches(self, other: Any) -> bool: ...


class EntityLike(HasId[ID], Equatable, Protocol[ID]):
    """The full capability set required by `BaseService`."""


class Entity:
    """
    Declarative mixin providing the surrogate key and value equality.

    Invariants:
        - `id` is None until the store assigns it on insert.
        - Once the entity is persisted, `id` cannot be changed to a different
          value. A transient entity (e.g. a request payload) may still be
          given any key; the update flow relies on that.
    """

    id: Mapped[int | None] = mapped_column(Integer, primary_key=True, autoincrement=True)

    @validates("id")
    def _validate_id(self, key: str, value: int | None) -> int | None:
        if not sa_inspect(self).has_identity:
            return value
        # Read the instance dict directly so an expired attribute is not reloaded
        current = self.__dict__.get(key)
        if current is not None and value != current:
            raise ValueError(
                f"{type(self).__name__}.id is already assigned ({current}) and cannot change to {value}"
            )
        return value

    def value_fields(self) -> dict[str, Any]:
        """
        Mapped column values, excluding primary key columns.

        On an entity that was never persisted, a column left unset reports its
        scalar Python-side default (the value the store will write), so a new
        entity compares equal to a stored one built from the same input.
        """
        mapper = sa_inspect(type(self))
        persisted = sa_inspect(self).has_identity
        values: dict[str, Any] = {}
        for attr in mapper.column_attrs:
            if any(column.primary_key for column in attr.columns):
                continue
            if not persisted and attr.key not in self.__dict__:
                default = attr.columns[0].default
                values[attr.key] = default.arg if default is not None and default.is_scalar else None
                continue
            values[attr.key] = getattr(self, attr.key)
        return values

    def matches(self, other: Any) -> bool:
        """
        Value equality: same concrete type and the same non-key column values.

        Used by the duplicate check in `BaseService.create`. `__eq__` is left
        alone because the ORM identity map relies on identity semantics.
        """
        if type(other) is not type(self):
            return False
        return self.value_fields() == other.value_fields()

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(id={self.__dict__.get('id')!r})>"


__all__ = ["ID", "HasId", "Equatable", "EntityLike", "Entity"]
