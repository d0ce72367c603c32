"""
Repository contract used by the service layer.

Protocol over ABC: `BaseService` accepts anything with these four coroutines,
so a test double or a non-SQL store can stand in for `BaseRepository`.
"""

from typing import Protocol, Sequence, TypeVar

E = TypeVar("E")
ID = TypeVar("ID", contravariant=True)


class Repository(Protocol[E, ID]):
    """Thin pass-through to the data store."""

    async def save(self, entity: E) -> E:
        """Insert (key is None) or overwrite (key set). Returns the stored entity with its key."""
        ...

    async def find_all(self) -> Sequence[E]: ...

    async def find_by_id(self, entity_id: ID) -> E | None: ...

    async def delete(self, entity: E) -> None: ...
