"""
Uniform response envelope.

Every CRUD endpoint answers with the same JSON shape:

    {"data": <payload>, "status": "SUCCESS"}
    {"status": "ERROR", "error": [{"field": "Detail", "message": "42"}]}

Top-level null fields are omitted (`to_content()`); nulls inside the payload or
inside an error entry are kept, so `{"field": null, ...}` is a valid entry for
entity-level errors.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Generic, Iterable, TypeVar

from pydantic import BaseModel, ConfigDict, model_validator

T = TypeVar("T")


class Status(str, Enum):
    """Discriminator mirroring which branch of the envelope is populated."""
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


class ErrorDetail(BaseModel):
    """One error entry. `field` is None for entity-level errors."""

    field: str | None = None
    message: str


class APIResponse(BaseModel, Generic[T]):
    """
    Wraps either a payload or a list of errors.

    Invariants (enforced on construction):
        - status=SUCCESS -> error is empty or absent
        - status=ERROR   -> data is absent
    """

    # the service layer wraps ORM entities before the controller converts them
    model_config = ConfigDict(arbitrary_types_allowed=True)

    data: T | None = None
    status: Status
    error: list[ErrorDetail] | None = None

    @model_validator(mode="after")
    def _check_single_branch(self) -> "APIResponse[T]":
        if self.status is Status.SUCCESS and self.error:
            raise ValueError("a SUCCESS envelope cannot carry errors")
        if self.status is Status.ERROR and self.data is not None:
            raise ValueError("an ERROR envelope cannot carry data")
        return self

    @classmethod
    def success(cls, data: Any) -> "APIResponse":
        return cls(status=Status.SUCCESS, data=data)

    @classmethod
    def failure(cls, errors: Iterable[ErrorDetail]) -> "APIResponse":
        return cls(status=Status.ERROR, error=list(errors))

    @property
    def is_success(self) -> bool:
        return self.status is Status.SUCCESS

    def map_data(self, fn: Callable[[Any], Any]) -> "APIResponse":
        """Return a new envelope with `fn` applied to the payload (if any)."""
        if self.data is None:
            return self
        return APIResponse(status=self.status, data=fn(self.data), error=self.error)

    def to_content(self) -> dict[str, Any]:
        """JSON-ready dict with top-level None fields dropped."""
        content = self.model_dump(mode="json")
        return {key: value for key, value in content.items() if value is not None}


__all__ = ["Status", "ErrorDetail", "APIResponse"]
