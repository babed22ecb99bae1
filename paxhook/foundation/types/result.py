from typing import Generic, Optional, TypeVar
from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class Result(BaseModel, Generic[T]):
    """
    Outcome of a best-effort step (JSON extraction, connectivity probe).
    Failures travel as data with a reason; callers branch on `success`.
    """
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: T = None) -> "Result[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> "Result[T]":
        return cls(success=False, error=error)
