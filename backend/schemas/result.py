# backend/schemas/result.py
from pydantic import BaseModel
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")

# Error category of a result whose record does not exist
NOT_FOUND = "Not found"


class DbResult(BaseModel, Generic[T]):
    """Uniform result of every store operation.

    A failed result always has a human readable ``message`` and an ``error``
    category: ``NOT_FOUND`` for a missing record, otherwise the text of the
    underlying I/O or parse error.
    """

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    message: str

    @classmethod
    def ok(cls, data: Any = None, message: str = "") -> "DbResult":
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(cls, error: str, message: str) -> "DbResult":
        return cls(success=False, error=error, message=message)

    @classmethod
    def not_found(cls, product_id: int) -> "DbResult":
        return cls.fail(NOT_FOUND, f"Product with ID {product_id} not found")

    @property
    def is_not_found(self) -> bool:
        return not self.success and self.error == NOT_FOUND
