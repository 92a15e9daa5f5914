from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


class OperationResult(Generic[T]):
    """Outcome of a boundary call (cache op, provider fetch, persistence).

    Callers inspect ``success`` and decide themselves whether a failure
    should fall back, degrade, or propagate.
    """

    def __init__(self, value: Optional[T] = None, error: Optional[str] = None):
        self.value = value
        self.error = error
        self.success = error is None

    @classmethod
    def ok(cls, value: Optional[T] = None) -> "OperationResult[T]":
        return cls(value=value)

    @classmethod
    def fail(cls, error: str) -> "OperationResult[T]":
        return cls(error=error or "unknown error")

    def value_or(self, default: Any) -> Any:
        if self.success and self.value is not None:
            return self.value
        return default

    def __repr__(self):
        status = "Success" if self.success else f"Error: {self.error}"
        return f"OperationResult({status})"
