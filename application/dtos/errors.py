from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

ErrorCategory = Literal["validation", "unavailable", "not_found", "configuration", "internal_error"]

# The catalog or a cache file may come back on a later attempt
RETRYABLE_CATEGORIES: frozenset[str] = frozenset({"unavailable"})


@dataclass(frozen=True)
class AppError:
    """Failure value carried by use case results."""

    category: ErrorCategory
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def retryable(self) -> bool:
        return self.category in RETRYABLE_CATEGORIES

    def to_dict(self) -> dict[str, Any]:
        return {"category": self.category, "message": self.message, "details": dict(self.details)}

    def __str__(self) -> str:
        return f"[{self.category}] {self.message}"
