from __future__ import annotations

from typing import Any

from pydantic import BaseModel, field_validator


class ExampleQuery(BaseModel):
    """A curated example query from the query cookbook.

    The description is what gets matched against free-text requests; the query
    text only rides along as few-shot context.
    """

    id: str
    """Stable per-example identifier (the cookbook entry name)."""

    summary: str
    """Author-supplied natural-language summary of what the query computes."""

    query: str
    """The literal example query text."""

    model_config = {"frozen": True}

    @field_validator("id", "summary", "query")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            msg = "Example query id, summary and query cannot be empty"
            raise ValueError(msg)
        return v.strip()

    def identity(self) -> str:
        return self.id

    def description(self) -> str:
        return self.summary

    def payload(self) -> dict[str, Any]:
        return {"query": self.query}
