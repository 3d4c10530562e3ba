from pathlib import Path
from typing import Protocol

from domain.value_objects.example_query import ExampleQuery


class ExampleQueryRepository(Protocol):
    """Port for the curated example-query corpus."""

    def load(self, path: Path) -> list[ExampleQuery]:
        """Load every example from a cookbook file."""
        ...
