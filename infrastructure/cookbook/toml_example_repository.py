from __future__ import annotations

import tomllib
from pathlib import Path

import structlog
from pydantic import ValidationError as PydanticValidationError

from application.ports.example_query_repository import ExampleQueryRepository
from domain.exceptions import ValidationError
from domain.value_objects.example_query import ExampleQuery

logger = structlog.get_logger()

BUNDLED_COOKBOOK_PATH = Path(__file__).resolve().parent / "query_cookbook.toml"


class TomlExampleQueryRepository(ExampleQueryRepository):
    """Loads curated example queries from a TOML cookbook.

    Every top-level table is one example: the table name is its id, and it
    must define ``description`` and ``query`` strings. Anything else at the
    top level, and tables missing either key, are skipped with a warning.
    """

    def load(self, path: Path) -> list[ExampleQuery]:
        """Parse a cookbook file.

        Raises:
            FileNotFoundError: If the cookbook does not exist
            ValidationError: If the file is not valid TOML

        """
        with path.open("rb") as f:
            try:
                document = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                msg = f"Query cookbook {path} is not valid TOML: {e!s}"
                raise ValidationError(msg) from e

        examples: list[ExampleQuery] = []
        for example_id, entry in document.items():
            if not isinstance(entry, dict):
                logger.warning("cookbook_entry_not_a_table", example_id=example_id, path=str(path))
                continue

            description = entry.get("description")
            query = entry.get("query")
            if not isinstance(description, str) or not isinstance(query, str):
                logger.warning("cookbook_entry_incomplete", example_id=example_id, path=str(path))
                continue

            try:
                examples.append(ExampleQuery(id=example_id, summary=description, query=query))
            except PydanticValidationError as e:
                logger.warning("cookbook_entry_invalid", example_id=example_id, error=str(e))

        logger.debug("cookbook_parsed", path=str(path), example_count=len(examples))
        return examples
