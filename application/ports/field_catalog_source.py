from typing import Protocol

from application.dtos.catalog_dtos import FieldCatalogRow


class FieldCatalogSource(Protocol):
    """Port for the remote platform's field catalog service.

    Authentication and wire transport live behind this port. Transient
    network errors propagate unmodified so the caller decides on retries.
    """

    async def search_fields(self, query: str, page_size: int) -> list[FieldCatalogRow]:
        """Run a catalog query and return every matching row."""
        ...
