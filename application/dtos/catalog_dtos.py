from pydantic import BaseModel, Field

FIELD_CATALOG_QUERY = (
    "select name, category, data_type, selectable, filterable, sortable order by name"
)


class FieldCatalogRow(BaseModel):
    """One row returned by the remote field catalog, with raw wire codes."""

    name: str
    category_code: int = 0
    type_code: int = 0
    selectable: bool = False
    filterable: bool = False
    sortable: bool = False
    resource_name: str = Field(default="", description="Empty when the catalog reports none")


class FieldSelectionRequest(BaseModel):
    """Request to validate the fields a query selects."""

    field_names: list[str] = Field(..., min_length=1)


class FieldSelectionResponse(BaseModel):
    is_valid: bool
    errors: dict[str, list[str]]
    warnings: list[str]
    message: str


class CatalogSummaryResponse(BaseModel):
    """What a caller learns after loading (or refreshing) the field catalog."""

    catalog_version: str
    last_updated: str
    field_count: int
    resource_count: int
    summary: str
