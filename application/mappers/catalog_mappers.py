from application.dtos.catalog_dtos import FieldCatalogRow, FieldSelectionResponse
from domain.value_objects.field_category import FieldCategory
from domain.value_objects.field_data_type import FieldDataType
from domain.value_objects.field_metadata import FieldMetadata
from domain.value_objects.validation_result import ValidationResult


class CatalogMapper:
    @staticmethod
    def to_field_metadata(row: FieldCatalogRow) -> FieldMetadata:
        """Map a raw catalog row to a FieldMetadata value object.

        Category and type codes go through the closed enumeration tables;
        unmapped codes become UNKNOWN rather than being dropped. Surrounding
        whitespace in the name is stripped.
        """
        return FieldMetadata.create(
            name=row.name.strip(),
            category=FieldCategory.from_code(row.category_code),
            data_type=FieldDataType.from_code(row.type_code),
            selectable=row.selectable,
            filterable=row.filterable,
            sortable=row.sortable,
            resource_name=row.resource_name or None,
        )

    @staticmethod
    def to_selection_response(result: ValidationResult) -> FieldSelectionResponse:
        return FieldSelectionResponse(
            is_valid=result.is_valid,
            errors={error.kind.value: list(error.fields) for error in result.errors},
            warnings=[warning.kind.value for warning in result.warnings],
            message=result.format_message(),
        )
