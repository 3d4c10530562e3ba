"""Validation of a field selection against a catalog snapshot."""

from __future__ import annotations

from typing import TYPE_CHECKING

from domain.value_objects.validation_result import (
    SelectionError,
    SelectionWarning,
    ValidationErrorKind,
    ValidationResult,
    ValidationWarningKind,
)

if TYPE_CHECKING:
    from domain.value_objects.metadata_snapshot import MetadataSnapshot


def validate_field_selection(snapshot: MetadataSnapshot, names: list[str]) -> ValidationResult:
    """Check that every selected field exists and is selectable.

    Missing names accumulate into one UNKNOWN_FIELDS error, and existing but
    non-selectable fields into one NON_SELECTABLE_FIELDS error. Selecting
    metrics with nothing to group them by (no segment, and no field that is a
    resource or is neither metric nor segment) adds a warning, which never
    affects validity.
    """
    errors: list[SelectionError] = []
    warnings: list[SelectionWarning] = []

    missing = [name for name in names if name not in snapshot.fields]
    if missing:
        errors.append(SelectionError(kind=ValidationErrorKind.UNKNOWN_FIELDS, fields=missing))

    fields = [snapshot.fields[name] for name in names if name in snapshot.fields]

    non_selectable = [f.name for f in fields if not f.selectable]
    if non_selectable:
        errors.append(
            SelectionError(kind=ValidationErrorKind.NON_SELECTABLE_FIELDS, fields=non_selectable),
        )

    has_metrics = any(f.is_metric for f in fields)
    has_segments = any(f.is_segment for f in fields)
    has_grouping = any(f.is_resource or (not f.is_metric and not f.is_segment) for f in fields)

    if has_metrics and not has_segments and not has_grouping:
        warnings.append(SelectionWarning(kind=ValidationWarningKind.METRICS_WITHOUT_GROUPING))

    return ValidationResult(errors=errors, warnings=warnings)
