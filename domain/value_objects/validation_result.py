from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class ValidationErrorKind(str, Enum):
    """Errors that make a field selection invalid."""

    UNKNOWN_FIELDS = "UNKNOWN_FIELDS"
    NON_SELECTABLE_FIELDS = "NON_SELECTABLE_FIELDS"


class ValidationWarningKind(str, Enum):
    """Advisory findings that never affect validity."""

    METRICS_WITHOUT_GROUPING = "METRICS_WITHOUT_GROUPING"


class SelectionError(BaseModel):
    """One accumulated validation error and the field names it concerns."""

    kind: ValidationErrorKind
    fields: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}

    def __str__(self) -> str:
        label = {
            ValidationErrorKind.UNKNOWN_FIELDS: "Unknown fields",
            ValidationErrorKind.NON_SELECTABLE_FIELDS: "Non-selectable fields",
        }[self.kind]
        return f"{label}: {', '.join(self.fields)}"


class SelectionWarning(BaseModel):
    kind: ValidationWarningKind

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return (
            "Metrics selected without segments or resource fields "
            "(may cause aggregation issues)"
        )


class ValidationResult(BaseModel):
    """Outcome of validating a field selection. Computed per call, never persisted."""

    errors: list[SelectionError] = Field(default_factory=list)
    warnings: list[SelectionWarning] = Field(default_factory=list)

    model_config = {"frozen": True}

    @property
    def is_valid(self) -> bool:
        """True iff no errors were accumulated; warnings are ignored."""
        return not self.errors

    def error(self, kind: ValidationErrorKind) -> SelectionError | None:
        return next((e for e in self.errors if e.kind == kind), None)

    def has_warning(self, kind: ValidationWarningKind) -> bool:
        return any(w.kind == kind for w in self.warnings)

    def format_message(self) -> str:
        """Render errors and warnings as an indented bullet report."""
        lines: list[str] = []

        if self.errors:
            lines.append("Validation Errors:")
            lines.extend(f"  - {error}" for error in self.errors)

        if self.warnings:
            lines.append("Validation Warnings:")
            lines.extend(f"  - {warning}" for warning in self.warnings)

        if self.is_valid and not self.warnings:
            lines.append("All fields are valid")

        return "\n".join(lines) + "\n"
