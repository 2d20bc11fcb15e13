"""Result types for validation operations."""

import typing as _t

import pydantic as _pydantic

from . import options as _options


class ValidationFailure(_pydantic.BaseModel):
    """A single failure produced by one validator for one property.

    Attributes:
        property_name: Name of the property that failed
        error_message: Fully formatted message text
        attempted_value: Value the validator saw (after any transform)
        error_code: Explicit or resolved error code
        severity: Severity of the failure
        custom_state: Arbitrary state supplied by the validator's provider
        formatted_message_placeholder_values: Placeholder values used to build
            the message, kept for consumers that re-render it
    """

    model_config = _pydantic.ConfigDict(arbitrary_types_allowed=True)

    property_name: str
    error_message: str
    attempted_value: _t.Any = None
    error_code: str | None = None
    severity: _options.Severity = _options.Severity.ERROR
    custom_state: _t.Any = None
    formatted_message_placeholder_values: dict[str, _t.Any] = _pydantic.Field(
        default_factory=dict
    )

    def __str__(self) -> str:
        return self.error_message


class ValidationResult(_pydantic.BaseModel):
    """Outcome of validating one instance.

    Attributes:
        errors: Ordered failures collected across all executed rules
    """

    errors: list[ValidationFailure] = _pydantic.Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """True when no failures were collected."""
        return not self.errors

    def to_string(self, separator: str = "\n") -> str:
        """Join every failure message with ``separator``."""
        return separator.join(failure.error_message for failure in self.errors)

    def __str__(self) -> str:
        return self.to_string()
