"""Configuration options and enumerations shared across validation."""

import typing
from enum import Enum

from . import formatter as _formatter
from . import languages as _languages


class Severity(str, Enum):
    """Severity attached to a validation failure.

    Attributes:
        ERROR: The failure makes the instance invalid (default)
        WARNING: The failure should be surfaced but is not blocking
        INFO: Informational only
    """

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ApplyConditionTo(str, Enum):
    """Which validators a condition declared on a builder applies to.

    Attributes:
        ALL_VALIDATORS: Every validator declared on the rule so far
        CURRENT_VALIDATOR: Only the validator the builder is scoped to
    """

    ALL_VALIDATORS = "all_validators"
    CURRENT_VALIDATOR = "current_validator"


def default_error_code_resolver(validator: typing.Any) -> str:
    """Default error code for a validator: its class name."""
    return type(validator).__name__


class ValidatorOptions:
    """Process-wide settings read by rules, contexts and validators.

    Options are expected to be set once at start-up, before validation runs
    concurrently. A ``ValidationContext`` may carry its own instance instead
    of the global one.

    Attributes:
        message_formatter_factory: Builds a fresh message formatter per
            invocation context
        language_manager: Source of localized message templates
        error_code_resolver: Maps a validator to its default error code
        display_name_resolver: Optional hook ``(model_type, property_name, rule)``
            returning a display name, or None to fall through
    """

    def __init__(
        self,
        *,
        message_formatter_factory: typing.Callable[[], _formatter.MessageFormatter]
        | None = None,
        language_manager: _languages.LanguageManager | None = None,
        error_code_resolver: typing.Callable[[typing.Any], str] | None = None,
        display_name_resolver: typing.Callable[
            [type, str, typing.Any], str | None
        ]
        | None = None,
    ) -> None:
        self.message_formatter_factory = (
            message_formatter_factory or _formatter.MessageFormatter
        )
        self.language_manager = language_manager or _languages.LanguageManager()
        self.error_code_resolver = error_code_resolver or default_error_code_resolver
        self.display_name_resolver = display_name_resolver

    def reset(self) -> None:
        """Restore every option to its default."""
        self.message_formatter_factory = _formatter.MessageFormatter
        self.language_manager = _languages.LanguageManager()
        self.error_code_resolver = default_error_code_resolver
        self.display_name_resolver = None


global_options = ValidatorOptions()
"""Shared options used when a validation context does not supply its own."""
