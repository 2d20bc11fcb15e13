"""Resolution of the final error message for a failing validator."""

import typing

from . import context as _context
from . import formatter as _formatter

if typing.TYPE_CHECKING:
    from .rules import PropertyRule
    from .validators import PropertyValidator


class MessageBuilderContext:
    """View over a failing validator and its context, given to a rule's message builder.

    A rule-level message builder receives this object for every failing
    validator on the rule. It can inspect the validator and property, or fall
    back to the validator's own message with ``get_default_message()``.
    """

    def __init__(
        self,
        inner_context: _context.PropertyValidatorContext,
        property_validator: "PropertyValidator",
    ) -> None:
        self._inner_context = inner_context
        self.property_validator = property_validator

    @property
    def parent_context(self) -> _context.ValidationContext:
        return self._inner_context.parent_context

    @property
    def rule(self) -> "PropertyRule":
        return self._inner_context.rule

    @property
    def property_name(self) -> str:
        return self._inner_context.property_name

    @property
    def display_name(self) -> str:
        return self._inner_context.display_name

    @property
    def message_formatter(self) -> _formatter.MessageFormatter:
        return self._inner_context.message_formatter

    @property
    def instance_to_validate(self) -> typing.Any:
        return self._inner_context.instance_to_validate

    @property
    def property_value(self) -> typing.Any:
        return self._inner_context.property_value

    def get_default_message(self) -> str:
        """The validator's own fully formatted message."""
        return self.property_validator.get_error_message(self._inner_context)


def resolve_message(
    property_validator: "PropertyValidator",
    context: _context.PropertyValidatorContext,
) -> str:
    """Final message for a failure, honouring the rule's message builder if any.

    Args:
        property_validator: The validator that failed
        context: Its invocation context, with the formatter already prepared

    Returns:
        The message text for the failure
    """
    builder_context = MessageBuilderContext(context, property_validator)
    message_builder = context.rule.message_builder
    if message_builder is not None:
        return message_builder(builder_context)
    return builder_context.get_default_message()
