"""Placeholder substitution for error message templates."""

import re
import typing

PROPERTY_NAME = "PropertyName"
PROPERTY_VALUE = "PropertyValue"

# {Name} or {Name:format_spec}
_PLACEHOLDER = re.compile(r"\{([^{}:]+)(?::([^{}]*))?\}")


class MessageFormatter:
    """Collects named placeholder values and substitutes them into templates.

    One formatter belongs to one invocation context. Templates reference values
    as ``{Name}``, optionally with a format spec as in ``{Total:.2f}``.
    Placeholders with no value are left untouched.
    """

    def __init__(self) -> None:
        self._placeholder_values: dict[str, typing.Any] = {}

    @property
    def placeholder_values(self) -> dict[str, typing.Any]:
        """Placeholder name to value mapping collected so far."""
        return self._placeholder_values

    def append_argument(self, name: str, value: typing.Any) -> "MessageFormatter":
        """Add or replace a named placeholder value.

        Args:
            name: Placeholder name, without braces
            value: Value to substitute

        Returns:
            This formatter, for chaining
        """
        self._placeholder_values[name] = value
        return self

    def append_property_name(self, name: str) -> "MessageFormatter":
        return self.append_argument(PROPERTY_NAME, name)

    def append_property_value(self, value: typing.Any) -> "MessageFormatter":
        return self.append_argument(PROPERTY_VALUE, value)

    def build_message(self, template: str) -> str:
        """Substitute collected placeholder values into ``template``.

        Args:
            template: Message template

        Returns:
            The formatted message
        """

        def _replace(match: re.Match[str]) -> str:
            name, spec = match.group(1), match.group(2)
            if name not in self._placeholder_values:
                return match.group(0)
            value = self._placeholder_values[name]
            if spec:
                try:
                    return format(value, spec)
                except (TypeError, ValueError):
                    return str(value)
            return "" if value is None else str(value)

        return _PLACEHOLDER.sub(_replace, template)
