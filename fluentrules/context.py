"""Validation contexts: the outer per-instance context and the per-validator one."""

import typing

from . import formatter as _formatter
from . import options as _options

if typing.TYPE_CHECKING:
    from .rules import PropertyRule

COLLECTION_INDEX_KEY = "__fluentrules_collection_index"
"""Root context data key holding the index of the collection item being validated."""

COLLECTION_INDEX = "CollectionIndex"

DEFAULT_RULE_SET = "default"

_MISSING = object()


class ValidationContext:
    """Outer context for validating one model instance.

    Attributes:
        instance_to_validate: The model instance
        root_context_data: Data shared by every rule in this validation run
        rule_sets: Rule sets selected for execution (None selects untagged rules)
        options: Configuration used by this run
    """

    def __init__(
        self,
        instance_to_validate: typing.Any,
        *,
        root_context_data: dict[str, typing.Any] | None = None,
        rule_sets: typing.Iterable[str] | None = None,
        options: _options.ValidatorOptions | None = None,
    ) -> None:
        self.instance_to_validate = instance_to_validate
        self.root_context_data = root_context_data if root_context_data is not None else {}
        self.rule_sets = list(rule_sets) if rule_sets is not None else None
        self.options = options or _options.global_options

    def should_execute(self, rule: "PropertyRule") -> bool:
        """Whether ``rule`` belongs to the selected rule sets.

        With no selection only untagged rules and rules in the ``"default"`` set
        run. ``"*"`` selects every rule.
        """
        selected = self.rule_sets or [DEFAULT_RULE_SET]
        if "*" in selected:
            return True
        if not rule.rule_sets:
            return DEFAULT_RULE_SET in selected
        return any(name in selected for name in rule.rule_sets)


class PropertyValidatorContext:
    """Context handed to a validator for one property of one instance.

    The property value is either given directly or produced by an accessor.
    The accessor runs at most once, on first read of ``property_value``, so a
    validator rejected by its condition never triggers it.
    """

    def __init__(
        self,
        parent_context: ValidationContext,
        rule: "PropertyRule",
        property_name: str,
        property_value: typing.Any = _MISSING,
        *,
        property_value_accessor: typing.Callable[[], typing.Any] | None = None,
    ) -> None:
        self.parent_context = parent_context
        self.rule = rule
        self.property_name = property_name
        self._property_value = None if property_value is _MISSING else property_value
        self._property_value_accessor = property_value_accessor
        self._message_formatter: _formatter.MessageFormatter | None = None

    @property
    def instance_to_validate(self) -> typing.Any:
        return self.parent_context.instance_to_validate

    @property
    def options(self) -> _options.ValidatorOptions:
        return self.parent_context.options

    @property
    def property_value(self) -> typing.Any:
        if self._property_value_accessor is not None:
            self._property_value = self._property_value_accessor()
            self._property_value_accessor = None
        return self._property_value

    @property
    def display_name(self) -> str:
        # Recomputed on every access; resolution can depend on mutable settings.
        return self.rule.get_display_name(self.parent_context)

    @property
    def message_formatter(self) -> _formatter.MessageFormatter:
        if self._message_formatter is None:
            self._message_formatter = self.options.message_formatter_factory()
        return self._message_formatter
