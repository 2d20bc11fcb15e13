"""Property rules and the model validator that owns them."""

import collections.abc
import contextlib
import functools
import logging
import re
import typing

import pydantic

from . import builder as _builder
from . import context as _context
from . import errors as _errors
from . import execution as _execution
from . import options as _options
from . import result as _result
from . import transform as _transform
from . import validators as _validators

logger = logging.getLogger(__name__)

TModel = typing.TypeVar("TModel")

_WORD_BOUNDARY = re.compile(r"[_.\s]+|(?<=[a-z0-9])(?=[A-Z])")


def resolve_property(instance: typing.Any, path: str) -> typing.Any:
    """Read a possibly dotted property path from mappings and objects.

    Args:
        instance: Dictionary, Pydantic model or plain object
        path: Property name, or dotted path such as ``"address.city"``

    Returns:
        The value, or None if an intermediate value is None or a key is missing
    """
    value = instance
    for part in path.split("."):
        if value is None:
            return None
        if isinstance(value, collections.abc.Mapping):
            value = value.get(part)
        else:
            value = getattr(value, part)
    return value


def humanize(property_name: str) -> str:
    """Turn ``first_name`` or ``firstName`` into ``First Name``."""
    words = [word for word in _WORD_BOUNDARY.split(property_name) if word]
    return " ".join(word[:1].upper() + word[1:] for word in words)


def _field_title(model_type: type, property_name: str) -> str | None:
    if not (isinstance(model_type, type) and issubclass(model_type, pydantic.BaseModel)):
        return None
    field = model_type.model_fields.get(property_name)
    return field.title if field is not None else None


class PropertyRule:
    """All configuration for validating one property of a model.

    Validators run in insertion order. Dependent rules run only when every
    validator on this rule passed for the instance.

    Attributes:
        property_name: Name reported on failures
        property_func: Reads the raw property value from an instance
        validators: Validators in execution order
        dependent_rules: Rules run after this one succeeds
        transformer: Transform chain applied to the raw value, if any
        rule_sets: Rule sets this rule belongs to (empty means the default set)
        message_builder: Optional override for the message of every failure
        display_name: Display name, or a callable ``(ValidationContext) -> str``
    """

    def __init__(
        self,
        property_name: str,
        property_func: typing.Callable[[typing.Any], typing.Any] | None = None,
    ) -> None:
        self.property_name = property_name
        self.property_func = property_func or functools.partial(
            resolve_property, path=property_name
        )
        self.validators: list[_validators.PropertyValidator] = []
        self.dependent_rules: list[PropertyRule] = []
        self.transformer: _transform.Transform | None = None
        self.rule_sets: list[str] = []
        self.message_builder: typing.Callable[[typing.Any], str] | None = None
        self.display_name: str | typing.Callable[
            [_context.ValidationContext], str
        ] | None = None

    def __repr__(self) -> str:
        return f"PropertyRule({self.property_name!r}, validators={len(self.validators)})"

    def add_validator(self, validator: _validators.PropertyValidator) -> None:
        self.validators.append(validator)

    def apply_condition(self, condition: _validators.Condition) -> None:
        """Apply ``condition`` to every validator and dependent rule."""
        for validator in self.validators:
            validator.apply_condition(condition)
        for rule in self.dependent_rules:
            rule.apply_condition(condition)

    def apply_async_condition(self, condition: _validators.AsyncCondition) -> None:
        """Apply ``condition`` to every validator and dependent rule."""
        for validator in self.validators:
            validator.apply_async_condition(condition)
        for rule in self.dependent_rules:
            rule.apply_async_condition(condition)

    def get_display_name(self, context: _context.ValidationContext) -> str:
        """Resolve the display name used in messages.

        Order: explicit display name, the options' resolver, the Pydantic field
        title, then the humanized property name.
        """
        if callable(self.display_name):
            return self.display_name(context)
        if self.display_name is not None:
            return self.display_name

        model_type = type(context.instance_to_validate)
        resolver = context.options.display_name_resolver
        if resolver is not None:
            resolved = resolver(model_type, self.property_name, self)
            if resolved:
                return resolved

        return _field_title(model_type, self.property_name) or humanize(
            self.property_name
        )

    def get_property_value(self, instance: typing.Any) -> typing.Any:
        """Read the property from ``instance`` and apply the transform chain."""
        return _transform.apply_transforms(self.property_func(instance), self.transformer)

    def validate(
        self, context: _context.ValidationContext
    ) -> list[_result.ValidationFailure]:
        """Run every applicable validator synchronously.

        Raises:
            AsyncValidatorInvokedSynchronouslyError: If a validator needs the async path
        """
        return _execution.run_synchronously(
            self._validate(context, None, is_async=False), self
        )

    async def validate_async(
        self,
        context: _context.ValidationContext,
        cancellation: _validators.Cancellation = None,
    ) -> list[_result.ValidationFailure]:
        """Run every applicable validator on the async path."""
        return await self._validate(context, cancellation, is_async=True)

    async def _validate(
        self,
        context: _context.ValidationContext,
        cancellation: _validators.Cancellation,
        *,
        is_async: bool,
    ) -> list[_result.ValidationFailure]:
        logger.debug(
            "Validating %r with %d validator(s)", self.property_name, len(self.validators)
        )
        # Shared by every validator on this rule so the value is read at most once.
        accessor = functools.cache(
            functools.partial(self.get_property_value, context.instance_to_validate)
        )
        failures: list[_result.ValidationFailure] = []

        for validator in self.validators:
            if not is_async and validator.should_validate_asynchronously(context):
                raise _errors.AsyncValidatorInvokedSynchronouslyError(validator)
            if validator.has_condition() and not validator.invoke_condition(context):
                continue
            if validator.has_async_condition() and not await validator.invoke_async_condition(
                context, cancellation
            ):
                continue

            property_context = _context.PropertyValidatorContext(
                context,
                self,
                self.property_name,
                property_value_accessor=accessor,
            )
            if is_async:
                failures.extend(await validator.validate_async(property_context, cancellation))
            else:
                failures.extend(validator.validate(property_context))

        if not failures:
            for rule in self.dependent_rules:
                if context.should_execute(rule):
                    failures.extend(
                        await rule._validate(context, cancellation, is_async=is_async)
                    )
        return failures


class RuleCollection:
    """Ordered rules of a model validator.

    While a ``capture()`` block is open, added rules go to the capture list
    instead of the collection. Captures nest; the innermost one receives rules.
    Callbacks registered with ``on_item_added()`` see rules that reach the
    collection itself, not captured ones.
    """

    def __init__(self) -> None:
        self._rules: list[PropertyRule] = []
        self._captures: list[list[PropertyRule]] = []
        self._item_added: list[typing.Callable[[PropertyRule], None]] = []

    def add(self, rule: PropertyRule) -> None:
        if self._captures:
            self._captures[-1].append(rule)
            return
        self._rules.append(rule)
        for callback in self._item_added:
            callback(rule)

    @contextlib.contextmanager
    def on_item_added(
        self, callback: typing.Callable[[PropertyRule], None]
    ) -> typing.Iterator[None]:
        """Call ``callback`` for each rule added to the collection inside the block."""
        self._item_added.append(callback)
        try:
            yield
        finally:
            self._item_added.remove(callback)

    @contextlib.contextmanager
    def capture(self) -> typing.Iterator[list[PropertyRule]]:
        """Redirect rules added inside the block into the yielded list."""
        captured: list[PropertyRule] = []
        self._captures.append(captured)
        try:
            yield captured
        finally:
            self._captures.pop()
            logger.debug("Captured %d rule(s)", len(captured))

    def __iter__(self) -> typing.Iterator[PropertyRule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __getitem__(self, index: int) -> PropertyRule:
        return self._rules[index]


class ModelValidator(typing.Generic[TModel]):
    """Owns the rules for a model type and runs them over instances.

    Declare rules in a subclass's ``__init__`` or on an instance::

        validator = ModelValidator()
        validator.rule_for("name").not_empty().with_error_code("NAME_REQUIRED")
        result = validator.validate(person)

    Attributes:
        rules: Top-level rules in declaration order
        options: Options for contexts created by this validator (None uses the global ones)
    """

    def __init__(self, options: _options.ValidatorOptions | None = None) -> None:
        self.rules = RuleCollection()
        self.options = options

    def rule_for(
        self,
        property: str | typing.Callable[[TModel], typing.Any],
        property_name: str | None = None,
    ) -> "_builder.RuleBuilder":
        """Start a rule for a property.

        Args:
            property: Property name or dotted path, or a callable reading the value
            property_name: Name reported on failures; required for callables

        Returns:
            A builder for attaching validators to the new rule

        Raises:
            InvalidValidatorError: If a callable is given without ``property_name``
        """
        if callable(property):
            if property_name is None:
                raise _errors.InvalidValidatorError(
                    "property_name is required when rule_for is given a callable."
                )
            rule = PropertyRule(property_name, property)
        else:
            rule = PropertyRule(property_name or property)
            if property_name is not None:
                rule.property_func = functools.partial(resolve_property, path=property)
        self.rules.add(rule)
        return _builder.RuleBuilder(rule, self)

    def rule_set(
        self, rule_set_names: str | typing.Iterable[str], action: typing.Callable[[], None]
    ) -> None:
        """Declare rules inside ``action`` as members of the named rule sets.

        Args:
            rule_set_names: A name, comma separated names, or an iterable of names
            action: Callback declaring rules via ``rule_for``
        """
        if isinstance(rule_set_names, str):
            names = [name.strip() for name in rule_set_names.split(",") if name.strip()]
        else:
            names = list(rule_set_names)

        def tag(rule: PropertyRule) -> None:
            rule.rule_sets = list(names)

        with self.rules.on_item_added(tag):
            action()

    def create_context(
        self,
        instance: TModel,
        *,
        rule_sets: typing.Iterable[str] | None = None,
        root_context_data: dict[str, typing.Any] | None = None,
    ) -> _context.ValidationContext:
        return _context.ValidationContext(
            instance,
            root_context_data=root_context_data,
            rule_sets=rule_sets,
            options=self.options,
        )

    def validate(
        self,
        instance: TModel | _context.ValidationContext,
        *,
        rule_sets: typing.Iterable[str] | None = None,
        root_context_data: dict[str, typing.Any] | None = None,
    ) -> _result.ValidationResult:
        """Validate an instance synchronously.

        Args:
            instance: Model instance, or a prepared ValidationContext
            rule_sets: Rule sets to run (None runs the default set, ``"*"`` all)
            root_context_data: Data shared by every rule in this run

        Returns:
            ValidationResult with failures in rule and validator order

        Raises:
            AsyncValidatorInvokedSynchronouslyError: If any executed validator
                needs the async path
        """
        context = self._as_context(instance, rule_sets, root_context_data)
        return _execution.run_synchronously(
            self._validate(context, None, is_async=False), self
        )

    async def validate_async(
        self,
        instance: TModel | _context.ValidationContext,
        *,
        rule_sets: typing.Iterable[str] | None = None,
        root_context_data: dict[str, typing.Any] | None = None,
        cancellation: _validators.Cancellation = None,
    ) -> _result.ValidationResult:
        """Validate an instance, awaiting async conditions and checks.

        Args:
            instance: Model instance, or a prepared ValidationContext
            rule_sets: Rule sets to run (None runs the default set, ``"*"`` all)
            root_context_data: Data shared by every rule in this run
            cancellation: Event that async checks may poll to stop early

        Returns:
            ValidationResult with failures in rule and validator order
        """
        context = self._as_context(instance, rule_sets, root_context_data)
        return await self._validate(context, cancellation, is_async=True)

    def _as_context(
        self,
        instance: typing.Any,
        rule_sets: typing.Iterable[str] | None,
        root_context_data: dict[str, typing.Any] | None,
    ) -> _context.ValidationContext:
        if isinstance(instance, _context.ValidationContext):
            return instance
        return self.create_context(
            instance, rule_sets=rule_sets, root_context_data=root_context_data
        )

    async def _validate(
        self,
        context: _context.ValidationContext,
        cancellation: _validators.Cancellation,
        *,
        is_async: bool,
    ) -> _result.ValidationResult:
        failures: list[_result.ValidationFailure] = []
        for rule in self.rules:
            if context.should_execute(rule):
                failures.extend(
                    await rule._validate(context, cancellation, is_async=is_async)
                )
        return _result.ValidationResult(errors=failures)
