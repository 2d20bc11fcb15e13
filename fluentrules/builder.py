"""Fluent API for attaching validators and nested rules to a property rule."""

import logging
import typing

from . import context as _context
from . import errors as _errors
from . import options as _options
from . import transform as _transform
from . import validators as _validators

if typing.TYPE_CHECKING:
    from .rules import ModelValidator, PropertyRule

logger = logging.getLogger(__name__)

TModel = typing.TypeVar("TModel")
TProperty = typing.TypeVar("TProperty")
TNew = typing.TypeVar("TNew")
TValidator = typing.TypeVar("TValidator", bound=_validators.PropertyValidator)


class _BuilderBase(typing.Generic[TModel, TProperty]):
    """Validator attachment shared by both builder types."""

    def __init__(self, rule: "PropertyRule", parent: "ModelValidator[TModel]") -> None:
        self._rule = rule
        self._parent = parent

    @property
    def rule(self) -> "PropertyRule":
        return self._rule

    def set_validator(
        self, validator: TValidator
    ) -> "ScopedRuleBuilder[TModel, TProperty, TValidator]":
        """Append ``validator`` to the rule.

        Args:
            validator: Validator to attach

        Returns:
            A builder scoped to ``validator`` for further configuration

        Raises:
            InvalidValidatorError: If ``validator`` is None or not a PropertyValidator
        """
        if validator is None:
            raise _errors.InvalidValidatorError(
                "Cannot pass a null validator to set_validator."
            )
        if not isinstance(validator, _validators.PropertyValidator):
            raise _errors.InvalidValidatorError(
                f"Expected a PropertyValidator, got {type(validator).__name__}."
            )
        self._rule.add_validator(validator)
        return ScopedRuleBuilder(self._rule, self._parent, validator)

    def not_null(
        self,
    ) -> "ScopedRuleBuilder[TModel, TProperty, _validators.NotNullValidator]":
        return self.set_validator(_validators.NotNullValidator())

    def not_empty(
        self,
    ) -> "ScopedRuleBuilder[TModel, TProperty, _validators.NotEmptyValidator]":
        return self.set_validator(_validators.NotEmptyValidator())

    def length(
        self, min_length: int = 0, max_length: int | None = None
    ) -> "ScopedRuleBuilder[TModel, TProperty, _validators.LengthValidator]":
        return self.set_validator(_validators.LengthValidator(min_length, max_length))

    def must(
        self,
        predicate: typing.Callable[..., bool],
        *,
        with_instance: bool = False,
    ) -> "ScopedRuleBuilder[TModel, TProperty, _validators.PredicateValidator]":
        """Attach a predicate over the value, or over ``(instance, value)``."""
        if with_instance:
            return self.set_validator(
                _validators.PredicateValidator(
                    lambda instance, value, context: predicate(instance, value)
                )
            )
        return self.set_validator(
            _validators.PredicateValidator(
                lambda instance, value, context: predicate(value)
            )
        )

    def must_async(
        self,
        predicate: typing.Callable[..., typing.Awaitable[bool]],
        *,
        with_instance: bool = False,
    ) -> "ScopedRuleBuilder[TModel, TProperty, _validators.AsyncPredicateValidator]":
        """Attach an awaitable predicate over ``(value, cancellation)``.

        With ``with_instance`` the predicate receives
        ``(instance, value, cancellation)``.
        """
        if with_instance:
            return self.set_validator(
                _validators.AsyncPredicateValidator(
                    lambda instance, value, context, cancellation: predicate(
                        instance, value, cancellation
                    )
                )
            )
        return self.set_validator(
            _validators.AsyncPredicateValidator(
                lambda instance, value, context, cancellation: predicate(
                    value, cancellation
                )
            )
        )


class RuleBuilder(_BuilderBase[TModel, TProperty]):
    """Builder returned by ``ModelValidator.rule_for``."""

    def configure(
        self, configurator: typing.Callable[["PropertyRule"], None]
    ) -> "RuleBuilder[TModel, TProperty]":
        """Call ``configurator(rule)`` for in-place adjustment."""
        configurator(self._rule)
        return self

    def transform(
        self, func: typing.Callable[[TProperty], TNew]
    ) -> "RuleBuilder[TModel, TNew]":
        """Transform the property value before any validator sees it.

        Repeated calls compose in declaration order.

        Args:
            func: Function from the current value to the new value

        Returns:
            A builder whose value type is the output of ``func``

        Raises:
            InvalidValidatorError: If ``func`` is None
        """
        if func is None:
            raise _errors.InvalidValidatorError("Cannot pass a null transform to transform.")
        current = self._rule.transformer or _transform.Transform()
        self._rule.transformer = current.then(func)
        return RuleBuilder(self._rule, self._parent)


class RuleRecorder(typing.Generic[TModel]):
    """Declares dependent rules inside ``ScopedRuleBuilder.dependent_rules``.

    Rules declared through the recorder, or directly on the owning model
    validator while the callback runs, are captured as dependent rules.
    """

    def __init__(self, parent: "ModelValidator[TModel]") -> None:
        self._parent = parent

    def rule_for(
        self,
        property: str | typing.Callable[[TModel], typing.Any],
        property_name: str | None = None,
    ) -> RuleBuilder[TModel, typing.Any]:
        return self._parent.rule_for(property, property_name)


class ScopedRuleBuilder(_BuilderBase[TModel, TProperty], typing.Generic[TModel, TProperty, TValidator]):
    """Builder bound to the validator most recently attached to the rule."""

    def __init__(
        self,
        rule: "PropertyRule",
        parent: "ModelValidator[TModel]",
        validator: TValidator,
    ) -> None:
        super().__init__(rule, parent)
        self._validator = validator

    @property
    def validator(self) -> TValidator:
        return self._validator

    def configure(
        self, configurator: typing.Callable[["PropertyRule", TValidator], None]
    ) -> "ScopedRuleBuilder[TModel, TProperty, TValidator]":
        """Call ``configurator(rule, validator)`` for in-place adjustment."""
        configurator(self._rule, self._validator)
        return self

    def dependent_rules(
        self, action: typing.Callable[[RuleRecorder[TModel]], None]
    ) -> "ScopedRuleBuilder[TModel, TProperty, TValidator]":
        """Declare rules that run only when this rule's validators all pass.

        Rules declared while ``action`` runs are kept out of the model
        validator's rules. Captured rules without rule sets take this rule's
        rule sets, when it has any.

        Args:
            action: Callback receiving a RuleRecorder to declare rules on

        Returns:
            This builder
        """
        with self._parent.rules.capture() as captured:
            action(RuleRecorder(self._parent))

        if self._rule.rule_sets:
            for rule in captured:
                if not rule.rule_sets:
                    rule.rule_sets = list(self._rule.rule_sets)

        self._rule.dependent_rules.extend(captured)
        logger.debug(
            "Added %d dependent rule(s) to %r", len(captured), self._rule.property_name
        )
        return self

    def with_message(
        self, message: str | typing.Callable[[TModel, TProperty], str]
    ) -> "ScopedRuleBuilder[TModel, TProperty, TValidator]":
        """Override the message template, or supply ``fn(instance, value)``."""
        if callable(message):
            self._validator.set_error_message(
                lambda context: message(
                    context.instance_to_validate, context.property_value
                )
            )
        else:
            self._validator.set_error_message(message)
        return self

    def with_error_code(
        self, error_code: str
    ) -> "ScopedRuleBuilder[TModel, TProperty, TValidator]":
        self._validator.error_code = error_code
        return self

    def with_severity(
        self, severity: _options.Severity | typing.Callable[[TModel], _options.Severity]
    ) -> "ScopedRuleBuilder[TModel, TProperty, TValidator]":
        if callable(severity):
            self._validator.severity_provider = lambda context: severity(
                context.instance_to_validate
            )
        else:
            self._validator.severity_provider = lambda context: severity
        return self

    def with_state(
        self, provider: typing.Callable[[TModel], typing.Any]
    ) -> "ScopedRuleBuilder[TModel, TProperty, TValidator]":
        self._validator.custom_state_provider = lambda context: provider(
            context.instance_to_validate
        )
        return self

    def with_name(
        self, display_name: str | typing.Callable[[TModel], str]
    ) -> "ScopedRuleBuilder[TModel, TProperty, TValidator]":
        """Set the display name used in messages for this rule."""
        if callable(display_name):
            self._rule.display_name = lambda context: display_name(
                context.instance_to_validate
            )
        else:
            self._rule.display_name = display_name
        return self

    def override_property_name(
        self, property_name: str
    ) -> "ScopedRuleBuilder[TModel, TProperty, TValidator]":
        """Change the property name reported on failures."""
        self._rule.property_name = property_name
        return self

    def when(
        self,
        predicate: typing.Callable[[TModel], bool],
        apply_condition_to: _options.ApplyConditionTo = _options.ApplyConditionTo.ALL_VALIDATORS,
    ) -> "ScopedRuleBuilder[TModel, TProperty, TValidator]":
        """Run validators only when ``predicate(instance)`` is true."""

        def condition(context: _context.ValidationContext) -> bool:
            return predicate(context.instance_to_validate)

        if apply_condition_to == _options.ApplyConditionTo.CURRENT_VALIDATOR:
            self._validator.apply_condition(condition)
        else:
            self._rule.apply_condition(condition)
        return self

    def unless(
        self,
        predicate: typing.Callable[[TModel], bool],
        apply_condition_to: _options.ApplyConditionTo = _options.ApplyConditionTo.ALL_VALIDATORS,
    ) -> "ScopedRuleBuilder[TModel, TProperty, TValidator]":
        """Run validators only when ``predicate(instance)`` is false."""
        return self.when(lambda instance: not predicate(instance), apply_condition_to)

    def when_async(
        self,
        predicate: typing.Callable[
            [TModel, _validators.Cancellation], typing.Awaitable[bool]
        ],
        apply_condition_to: _options.ApplyConditionTo = _options.ApplyConditionTo.ALL_VALIDATORS,
    ) -> "ScopedRuleBuilder[TModel, TProperty, TValidator]":
        """Run validators only when ``await predicate(instance, cancellation)`` is true.

        Validators with an async condition must be run with ``validate_async``.
        """

        async def condition(
            context: _context.ValidationContext, cancellation: _validators.Cancellation
        ) -> bool:
            return await predicate(context.instance_to_validate, cancellation)

        if apply_condition_to == _options.ApplyConditionTo.CURRENT_VALIDATOR:
            self._validator.apply_async_condition(condition)
        else:
            self._rule.apply_async_condition(condition)
        return self

    def unless_async(
        self,
        predicate: typing.Callable[
            [TModel, _validators.Cancellation], typing.Awaitable[bool]
        ],
        apply_condition_to: _options.ApplyConditionTo = _options.ApplyConditionTo.ALL_VALIDATORS,
    ) -> "ScopedRuleBuilder[TModel, TProperty, TValidator]":
        async def negated(
            instance: TModel, cancellation: _validators.Cancellation
        ) -> bool:
            return not await predicate(instance, cancellation)

        return self.when_async(negated, apply_condition_to)
