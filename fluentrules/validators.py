"""Property validators: the unit of logic that checks one property value.

A validator is configured once (message, error code, conditions, severity and
custom state providers) and then reused across validations, including
concurrently. All per-call state lives in the ``PropertyValidatorContext``.
"""

import abc
import asyncio
import collections.abc
import logging
import typing

from . import context as _context
from . import errors as _errors
from . import execution as _execution
from . import message as _message
from . import options as _options
from . import result as _result

logger = logging.getLogger(__name__)

Cancellation = asyncio.Event | None

Condition = typing.Callable[[_context.ValidationContext], bool]
AsyncCondition = typing.Callable[
    [_context.ValidationContext, Cancellation], typing.Awaitable[bool]
]
MessageFactory = typing.Callable[[_context.PropertyValidatorContext], str]
CustomStateProvider = typing.Callable[[_context.PropertyValidatorContext], typing.Any]
SeverityProvider = typing.Callable[
    [_context.PropertyValidatorContext], _options.Severity
]


def combine_conditions(conditions: typing.Sequence[Condition]) -> Condition:
    """AND together ``conditions``, most recently applied first, short-circuiting.

    Args:
        conditions: Conditions in the order they were applied

    Returns:
        A single condition
    """
    ordered = tuple(reversed(conditions))

    def combined(context: _context.ValidationContext) -> bool:
        return all(condition(context) for condition in ordered)

    return combined


def combine_async_conditions(
    conditions: typing.Sequence[AsyncCondition],
) -> AsyncCondition:
    """Async counterpart of ``combine_conditions``; each condition is awaited in turn."""
    ordered = tuple(reversed(conditions))

    async def combined(
        context: _context.ValidationContext, cancellation: Cancellation
    ) -> bool:
        for condition in ordered:
            if not await condition(context, cancellation):
                return False
        return True

    return combined


class PropertyValidator(abc.ABC):
    """Base class for validators attached to a property rule.

    Subclasses implement ``is_valid`` and, for checks that need to suspend,
    ``is_valid_async`` together with ``should_validate_asynchronously``.

    Attributes:
        error_code: Explicit error code; when None the options' resolver is used
        custom_state_provider: Optional callable producing a failure's custom state
        severity_provider: Optional callable producing a failure's severity
    """

    def __init__(self, error_message: str | MessageFactory | None = None) -> None:
        self._error_message: str | None = None
        self._error_message_factory: MessageFactory | None = None
        self._conditions: list[Condition] = []
        self._async_conditions: list[AsyncCondition] = []
        self._condition: Condition | None = None
        self._async_condition: AsyncCondition | None = None
        self.error_code: str | None = None
        self.custom_state_provider: CustomStateProvider | None = None
        self.severity_provider: SeverityProvider | None = None
        if error_message is not None:
            self.set_error_message(error_message)

    def has_condition(self) -> bool:
        return self._condition is not None

    def has_async_condition(self) -> bool:
        return self._async_condition is not None

    def apply_condition(self, condition: Condition) -> None:
        """Add a condition, ANDed with any existing ones and evaluated before them."""
        self._conditions.append(condition)
        self._condition = combine_conditions(self._conditions)

    def apply_async_condition(self, condition: AsyncCondition) -> None:
        """Add an async condition, ANDed with any existing ones and awaited before them."""
        self._async_conditions.append(condition)
        self._async_condition = combine_async_conditions(self._async_conditions)

    def invoke_condition(self, context: _context.ValidationContext) -> bool:
        if self._condition is None:
            return True
        return self._condition(context)

    async def invoke_async_condition(
        self, context: _context.ValidationContext, cancellation: Cancellation = None
    ) -> bool:
        if self._async_condition is None:
            return True
        return await self._async_condition(context, cancellation)

    def should_validate_asynchronously(
        self, context: _context.ValidationContext
    ) -> bool:
        # An async condition forces the async path even for a sync validation.
        return self.has_async_condition()

    def set_error_message(self, error_message: str | MessageFactory) -> None:
        """Override the message template with a string or a context-based factory."""
        if callable(error_message):
            self._error_message_factory = error_message
            self._error_message = None
        else:
            self._error_message = error_message
            self._error_message_factory = None

    def get_default_message_template(
        self, context: _context.PropertyValidatorContext
    ) -> str:
        return "No default error message has been specified"

    def localized(
        self, fallback_key: str, context: _context.PropertyValidatorContext
    ) -> str:
        """Look up a template, preferring the error code over ``fallback_key``.

        Args:
            fallback_key: Key used when there is no error code or no translation for it
            context: Invocation context, used to reach the language manager

        Returns:
            The translated template
        """
        language_manager = context.options.language_manager
        if self.error_code is not None:
            result = language_manager.get_string(self.error_code)
            if result:
                return result
        return language_manager.get_string(fallback_key)

    def get_error_message(
        self, context: _context.PropertyValidatorContext | None
    ) -> str:
        """Resolve and format this validator's own message.

        Args:
            context: Invocation context; when None the raw default template is returned

        Returns:
            Formatted message text
        """
        if context is None:
            return self._error_message or "No default error message has been specified"
        if self._error_message_factory is not None:
            raw_template = self._error_message_factory(context)
        elif self._error_message is not None:
            raw_template = self._error_message
        else:
            raw_template = self.get_default_message_template(context)
        return context.message_formatter.build_message(raw_template)

    def prepare_message_formatter(
        self, context: _context.PropertyValidatorContext
    ) -> None:
        """Add the standard placeholders before a failure is built."""
        formatter = context.message_formatter
        formatter.append_property_name(context.display_name)
        formatter.append_property_value(context.property_value)

        root_data = context.parent_context.root_context_data
        if (
            _context.COLLECTION_INDEX_KEY in root_data
            and _context.COLLECTION_INDEX not in formatter.placeholder_values
        ):
            formatter.append_argument(
                _context.COLLECTION_INDEX, root_data[_context.COLLECTION_INDEX_KEY]
            )

    def create_validation_error(
        self, context: _context.PropertyValidatorContext
    ) -> _result.ValidationFailure:
        """Build the failure for this validator from a prepared context."""
        error_message = _message.resolve_message(self, context)
        error_code = self.error_code or context.options.error_code_resolver(self)
        extra: dict[str, typing.Any] = {}
        if self.custom_state_provider is not None:
            extra["custom_state"] = self.custom_state_provider(context)
        if self.severity_provider is not None:
            extra["severity"] = self.severity_provider(context)

        return _result.ValidationFailure(
            property_name=context.property_name,
            error_message=error_message,
            attempted_value=context.property_value,
            error_code=error_code,
            formatted_message_placeholder_values=dict(
                context.message_formatter.placeholder_values
            ),
            **extra,
        )

    @abc.abstractmethod
    def is_valid(self, context: _context.PropertyValidatorContext) -> bool:
        """Check the context's property value."""

    async def is_valid_async(
        self,
        context: _context.PropertyValidatorContext,
        cancellation: Cancellation = None,
    ) -> bool:
        return self.is_valid(context)

    def validate(
        self, context: _context.PropertyValidatorContext
    ) -> list[_result.ValidationFailure]:
        """Validate synchronously, returning zero or one failure."""
        return _execution.run_synchronously(
            self._validate(context, None, is_async=False), self
        )

    async def validate_async(
        self,
        context: _context.PropertyValidatorContext,
        cancellation: Cancellation = None,
    ) -> list[_result.ValidationFailure]:
        """Validate on the async path, returning zero or one failure."""
        return await self._validate(context, cancellation, is_async=True)

    async def _validate(
        self,
        context: _context.PropertyValidatorContext,
        cancellation: Cancellation,
        *,
        is_async: bool,
    ) -> list[_result.ValidationFailure]:
        if is_async:
            valid = await self.is_valid_async(context, cancellation)
        else:
            valid = self.is_valid(context)
        if valid:
            return []

        self.prepare_message_formatter(context)
        failure = self.create_validation_error(context)
        logger.debug(
            "%s failed for property %r", type(self).__name__, context.property_name
        )
        return [failure]


class NotNullValidator(PropertyValidator):
    """Fails when the value is None."""

    def is_valid(self, context: _context.PropertyValidatorContext) -> bool:
        return context.property_value is not None

    def get_default_message_template(
        self, context: _context.PropertyValidatorContext
    ) -> str:
        return self.localized("NotNullValidator", context)


class NotEmptyValidator(PropertyValidator):
    """Fails for None, blank strings and empty collections."""

    def is_valid(self, context: _context.PropertyValidatorContext) -> bool:
        value = context.property_value
        if value is None:
            return False
        if isinstance(value, str):
            return bool(value.strip())
        if isinstance(value, collections.abc.Sized):
            return len(value) > 0
        return True

    def get_default_message_template(
        self, context: _context.PropertyValidatorContext
    ) -> str:
        return self.localized("NotEmptyValidator", context)


class LengthValidator(PropertyValidator):
    """Checks the length of a string against inclusive bounds.

    None values pass; combine with ``NotNullValidator`` to reject them.

    Attributes:
        min_length: Minimum length (inclusive)
        max_length: Maximum length (inclusive), or None for no upper bound
    """

    def __init__(
        self,
        min_length: int = 0,
        max_length: int | None = None,
        error_message: str | MessageFactory | None = None,
    ) -> None:
        if max_length is not None and max_length < min_length:
            raise ValueError("max_length should be larger than min_length.")
        super().__init__(error_message)
        self.min_length = min_length
        self.max_length = max_length

    def is_valid(self, context: _context.PropertyValidatorContext) -> bool:
        value = context.property_value
        if value is None:
            return True
        length = len(value)
        if length < self.min_length:
            return False
        return self.max_length is None or length <= self.max_length

    def prepare_message_formatter(
        self, context: _context.PropertyValidatorContext
    ) -> None:
        value = context.property_value
        context.message_formatter.append_argument(
            "MinLength", self.min_length
        ).append_argument("MaxLength", self.max_length).append_argument(
            "TotalLength", 0 if value is None else len(value)
        )
        super().prepare_message_formatter(context)

    def get_default_message_template(
        self, context: _context.PropertyValidatorContext
    ) -> str:
        if self.max_length is None:
            return self.localized("MinimumLengthValidator", context)
        if self.min_length == 0:
            return self.localized("MaximumLengthValidator", context)
        return self.localized("LengthValidator", context)


class PredicateValidator(PropertyValidator):
    """Delegates the check to ``predicate(instance, value, context)``."""

    def __init__(
        self,
        predicate: typing.Callable[
            [typing.Any, typing.Any, _context.PropertyValidatorContext], bool
        ],
    ) -> None:
        super().__init__()
        self.predicate = predicate

    def is_valid(self, context: _context.PropertyValidatorContext) -> bool:
        return self.predicate(
            context.instance_to_validate, context.property_value, context
        )

    def get_default_message_template(
        self, context: _context.PropertyValidatorContext
    ) -> str:
        return self.localized("PredicateValidator", context)


class AsyncPredicateValidator(PropertyValidator):
    """Awaits ``predicate(instance, value, context, cancellation)``.

    Always runs on the async path. The predicate is responsible for honouring
    the cancellation event.
    """

    def __init__(
        self,
        predicate: typing.Callable[
            [
                typing.Any,
                typing.Any,
                _context.PropertyValidatorContext,
                Cancellation,
            ],
            typing.Awaitable[bool],
        ],
    ) -> None:
        super().__init__()
        self.predicate = predicate

    def should_validate_asynchronously(
        self, context: _context.ValidationContext
    ) -> bool:
        return True

    def is_valid(self, context: _context.PropertyValidatorContext) -> bool:
        raise _errors.AsyncValidatorInvokedSynchronouslyError(self)

    async def is_valid_async(
        self,
        context: _context.PropertyValidatorContext,
        cancellation: Cancellation = None,
    ) -> bool:
        return await self.predicate(
            context.instance_to_validate, context.property_value, context, cancellation
        )

    def get_default_message_template(
        self, context: _context.PropertyValidatorContext
    ) -> str:
        return self.localized("AsyncPredicateValidator", context)
