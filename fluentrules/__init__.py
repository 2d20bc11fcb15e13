"""Compose and run per-property validation rules.

Attach validators to model properties with a fluent builder, gate them with
sync or async conditions, transform values before validation, and nest rules
that only run when an outer rule succeeds. Failures come back as Pydantic
models with fully formatted, localizable messages.
"""

__version__ = "0.1.0"

from fluentrules.builder import RuleBuilder, RuleRecorder, ScopedRuleBuilder
from fluentrules.context import (
    COLLECTION_INDEX_KEY,
    PropertyValidatorContext,
    ValidationContext,
)
from fluentrules.errors import (
    AsyncValidatorInvokedSynchronouslyError,
    InvalidValidatorError,
)
from fluentrules.formatter import MessageFormatter
from fluentrules.languages import LanguageManager
from fluentrules.message import MessageBuilderContext
from fluentrules.options import (
    ApplyConditionTo,
    Severity,
    ValidatorOptions,
    global_options,
)
from fluentrules.result import ValidationFailure, ValidationResult
from fluentrules.rules import ModelValidator, PropertyRule, RuleCollection
from fluentrules.transform import Transform
from fluentrules.validators import (
    AsyncPredicateValidator,
    LengthValidator,
    NotEmptyValidator,
    NotNullValidator,
    PredicateValidator,
    PropertyValidator,
)

__all__ = [
    "ApplyConditionTo",
    "AsyncPredicateValidator",
    "AsyncValidatorInvokedSynchronouslyError",
    "COLLECTION_INDEX_KEY",
    "InvalidValidatorError",
    "LanguageManager",
    "LengthValidator",
    "MessageBuilderContext",
    "MessageFormatter",
    "ModelValidator",
    "NotEmptyValidator",
    "NotNullValidator",
    "PredicateValidator",
    "PropertyRule",
    "PropertyValidator",
    "PropertyValidatorContext",
    "RuleBuilder",
    "RuleCollection",
    "RuleRecorder",
    "ScopedRuleBuilder",
    "Severity",
    "Transform",
    "ValidationContext",
    "ValidationFailure",
    "ValidationResult",
    "ValidatorOptions",
    "global_options",
]
