"""Tests for configuration options, localization and the sync driver."""

import asyncio

import pytest

from fluentrules.errors import AsyncValidatorInvokedSynchronouslyError
from fluentrules.execution import run_synchronously
from fluentrules.formatter import MessageFormatter
from fluentrules.languages import LanguageManager
from fluentrules.options import (
    ApplyConditionTo,
    Severity,
    ValidatorOptions,
    default_error_code_resolver,
    global_options,
)
from fluentrules.transform import Transform, apply_transforms
from fluentrules.validators import NotNullValidator


def test_severity_values():
    """Test Severity members compare equal to their string values."""
    assert Severity.ERROR == "error"
    assert Severity.WARNING == "warning"
    assert Severity.INFO == "info"
    assert ApplyConditionTo.ALL_VALIDATORS == "all_validators"


def test_default_options():
    """Test the defaults of a fresh options object."""
    options = ValidatorOptions()

    assert isinstance(options.message_formatter_factory(), MessageFormatter)
    assert isinstance(options.language_manager, LanguageManager)
    assert options.error_code_resolver(NotNullValidator()) == "NotNullValidator"
    assert options.display_name_resolver is None


def test_reset_restores_defaults():
    """Test reset() undoes host configuration."""
    options = ValidatorOptions(
        error_code_resolver=lambda v: "X",
        display_name_resolver=lambda t, n, r: n,
    )

    options.reset()

    assert options.error_code_resolver is default_error_code_resolver
    assert options.display_name_resolver is None


def test_global_options_is_shared():
    """Test the module-level options object is a single shared instance."""
    from fluentrules import global_options as exported

    assert exported is global_options


def test_language_manager_lookup():
    """Test culture matching and fallbacks."""
    manager = LanguageManager()

    assert manager.get_string("NotEmptyValidator") == "'{PropertyName}' must not be empty."
    assert manager.get_string("NotEmptyValidator", "fr-CA") == (
        "'{PropertyName}' ne doit pas être vide."
    )
    assert manager.get_string("NotEmptyValidator", "de") == (
        "'{PropertyName}' must not be empty."
    )
    assert manager.get_string("Missing") == ""


def test_language_manager_culture_and_disabled():
    """Test the default culture and the enabled switch."""
    manager = LanguageManager(culture="fr")
    assert manager.get_string("NotNullValidator").startswith("'{PropertyName}' ne doit")

    manager.enabled = False
    assert manager.get_string("NotNullValidator") == "'{PropertyName}' must not be empty."


def test_add_translation():
    """Test custom translations override and extend the built-in tables."""
    manager = LanguageManager()
    manager.add_translation("de", "NotNullValidator", "'{PropertyName}' darf nicht leer sein.")
    manager.add_translation("en", "NotNullValidator", "{PropertyName} is required.")

    assert manager.get_string("NotNullValidator", "de") == "'{PropertyName}' darf nicht leer sein."
    assert manager.get_string("NotNullValidator") == "{PropertyName} is required."


def test_transform_chain():
    """Test Transform applies functions in order and never mutates itself."""
    base = Transform([str.strip])
    extended = base.then(str.upper)

    assert extended("  ab ") == "AB"
    assert base("  ab ") == "ab"
    assert len(extended) == 2
    assert apply_transforms(" x ", None) == " x "


def test_run_synchronously_returns_value():
    """Test a coroutine that never suspends runs without an event loop."""

    async def compute():
        return 42

    assert run_synchronously(compute(), owner=None) == 42


def test_run_synchronously_rejects_suspension():
    """Test a coroutine that suspends is reported as a usage error."""

    async def suspends():
        await asyncio.sleep(0)
        return 1

    with pytest.raises(AsyncValidatorInvokedSynchronouslyError):
        run_synchronously(suspends(), owner=NotNullValidator())
