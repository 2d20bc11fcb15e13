"""Shared pytest fixtures for fluentrules tests."""

import typing

import pydantic
import pytest

from fluentrules.context import PropertyValidatorContext, ValidationContext
from fluentrules.options import ValidatorOptions, global_options
from fluentrules.rules import PropertyRule


class Address(pydantic.BaseModel):
    """Test model representing a postal address."""

    street: str = ""
    city: str = ""


class Person(pydantic.BaseModel):
    """Test model representing a person."""

    name: str = ""
    surname: str = ""
    email: str | None = None
    age: int = 0
    nickname: str = pydantic.Field(default="", title="Preferred name")
    address: Address | None = None


class CallCounter:
    """Callable wrapper that counts invocations."""

    def __init__(self, func: typing.Callable[..., typing.Any]) -> None:
        self.func = func
        self.calls = 0

    def __call__(self, *args: typing.Any) -> typing.Any:
        self.calls += 1
        return self.func(*args)


@pytest.fixture(autouse=True)
def reset_global_options() -> typing.Iterator[None]:
    """Restore the process-wide options after every test."""
    yield
    global_options.reset()


@pytest.fixture
def person_model() -> type[pydantic.BaseModel]:
    """Fixture providing the Person Pydantic model."""
    return Person


@pytest.fixture
def make_context() -> typing.Callable[..., PropertyValidatorContext]:
    """Fixture building a PropertyValidatorContext for a single value."""

    def _make(
        value: typing.Any = None,
        *,
        instance: typing.Any = None,
        property_name: str = "name",
        rule: PropertyRule | None = None,
        options: ValidatorOptions | None = None,
        root_context_data: dict[str, typing.Any] | None = None,
    ) -> PropertyValidatorContext:
        parent = ValidationContext(
            instance if instance is not None else {property_name: value},
            root_context_data=root_context_data,
            options=options,
        )
        return PropertyValidatorContext(
            parent, rule or PropertyRule(property_name), property_name, value
        )

    return _make
