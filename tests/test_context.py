"""Tests for validation contexts and display name resolution."""

from fluentrules.context import PropertyValidatorContext, ValidationContext
from fluentrules.formatter import MessageFormatter
from fluentrules.options import ValidatorOptions
from fluentrules.rules import PropertyRule, humanize

from conftest import Address, CallCounter, Person


def test_accessor_invoked_once():
    """Test the deferred accessor runs once however often the value is read."""
    accessor = CallCounter(lambda: "value")
    context = PropertyValidatorContext(
        ValidationContext({}), PropertyRule("name"), "name", property_value_accessor=accessor
    )

    assert context.property_value == "value"
    assert context.property_value == "value"
    assert accessor.calls == 1


def test_accessor_not_invoked_until_read():
    """Test building a context does not read the value."""
    accessor = CallCounter(lambda: "value")
    PropertyValidatorContext(
        ValidationContext({}), PropertyRule("name"), "name", property_value_accessor=accessor
    )

    assert accessor.calls == 0


def test_accessor_caches_none():
    """Test a None result is cached like any other value."""
    accessor = CallCounter(lambda: None)
    context = PropertyValidatorContext(
        ValidationContext({}), PropertyRule("name"), "name", property_value_accessor=accessor
    )

    assert context.property_value is None
    assert context.property_value is None
    assert accessor.calls == 1


def test_direct_value_and_parent_access():
    """Test a directly supplied value and the parent context passthroughs."""
    person = Person(name="Ada")
    options = ValidatorOptions()
    parent = ValidationContext(person, options=options)
    rule = PropertyRule("name")

    context = PropertyValidatorContext(parent, rule, "name", "Ada")

    assert context.property_value == "Ada"
    assert context.parent_context is parent
    assert context.rule is rule
    assert context.instance_to_validate is person
    assert context.options is options


def test_display_name_recomputed():
    """Test the display name is resolved again on every access."""
    rule = PropertyRule("name")
    names = iter(["First", "Second"])
    rule.display_name = lambda ctx: next(names)
    context = PropertyValidatorContext(ValidationContext({}), rule, "name", "x")

    assert context.display_name == "First"
    assert context.display_name == "Second"


def test_message_formatter_created_once_per_context():
    """Test the formatter factory runs once per context and is not shared."""
    factory = CallCounter(MessageFormatter)
    parent = ValidationContext({}, options=ValidatorOptions(message_formatter_factory=factory))
    rule = PropertyRule("name")
    first = PropertyValidatorContext(parent, rule, "name", "x")
    second = PropertyValidatorContext(parent, rule, "name", "x")

    assert first.message_formatter is first.message_formatter
    assert first.message_formatter is not second.message_formatter
    assert factory.calls == 2


def test_display_name_sources():
    """Test display names come from explicit names, field titles, then the property name."""
    parent = ValidationContext(Person())

    assert PropertyRule("nickname").get_display_name(parent) == "Preferred name"
    assert PropertyRule("surname").get_display_name(parent) == "Surname"

    rule = PropertyRule("nickname")
    rule.display_name = "Alias"
    assert rule.get_display_name(parent) == "Alias"


def test_display_name_resolver_option():
    """Test the options resolver is consulted before field metadata."""
    options = ValidatorOptions(
        display_name_resolver=lambda model_type, name, rule: (
            f"{model_type.__name__}.{name}" if name == "email" else None
        )
    )
    parent = ValidationContext(Person(), options=options)

    assert PropertyRule("email").get_display_name(parent) == "Person.email"
    assert PropertyRule("nickname").get_display_name(parent) == "Preferred name"


def test_humanize():
    """Test property names are turned into readable words."""
    assert humanize("first_name") == "First Name"
    assert humanize("lastName") == "Last Name"
    assert humanize("address.city") == "Address City"
    assert humanize("Email") == "Email"


def test_should_execute_rule_sets():
    """Test rule set selection on the outer context."""
    untagged = PropertyRule("name")
    tagged = PropertyRule("email")
    tagged.rule_sets = ["strict"]
    default_tagged = PropertyRule("age")
    default_tagged.rule_sets = ["default", "strict"]

    default_context = ValidationContext(Person())
    assert default_context.should_execute(untagged) is True
    assert default_context.should_execute(tagged) is False
    assert default_context.should_execute(default_tagged) is True

    strict_context = ValidationContext(Person(), rule_sets=["strict"])
    assert strict_context.should_execute(untagged) is False
    assert strict_context.should_execute(tagged) is True

    everything = ValidationContext(Person(), rule_sets=["*"])
    assert everything.should_execute(untagged) is True
    assert everything.should_execute(tagged) is True


def test_root_context_data_defaults():
    """Test root context data defaults to a fresh dict."""
    first = ValidationContext(Person(address=Address(city="Paris")))
    second = ValidationContext(Person())

    assert first.root_context_data == {}
    assert first.root_context_data is not second.root_context_data
