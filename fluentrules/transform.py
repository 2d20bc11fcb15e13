"""Transformations applied to a property value before validation."""

import typing


class Transform:
    """An ordered chain of value transformations for one rule.

    Each call to ``then`` returns a new chain, so a chain already installed on
    a rule is never mutated by later declarations.

    Attributes:
        funcs: Transformation functions, applied first to last
    """

    def __init__(
        self, funcs: typing.Iterable[typing.Callable[[typing.Any], typing.Any]] = ()
    ) -> None:
        self.funcs = tuple(funcs)

    def then(self, func: typing.Callable[[typing.Any], typing.Any]) -> "Transform":
        """Return a chain that applies ``func`` after every existing step."""
        return Transform(self.funcs + (func,))

    def __call__(self, value: typing.Any) -> typing.Any:
        for func in self.funcs:
            value = func(value)
        return value

    def __len__(self) -> int:
        return len(self.funcs)


def apply_transforms(value: typing.Any, transform: Transform | None) -> typing.Any:
    """Apply ``transform`` to ``value`` when one is installed.

    Args:
        value: Raw property value
        transform: Chain to apply, or None

    Returns:
        The transformed value, or ``value`` unchanged
    """
    if transform is None:
        return value
    return transform(value)
