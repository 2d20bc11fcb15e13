"""Exceptions raised for misuse of the rule API.

Validation failures are never raised; they are returned as data. These
exceptions signal programming errors at rule construction or execution time.
"""


class InvalidValidatorError(ValueError):
    """Raised when a builder is given a missing validator or transform."""


class AsyncValidatorInvokedSynchronouslyError(RuntimeError):
    """Raised when a validator that needs the async path is run synchronously.

    Attributes:
        validator: The validator that required asynchronous execution
    """

    def __init__(self, validator: object, message: str | None = None) -> None:
        self.validator = validator
        super().__init__(
            message
            or f"Validator {type(validator).__name__} contains asynchronous rules "
            "or conditions; use validate_async instead of validate."
        )
