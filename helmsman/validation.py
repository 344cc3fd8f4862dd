"""
Helmsman validation: required-field presence checks over parsed arguments.

Only presence is checked; business rules belong to the commands themselves.
"""
from abc import ABC, abstractmethod
from typing import NamedTuple


class ValidationError(NamedTuple):
    message: str
    parameter: str | None = None


class ValidationResult:
    """
    Ordered collection of validation errors; valid when empty.
    """

    def __init__(self):
        self._errors = []

    @classmethod
    def success(cls):
        return cls()

    @property
    def valid(self):
        return not self._errors

    @property
    def errors(self):
        return tuple(self._errors)

    def add_error(self, message, parameter=None, /):
        self._errors.append(ValidationError(message, parameter))

    def __bool__(self):
        return self.valid

    def __repr__(self):
        return f"validation-result(valid={self.valid!r}, errors={self.errors!r})"


class ArgumentValidator(ABC):

    @abstractmethod
    def validate(self, arguments, definition, /):
        """
        Check `arguments` (ParsedArguments) against `definition` and return a ValidationResult.
        """


class DefaultArgumentValidator(ArgumentValidator):
    """
    Reports required options (long or short spelling) and required positional arguments that are missing.
    """

    def validate(self, arguments, definition, /):
        result = ValidationResult()

        for option in definition.options:
            if not option.required:
                continue
            if arguments.has_option(option.name) or (option.short and arguments.has_option(option.short)):
                continue
            spelling = f"--{option.name}/-{option.short}" if option.short else f"--{option.name}"
            result.add_error(f"Required option '{spelling}' is missing.", option.name)

        for argument in definition.ordered_arguments():
            if argument.required and not arguments.has_named_argument(argument.name):
                result.add_error(f"Required argument '<{argument.name}>' is missing.", argument.name)

        return result


__all__ = (
    "ValidationError",
    "ValidationResult",
    "ArgumentValidator",
    "DefaultArgumentValidator",
)
