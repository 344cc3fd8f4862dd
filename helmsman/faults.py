"""
Helmsman faults: stable codes and the exception taxonomy.

Scope
- FaultCode: canonical numeric identifiers for every failure the core can raise.
  Codes are grouped by domain so logs and searches stay predictable.
- CommandException: base type carrying a message plus a read-only options mapping
  (context such as the offending name or raw value).
- Concrete exceptions also derive from the matching builtin (ValueError, LookupError,
  RuntimeError) so callers can catch them idiomatically.

Recovery policy
- Routing misses are not exceptions (the route carries no command).
- Conversion failures are recovered by typed getters (declared default or zero value).
- Configuration errors (duplicates, sealed registry/pipeline) are fatal at setup time.
- Anything escaping the pipeline is caught once by Application.run and mapped to exit code 1.
"""
from enum import IntEnum
from types import MappingProxyType

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - routing (111xx): UNKNOWN_COMMAND, COMMAND_NOT_FOUND
    - registration (112xx): DUPLICATE_NAME, DUPLICATE_OPTION, DUPLICATE_ARGUMENT,
      REGISTRY_SEALED, PIPELINE_SEALED
    - conversion (113xx): TYPE_CONVERSION
    - validation (114xx): VALIDATION_FAILED
    - execution (115xx): INVALID_EXIT_CODE
    """
    # --- routing (111xx) ---
    UNKNOWN_COMMAND     = 11101
    COMMAND_NOT_FOUND   = 11102

    # --- registration (112xx) ---
    DUPLICATE_NAME      = 11201
    DUPLICATE_OPTION    = 11202
    DUPLICATE_ARGUMENT  = 11203
    REGISTRY_SEALED     = 11204
    PIPELINE_SEALED     = 11205

    # --- conversion (113xx) ---
    TYPE_CONVERSION     = 11301

    # --- validation (114xx) ---
    VALIDATION_FAILED   = 11401

    # --- execution (115xx) ---
    INVALID_EXIT_CODE   = 11501

    def normalize(self):
        """
        return a host-normalized label for this code.

        the host application can provide a __codes__ mapping in __main__ to
        relabel numeric ids; otherwise the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class CommandException(Exception):
    code = Unset

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message if self.message is not Unset else ""

    def __repr__(self):
        return "%s(%r, code=%s)" % (type(self).__name__, str(self), self.code.normalize() if self.code else None)


class DuplicateNameError(CommandException, ValueError):
    code = FaultCode.DUPLICATE_NAME


class DuplicateOptionError(DuplicateNameError):
    code = FaultCode.DUPLICATE_OPTION


class DuplicateArgumentError(DuplicateNameError):
    code = FaultCode.DUPLICATE_ARGUMENT


class CommandNotFoundError(CommandException, LookupError):
    code = FaultCode.COMMAND_NOT_FOUND


class TypeConversionError(CommandException, ValueError):
    code = FaultCode.TYPE_CONVERSION


class RegistrySealedError(CommandException, RuntimeError):
    code = FaultCode.REGISTRY_SEALED


class PipelineSealedError(CommandException, RuntimeError):
    code = FaultCode.PIPELINE_SEALED


class InvalidExitCodeError(CommandException, TypeError):
    code = FaultCode.INVALID_EXIT_CODE


__all__ = (
    "FaultCode",
    "CommandException",
    "DuplicateNameError",
    "DuplicateOptionError",
    "DuplicateArgumentError",
    "CommandNotFoundError",
    "TypeConversionError",
    "RegistrySealedError",
    "PipelineSealedError",
    "InvalidExitCodeError",
)
