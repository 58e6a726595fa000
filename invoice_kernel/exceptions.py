"""
Typed Exception Hierarchy for the Invoice Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers of the kernel (the HTTP layer, the CLI, tests) must be able to tell
error kinds apart without parsing messages:
  1. Every error has a TYPED exception class (catch by type, not message)
  2. Every exception has a CODE attribute (machine-readable, API-safe)
  3. Exceptions carry structured DATA (not just a message string)

Example:
    try:
        service.create_invoice(...)
    except ValidationFailedError as e:
        return {"code": e.code, "details": e.messages()}

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from InvoiceKernelError:

    InvoiceKernelError (base)
    |
    +-- ValueObjectError
    |   +-- InvalidAmountError
    |   +-- UnsupportedOperandError
    |
    +-- InvoiceError
    |   +-- ValidationFailedError
    |   +-- InvoiceNotFoundError
    |
    +-- QueryError
    |   +-- InvalidDateFormatError
    |
    +-- AuthenticationError
        +-- RegistrationFailedError
        +-- LoginFailedError
        +-- InvalidTokenError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                  | When Raised
----------------|-----------------------|-----------------------------------------
Value object    | INVALID_AMOUNT        | Money/Rate input is not a finite number,
                |                       | or derivation ran without an amount
                | UNSUPPORTED_OPERAND   | Money arithmetic with a foreign operand
----------------|-----------------------|-----------------------------------------
Invoice         | VALIDATION_FAILED     | One or more invoice checks failed
                | INVOICE_NOT_FOUND     | No invoice with that id for this owner
----------------|-----------------------|-----------------------------------------
Query           | INVALID_DATE_FORMAT   | Date bound is not YYYY-MM-DD
----------------|-----------------------|-----------------------------------------
Authentication  | REGISTRATION_FAILED   | Bad email, duplicate email, no password
                | LOGIN_FAILED          | Unknown email or wrong password
                | UNAUTHORIZED          | Bearer token invalid or expired

All of these are deterministic given their inputs: none is retried and none
is swallowed inside the kernel.
"""

from __future__ import annotations

from dataclasses import dataclass


class InvoiceKernelError(Exception):
    """
    Base exception for all invoice kernel errors.

    All subclasses have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "INVOICE_KERNEL_ERROR"


# Value object exceptions


class ValueObjectError(InvoiceKernelError):
    """Base exception for Money / Rate errors."""

    code: str = "VALUE_OBJECT_ERROR"


class InvalidAmountError(ValueObjectError):
    """A Money or Rate could not be built from the given input."""

    code: str = "INVALID_AMOUNT"

    def __init__(self, value: object, reason: str = "is not a number"):
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid amount {value!r}: {reason}")


class UnsupportedOperandError(ValueObjectError):
    """Money arithmetic received an operand of an unsupported kind."""

    code: str = "UNSUPPORTED_OPERAND"

    def __init__(self, operation: str, operand: object):
        self.operation = operation
        self.operand_type = type(operand).__name__
        super().__init__(f"Unsupported operand for Money.{operation}: {self.operand_type}")


# Invoice exceptions


class InvoiceError(InvoiceKernelError):
    """Base exception for invoice errors."""

    code: str = "INVOICE_ERROR"


@dataclass(frozen=True)
class FieldError:
    """One failed check: the offending field and a human-readable message."""

    field: str
    message: str

    def full_message(self) -> str:
        return f"{self.field} {self.message}"


class ValidationFailedError(InvoiceError):
    """
    One or more invoice checks failed.

    Carries every violation in check order so a caller can report all
    problems at once.
    """

    code: str = "VALIDATION_FAILED"

    def __init__(self, field_errors: list[FieldError] | tuple[FieldError, ...]):
        self.field_errors = tuple(field_errors)
        super().__init__(", ".join(self.messages()))

    def messages(self) -> list[str]:
        return [error.full_message() for error in self.field_errors]

    def for_field(self, field: str) -> list[str]:
        return [e.message for e in self.field_errors if e.field == field]


class InvoiceNotFoundError(InvoiceError):
    """Invoice does not exist, or belongs to another owner."""

    code: str = "INVOICE_NOT_FOUND"

    def __init__(self, invoice_id: str):
        self.invoice_id = invoice_id
        super().__init__(f"Invoice not found: {invoice_id}")


# Query exceptions


class QueryError(InvoiceKernelError):
    """Base exception for read-side query errors."""

    code: str = "QUERY_ERROR"


class InvalidDateFormatError(QueryError):
    """A date bound could not be parsed as a YYYY-MM-DD calendar date."""

    code: str = "INVALID_DATE_FORMAT"

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid date format: {value!r}. Use YYYY-MM-DD.")


# Authentication exceptions


class AuthenticationError(InvoiceKernelError):
    """Base exception for account and token errors."""

    code: str = "AUTHENTICATION_ERROR"


class RegistrationFailedError(AuthenticationError):
    """Account could not be registered."""

    code: str = "REGISTRATION_FAILED"

    def __init__(self, messages: list[str]):
        self.messages = list(messages)
        super().__init__(", ".join(self.messages))


class LoginFailedError(AuthenticationError):
    """
    Credentials were rejected.

    The message never says whether the email or the password was wrong.
    """

    code: str = "LOGIN_FAILED"

    def __init__(self) -> None:
        super().__init__("Invalid email or password")


class InvalidTokenError(AuthenticationError):
    """Bearer token is missing, malformed, forged or expired."""

    code: str = "UNAUTHORIZED"

    def __init__(self, reason: str = "invalid"):
        self.reason = reason
        super().__init__("Invalid or expired token")
