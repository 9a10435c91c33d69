"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ParseError(DomainError):
    """Batch payload is structurally unreadable; fatal to the whole call."""


class ValidationError(DomainError):
    """Invalid field on a single entry; isolated to that entry."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class PartialBatchFailure(DomainError):
    """Some entries of a batch failed while others were processed."""

    def __init__(self, result):
        self.result = result
        super().__init__(result.message)


def entry_error(position: int, detail: str) -> str:
    """Return message for a failed batch entry (1-based position)."""
    return f"Entry {position}: {detail}"


def report_not_found(report_id: int) -> str:
    """Return message for missing report."""
    return f"Report {report_id} not found"


def company_not_found(company_id: int) -> str:
    """Return message for missing company."""
    return f"Company {company_id} not found"


def account_conflict(external_account_id: str, field_name: str, existing, incoming) -> str:
    """Return message when an account reference disagrees with the stored account."""
    return (
        f"Account '{external_account_id}' already has {field_name} "
        f"'{existing}', refusing '{incoming}'"
    )
