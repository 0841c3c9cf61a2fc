"""Domain-level exception hierarchy for service and repository layers."""

from __future__ import annotations


class DomainError(Exception):
    """Base class for domain-specific failures."""


class NotFoundError(DomainError):
    """Raised when a requested entity does not exist."""


class ConflictError(DomainError):
    """Raised when a state conflict occurs (e.g. duplicate entries)."""


class TerminalStatusError(ConflictError):
    """Raised when advancing an equipment item that has no next status."""


class ValidationError(DomainError):
    """Raised when input validation fails at the domain/service layer."""


class InvalidStatusError(ValidationError):
    """Raised when a status value is outside the equipment status enumeration."""


class UnauthorizedError(DomainError):
    """Raised when an operation requires an acting user and none is present."""


class ForbiddenError(DomainError):
    """Raised when the acting user lacks the role required for an operation."""


class InfrastructureError(DomainError):
    """Raised when infrastructure (DB or external service) is unavailable."""
