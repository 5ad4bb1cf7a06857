"""Type definitions shared by the FQDN validators.

This module provides the small result types passed between the resolver, the
policy validator, the uniqueness checker and their hosts. Validation results are
plain values: a failed check is reported through one of these types and never
through an exception.

The types defined here are used to:
- Report DNS resolution results without the "echo the input" convention
- Classify policy violations with a fixed set of message keys
- Describe uniqueness conflicts with a user-facing rendering of the value
- Shape tool responses for the MCP server surface
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ResolutionStatus(Enum):
    """Outcome category of a host-to-address lookup."""

    RESOLVED = "resolved"
    NOT_FOUND = "not_found"
    TRANSIENT_ERROR = "transient_error"


@dataclass(frozen=True)
class ResolutionResult:
    """Stores the result of resolving a hostname to its addresses."""

    status: ResolutionStatus
    hostname: str
    addresses: tuple[str, ...] = ()
    error: str | None = None

    @property
    def found(self) -> bool:
        return self.status is ResolutionStatus.RESOLVED

    @property
    def address(self) -> str | None:
        """First resolved address, comparable to a plain host lookup."""
        return self.addresses[0] if self.addresses else None

    @classmethod
    def resolved(cls, hostname: str, addresses: list[str]) -> "ResolutionResult":
        return cls(ResolutionStatus.RESOLVED, hostname, tuple(sorted(set(addresses))))

    @classmethod
    def not_found(cls, hostname: str, error: str | None = None) -> "ResolutionResult":
        return cls(ResolutionStatus.NOT_FOUND, hostname, error=error)

    @classmethod
    def transient(cls, hostname: str, error: str) -> "ResolutionResult":
        return cls(ResolutionStatus.TRANSIENT_ERROR, hostname, error=error)


class ErrorKind(Enum):
    """Fixed classification of validation failures.

    The value of each member is the message key the host translates into a
    user-facing violation.
    """

    FQDN_INVALID = "fqdn_invalid"
    NOT_A_DOMAIN = "not_a_domain"
    PLACE_DOMAIN_PREFIX = "place_domain_prefix"
    EXCEEDED_SUBDOMAIN_LEVEL = "exceeded_subdomain_level"
    NAME_RESERVED = "name_reserved"
    DOMAIN_NOT_FOUND = "domain_not_found"
    CATALOG_DOMAIN_NOT_FOUND = "catalog_domain_not_found"
    CNAME_NOT_EQUAL_CATALOG_CNAME = "cname_not_equal_catalog_cname"
    CATALOG_CNAME_MISMATCH = "cname_not_equal_catalog_cname"
    NOT_UNIQUE = "not_unique"


@dataclass(frozen=True)
class ValidationOutcome:
    """Either valid, or invalid with exactly one reason."""

    reason: ErrorKind | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def valid(self) -> bool:
        return self.reason is None

    @property
    def message(self) -> str | None:
        return self.reason.value if self.reason else None

    @classmethod
    def ok(cls) -> "ValidationOutcome":
        return cls()

    @classmethod
    def invalid(cls, reason: ErrorKind, **details: Any) -> "ValidationOutcome":
        return cls(reason=reason, details=details)


@dataclass(frozen=True)
class UniquenessResult:
    """Result of a uniqueness query: unique, or a conflict on ``value``.

    ``rendered`` is the descriptive string shown to users in place of the raw
    value, which matters when the value is itself a record reference.
    """

    unique: bool
    value: Any = None
    rendered: str | None = None
    match_count: int = 0

    @classmethod
    def ok(cls) -> "UniquenessResult":
        return cls(unique=True)

    @classmethod
    def conflict(cls, value: Any, rendered: str, match_count: int) -> "UniquenessResult":
        return cls(unique=False, value=value, rendered=rendered, match_count=match_count)


@dataclass(frozen=True)
class Violation:
    """A single constraint violation reported for a record."""

    message: str
    path: str
    invalid_value: Any
    parameters: dict[str, str] = field(default_factory=dict)
    code: str | None = None
    reason: ErrorKind | None = None


@dataclass
class ToolResult:
    """Stores the result of a validator tool operation."""

    success: bool
    output: str | list[str] | dict[str, Any] | list[dict[str, Any]] | None = None
    error: str | None = None
    details: dict[str, Any] = field(default_factory=dict)
