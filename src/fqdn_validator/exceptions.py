"""Exception types and error processing for FQDN validation.

Validation failures (bad syntax, reserved names, unresolvable domains, duplicate
values) are reported as outcomes and never raised. The exceptions defined here
cover the remaining cases:

1. Input that cannot be treated as a domain string at all
2. Validators that were defined or configured incorrectly by the host
3. DNS failures that say nothing about the domain itself (timeouts, unreachable
   nameservers) and should be retried rather than shown to the user

Note: ``handle_dns_error`` maps dnspython's exception hierarchy to short
human-readable messages used in log lines and ``ResolutionError`` texts.
"""

import dns.exception
import dns.name
import dns.resolver


class FqdnValidatorError(Exception):
    """Base exception for all errors raised by this package."""


class NotADomainError(FqdnValidatorError, ValueError):
    """Raised when a value cannot be encoded as an ASCII domain name."""


class ConfigurationError(FqdnValidatorError):
    """Raised when required settings are missing or malformed."""


class ConstraintDefinitionError(ConfigurationError):
    """Raised when a validator is defined with invalid options."""


class UnexpectedTypeError(ConstraintDefinitionError, TypeError):
    """Raised when an option or field value has the wrong type."""

    def __init__(self, value: object, expected: str) -> None:
        super().__init__(
            f'Expected argument of type "{expected}", "{type(value).__name__}" given'
        )
        self.value = value
        self.expected = expected


class ResolutionError(FqdnValidatorError):
    """Raised when DNS resolution failed for reasons other than a missing record."""

    def __init__(self, hostname: str, message: str) -> None:
        super().__init__(f"Resolution of {hostname} failed: {message}")
        self.hostname = hostname


def handle_dns_error(error: Exception) -> str:
    """Convert DNS-related exceptions to descriptive error messages."""
    if isinstance(error, dns.resolver.NXDOMAIN):
        return "Domain name does not exist"
    if isinstance(error, dns.resolver.NoAnswer):
        return "No answer received from server"
    if isinstance(error, dns.resolver.NoNameservers):
        return "No DNS servers responded"
    if isinstance(error, dns.resolver.LifetimeTimeout):
        return "DNS resolution lifetime expired"
    if isinstance(error, dns.exception.Timeout):
        return "DNS query timed out"
    if isinstance(error, dns.name.LabelTooLong):
        return "Domain name label too long"
    if isinstance(error, dns.name.NameTooLong):
        return "Domain name too long"
    if isinstance(error, dns.name.EmptyLabel):
        return "Domain name contains an empty label"
    if isinstance(error, dns.exception.DNSException):
        return f"DNS error: {str(error)}"
    return f"Unexpected error: {str(error)}"
