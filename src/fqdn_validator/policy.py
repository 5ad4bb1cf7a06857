"""Domain policy checks for names assigned under a catalog domain.

A candidate is accepted when it is a single label directly below the catalog
suffix (or a foreign name), is not reserved, resolves, and resolves to the same
addresses as the catalog CNAME. The checks run in a fixed order and the first
failing one determines the outcome.
"""

from dataclasses import dataclass, field

from fastmcp.utilities.logging import get_logger

from fqdn_validator.exceptions import NotADomainError, ResolutionError
from fqdn_validator.resolver import DnsResolver
from fqdn_validator.syntax import is_valid_fqdn, to_ascii
from fqdn_validator.typedefs import (
    ErrorKind,
    ResolutionResult,
    ResolutionStatus,
    ValidationOutcome,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class PolicyConfig:
    """Read-only settings shared by every policy evaluation.

    Attributes:
        catalog_cname (str): Hostname every candidate must resolve like.
        catalog_domain_suffix (str): Root domain subdomains are assigned under.
        reserved_names (frozenset[str]): Subdomain labels that may not be assigned.
    """

    catalog_cname: str
    catalog_domain_suffix: str
    reserved_names: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        object.__setattr__(self, "catalog_domain_suffix", self.catalog_domain_suffix.strip("."))
        object.__setattr__(self, "reserved_names", frozenset(self.reserved_names))


def normalize(candidate: str) -> str:
    """Return the lower-cased ASCII-compatible form of ``candidate``."""
    return to_ascii(candidate).lower()


def extract_subdomain(name: str, suffix: str) -> str | None:
    """Return the part of ``name`` in front of ``.suffix``, or None.

    The suffix only counts at the end of the name, so ``a.example.com.evil.org``
    has no subdomain under ``example.com``.
    """
    marker = f".{suffix}"
    if not suffix or not name.endswith(marker):
        return None
    return name[: -len(marker)] or None


class DomainPolicyValidator:
    """Evaluate candidate domain names against a ``PolicyConfig``."""

    def __init__(self, config: PolicyConfig, resolver: DnsResolver) -> None:
        self.config = config
        self.resolver = resolver

    def evaluate(self, candidate: str | None) -> ValidationOutcome:
        """Run the policy checks on ``candidate``.

        Empty input is not a policy violation; whether a value is required is
        up to the caller.

        Raises:
            ResolutionError: If DNS failed for a transient reason, so the
                outcome could not be decided.
        """
        if not candidate:
            return ValidationOutcome.ok()

        try:
            name = normalize(candidate)
        except NotADomainError as e:
            logger.debug("Rejecting %r: %s", candidate, e)
            return ValidationOutcome.invalid(ErrorKind.NOT_A_DOMAIN, value=candidate)

        suffix = self.config.catalog_domain_suffix
        if name == suffix:
            return ValidationOutcome.invalid(ErrorKind.PLACE_DOMAIN_PREFIX, value=name)

        subdomain = extract_subdomain(name, suffix)
        if subdomain is not None:
            if len(subdomain.split(".", 1)) > 1:
                return ValidationOutcome.invalid(
                    ErrorKind.EXCEEDED_SUBDOMAIN_LEVEL, value=name, subdomain=subdomain
                )
            if subdomain in self.config.reserved_names:
                return ValidationOutcome.invalid(
                    ErrorKind.NAME_RESERVED, value=name, subdomain=subdomain
                )

        target = self._resolve(name)
        if not target.found:
            return ValidationOutcome.invalid(ErrorKind.DOMAIN_NOT_FOUND, value=name)

        catalog = self._resolve(self.config.catalog_cname)
        if not catalog.found:
            logger.warning("Catalog CNAME %s does not resolve", self.config.catalog_cname)
            return ValidationOutcome.invalid(
                ErrorKind.CATALOG_DOMAIN_NOT_FOUND, value=self.config.catalog_cname
            )

        if set(target.addresses) != set(catalog.addresses):
            return ValidationOutcome.invalid(
                ErrorKind.CNAME_NOT_EQUAL_CATALOG_CNAME,
                value=name,
                addresses=list(target.addresses),
                catalog_addresses=list(catalog.addresses),
            )

        if not is_valid_fqdn(name):
            return ValidationOutcome.invalid(ErrorKind.FQDN_INVALID, value=name)

        return ValidationOutcome.ok()

    def _resolve(self, hostname: str) -> ResolutionResult:
        result = self.resolver.resolve(hostname)
        if result.status is ResolutionStatus.TRANSIENT_ERROR:
            raise ResolutionError(hostname, result.error or "unknown error")
        return result


def evaluate(
    candidate: str | None, config: PolicyConfig, resolver: DnsResolver
) -> ValidationOutcome:
    """Evaluate ``candidate`` with a one-off ``DomainPolicyValidator``."""
    return DomainPolicyValidator(config, resolver).evaluate(candidate)
