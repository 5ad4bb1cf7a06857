"""DNS resolution used by the domain policy checks.

This module provides a Resolver class that looks up the addresses of a hostname
with a bounded timeout and reports the result as an explicit
``ResolutionResult``: resolved, definitively not found, or failed for a
transient reason (timeouts, unreachable nameservers). It uses dnspython as the
underlying DNS resolution engine.
"""

import ipaddress
import socket
from collections.abc import Iterable, Mapping
from typing import Protocol

import dns.exception
import dns.name
import dns.resolver
from fastmcp.utilities.logging import get_logger

from fqdn_validator.exceptions import NotADomainError, handle_dns_error
from fqdn_validator.syntax import to_ascii
from fqdn_validator.typedefs import ResolutionResult

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 2.0
DEFAULT_RETRIES = 1


class DnsResolver(Protocol):
    """Anything able to resolve a hostname to its addresses."""

    def resolve(self, hostname: str) -> ResolutionResult: ...


class Resolver:
    """Address resolver wrapping dnspython's stub resolver.

    Attributes:
        default_timeout (float): Overall lifetime of one lookup in seconds.
        retries (int): Extra attempts after a transient failure.
        resolver (dns.resolver.Resolver): Underlying dnspython resolver instance.
    """

    address_types = ("A", "AAAA")

    def __init__(
        self,
        nameservers: list[str] | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        retries: int = DEFAULT_RETRIES,
    ):
        """Initialize the resolver with optional nameservers, timeout and retries.

        Args:
            nameservers: Optional list of nameserver IPs or hostnames to use.
            timeout: Lookup lifetime in seconds (default: 2.0).
            retries: Number of retries on transient failures (default: 1).
        """
        self.default_timeout = timeout
        self.retries = max(0, retries)
        validated_ns = self._validate_and_convert_nameservers(nameservers) if nameservers else []
        # The system configuration is only read when no usable nameserver was given.
        self.resolver = dns.resolver.Resolver(configure=not validated_ns)
        if validated_ns:
            self.resolver.nameservers = validated_ns
        self.resolver.lifetime = timeout
        self.resolver.timeout = timeout

    def _validate_and_convert_nameservers(self, nameservers: list[str]) -> list[str]:
        """Validate nameservers and convert hostnames to IP addresses.

        Returns:
            List of IP addresses; unresolvable hostnames are dropped.
        """
        validated = []
        for ns in nameservers:
            ns = ns.strip()
            if not ns:
                continue
            if self._is_valid_ip(ns):
                validated.append(ns)
            else:
                validated.extend(self._resolve_nameserver_fqdn(ns))
        return validated

    @staticmethod
    def _is_valid_ip(address: str) -> bool:
        try:
            ipaddress.ip_address(address)
            return True
        except ValueError:
            return False

    @staticmethod
    def _resolve_nameserver_fqdn(fqdn: str) -> list[str]:
        try:
            addr_info = socket.getaddrinfo(fqdn, 53, socket.AF_UNSPEC, socket.SOCK_DGRAM)
        except (OSError, UnicodeError) as e:
            logger.warning("Ignoring nameserver %s: %s", fqdn, e)
            return []
        ips = []
        for _family, _socktype, _proto, _canonname, sockaddr in addr_info:
            ip = sockaddr[0]
            if ip not in ips:
                ips.append(ip)
        return ips

    def resolve(self, hostname: str) -> ResolutionResult:
        """Resolve a hostname to its addresses.

        A records are queried first; AAAA records only when no A record
        exists. Transient failures are retried ``retries`` times.

        Args:
            hostname: The hostname to resolve, Unicode names allowed.

        Returns:
            ResolutionResult: RESOLVED with the sorted addresses, NOT_FOUND if
            the name definitively has no address, TRANSIENT_ERROR otherwise.
        """
        try:
            qname = to_ascii(hostname)
        except NotADomainError as e:
            return ResolutionResult.not_found(hostname, str(e))

        error = "no attempt made"
        for attempt in range(self.retries + 1):
            try:
                return self._lookup(qname)
            except (
                dns.name.EmptyLabel,
                dns.name.LabelTooLong,
                dns.name.NameTooLong,
                dns.resolver.YXDOMAIN,
            ) as e:
                return ResolutionResult.not_found(qname, handle_dns_error(e))
            except (dns.exception.DNSException, OSError) as e:
                error = handle_dns_error(e)
                logger.warning(
                    "Attempt %d/%d to resolve %s failed: %s",
                    attempt + 1,
                    self.retries + 1,
                    qname,
                    error,
                )
        return ResolutionResult.transient(qname, error)

    def _lookup(self, qname: str) -> ResolutionResult:
        for rdtype in self.address_types:
            try:
                answer = self.resolver.resolve(qname, rdtype, raise_on_no_answer=False)
            except dns.resolver.NXDOMAIN as e:
                logger.debug("%s does not exist", qname)
                return ResolutionResult.not_found(qname, handle_dns_error(e))
            if answer.rrset:
                addresses = [rdata.address for rdata in answer.rrset]
                logger.debug("%s %s -> %s", qname, rdtype, ", ".join(addresses))
                return ResolutionResult.resolved(qname, addresses)
        return ResolutionResult.not_found(qname, "No address records found")


class StaticResolver:
    """In-memory resolver backed by a fixed hostname to addresses mapping.

    Names listed in ``failing`` produce transient errors, every name absent
    from ``records`` is reported as not found.
    """

    def __init__(
        self,
        records: Mapping[str, Iterable[str]],
        failing: Iterable[str] = (),
    ) -> None:
        self.records = {name.lower().rstrip("."): list(addrs) for name, addrs in records.items()}
        self.failing = {name.lower().rstrip(".") for name in failing}

    def resolve(self, hostname: str) -> ResolutionResult:
        try:
            qname = to_ascii(hostname).lower().rstrip(".")
        except NotADomainError as e:
            return ResolutionResult.not_found(hostname, str(e))
        if qname in self.failing:
            return ResolutionResult.transient(qname, "DNS query timed out")
        addresses = self.records.get(qname)
        if not addresses:
            return ResolutionResult.not_found(qname, "Domain name does not exist")
        return ResolutionResult.resolved(qname, addresses)
