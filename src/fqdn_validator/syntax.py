"""Syntactic validation of fully qualified domain names.

The checks run on the ASCII-compatible (punycode) form of the candidate so that
internationalized names are measured and validated the way they are sent on the
wire.
"""

import re

import idna
from fastmcp.utilities.logging import get_logger

from fqdn_validator.exceptions import NotADomainError

logger = get_logger(__name__)

MESSAGE_FQDN_INVALID = "FQDN invalid"
MESSAGE_NOT_A_DOMAIN = "Not a domain string"
MESSAGE_VALID = "Valid FQDN"

MAX_FQDN_LENGTH = 255
MAX_LABEL_LENGTH = 63

_FORBIDDEN_CHARS = re.compile(r"[^a-zA-Z0-9\-.]")


def to_ascii(candidate: str) -> str:
    """Convert a domain name to its ASCII-compatible encoding.

    ASCII input is returned unchanged. Otherwise the name is UTS46-mapped and
    every non-ASCII label is replaced with its ``xn--`` A-label.

    Args:
        candidate (str): Domain name that may contain Unicode characters.

    Returns:
        str: ASCII-compatible domain name.

    Raises:
        NotADomainError: If ``candidate`` is not a string or has no valid
            IDNA encoding.
    """
    if not isinstance(candidate, str):
        raise NotADomainError(f"Expected a domain string, got {type(candidate).__name__}")
    if not _has_non_ascii(candidate):
        return candidate
    try:
        mapped = idna.uts46_remap(candidate, std3_rules=False, transitional=False)
        labels = []
        for label in mapped.split("."):
            if _has_non_ascii(label):
                label = idna.alabel(label).decode("ascii")
            labels.append(label)
    except (idna.IDNAError, UnicodeError) as e:
        raise NotADomainError(f"Invalid IDN encoding: {str(e)}") from e
    return ".".join(labels)


def _has_non_ascii(value: str) -> bool:
    return any(ord(char) > 127 for char in value)


def _check_ascii_fqdn(value: str) -> bool:
    if value.startswith(".") or value.endswith("."):
        return False
    if len(value) > MAX_FQDN_LENGTH:
        return False
    if _FORBIDDEN_CHARS.search(value):
        return False

    segments = value.split(".")
    if len(segments) < 2:
        return False

    for segment in segments:
        if not segment or len(segment) > MAX_LABEL_LENGTH:
            return False
        if segment.startswith("-") or segment.endswith("-"):
            return False
    return True


def is_valid_fqdn(candidate: str) -> bool:
    """Check whether ``candidate`` is a syntactically valid FQDN.

    Rules, applied in order to the ASCII form: no leading or trailing dot, at
    most 255 characters, only letters, digits, hyphens and dots, at least two
    labels, and every label 1-63 characters long without a leading or trailing
    hyphen. Names that cannot be IDNA-encoded are invalid.
    """
    try:
        value = to_ascii(candidate)
    except NotADomainError:
        return False
    return _check_ascii_fqdn(value)


def validate_fqdn(candidate: str) -> tuple[bool, str]:
    """Validate a Fully Qualified Domain Name and describe the result.

    Returns:
        tuple[bool, str]: (is_valid, message) where message is "Valid FQDN",
        "FQDN invalid" for syntax errors, or "Not a domain string" when the
        value could not be encoded at all.
    """
    try:
        value = to_ascii(candidate)
    except NotADomainError as e:
        logger.debug("Rejecting %r: %s", candidate, e)
        return False, MESSAGE_NOT_A_DOMAIN

    if not _check_ascii_fqdn(value):
        return False, MESSAGE_FQDN_INVALID
    return True, MESSAGE_VALID


class FqdnValidator:
    """Stateless FQDN format validator for hosts that expect an object."""

    MESSAGE_FQDN_INVALID = MESSAGE_FQDN_INVALID

    def validate(self, value: str) -> tuple[bool, str | None]:
        if not self.is_valid(value):
            return False, self.MESSAGE_FQDN_INVALID
        return True, None

    @staticmethod
    def is_valid(value: str) -> bool:
        return is_valid_fqdn(value)
