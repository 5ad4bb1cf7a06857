"""Tool implementations exposed by the MCP server."""

import asyncio

from fqdn_validator.exceptions import NotADomainError, ResolutionError
from fqdn_validator.policy import DomainPolicyValidator
from fqdn_validator.syntax import to_ascii, validate_fqdn
from fqdn_validator.typedefs import ToolResult


async def validate_fqdn_impl(domain: str) -> ToolResult:
    """Check the syntax of a fully qualified domain name.

    Args:
        domain (str): The domain name to validate.

    Returns:
        ToolResult: success reflects validity, output carries the message.
    """
    is_valid, message = validate_fqdn(domain)
    if is_valid:
        return ToolResult(success=True, output=message, details={"domain": domain})
    return ToolResult(success=False, error=message, details={"domain": domain})


async def punycode_converter_impl(domain: str) -> ToolResult:
    """Perform Unicode IDN domain name conversion into punycode ASCII format.

    Args:
        domain (str): The domain name to convert to punycode.

    Returns:
        ToolResult: Punycode domain name or error details.
    """
    try:
        punycode = to_ascii(domain)
    except NotADomainError as e:
        return ToolResult(success=False, error=str(e), details={"domain": domain})
    return ToolResult(success=True, output={"domain": domain, "punycode": punycode})


async def check_domain_policy_impl(domain: str, validator: DomainPolicyValidator) -> ToolResult:
    """Evaluate a domain name against the catalog domain policy.

    DNS lookups are blocking, so the evaluation runs in a worker thread.

    Args:
        domain (str): The candidate domain name.
        validator (DomainPolicyValidator): Validator bound to the server config.

    Returns:
        ToolResult: success if the name may be assigned, otherwise the message
        key of the first failing check.
    """
    try:
        outcome = await asyncio.to_thread(validator.evaluate, domain)
    except ResolutionError as e:
        return ToolResult(
            success=False,
            error=str(e),
            details={"domain": domain, "retryable": True},
        )
    if outcome.valid:
        return ToolResult(success=True, output="Domain complies with the catalog policy")
    return ToolResult(
        success=False,
        error=outcome.message,
        details={"domain": domain, **outcome.details},
    )
