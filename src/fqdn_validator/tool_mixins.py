"""
Tool Mixin class for FqdnValidatorMCPServer to separate concerns.
"""

from typing import Any

from fastmcp import Context

from fqdn_validator.policy import DomainPolicyValidator
from fqdn_validator.tools import (
    check_domain_policy_impl,
    punycode_converter_impl,
    validate_fqdn_impl,
)
from fqdn_validator.typedefs import ToolResult


class ToolRegistrationMixin:
    """Mixin for registering validation tools with the MCP server.

    Note: This mixin assumes the class has 'server' (FastMCP), 'config' (dict)
    and 'policy_validator' attributes available when register_tools() is called.
    """

    # Type hints for attributes provided by the host class
    server: Any  # FastMCP instance
    config: dict[str, Any]  # Configuration dictionary
    policy_validator: DomainPolicyValidator | None

    def register_tools(self) -> None:
        """Register all validation tools with the MCP server."""

        @self.server.tool(
            name="validate_fqdn",
            description=(
                "Use this tool to check whether a string is a syntactically valid "
                "fully qualified domain name"
            ),
            tags=set(("fqdn", "validation", "syntax")),
            enabled=True,
        )
        async def validate_fqdn(domain: str, ctx: Context) -> ToolResult:
            await ctx.info(f"Validating FQDN syntax of `{domain}`.")
            return await validate_fqdn_impl(domain.strip())

        @self.server.tool(
            name="punycode_converter",
            description="Convert an internationalized domain name to its punycode form",
            tags=set(("idna", "punycode", "converter")),
            enabled=True,
        )
        async def punycode_converter(domain: str, ctx: Context) -> ToolResult:
            await ctx.info(f"Converting `{domain}` to punycode.")
            return await punycode_converter_impl(domain.strip())

        policy_validator = self.policy_validator

        @self.server.tool(
            name="check_domain_policy",
            description=(
                "Check whether a domain name may be assigned under the catalog domain: "
                "subdomain depth, reserved names, DNS resolution and CNAME target"
            ),
            tags=set(("fqdn", "validation", "policy", "dns")),
            enabled=policy_validator is not None
            and self.config.get("features", {}).get("domain_policy", False),
        )
        async def check_domain_policy(domain: str, ctx: Context) -> ToolResult:
            if policy_validator is None:
                return ToolResult(success=False, error="Domain policy is not configured")
            await ctx.info(f"Checking catalog policy for `{domain}`.")
            return await check_domain_policy_impl(domain.strip(), policy_validator)
