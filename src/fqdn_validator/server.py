"""
FQDN Validator MCP Server - exposes the domain name checks as MCP tools.
"""

import asyncio
import sys

from fastmcp import FastMCP
from fastmcp.utilities.logging import get_logger

from fqdn_validator.config import (
    DEFAULT_CONFIG_PATH,
    load_config,
    policy_config_from,
    resolver_from,
)
from fqdn_validator.exceptions import ConfigurationError
from fqdn_validator.policy import DomainPolicyValidator
from fqdn_validator.server_mixins import ServerLifecycleMixin
from fqdn_validator.tool_mixins import ToolRegistrationMixin

logger = get_logger(__name__)


class FqdnValidatorMCPServer(ToolRegistrationMixin, ServerLifecycleMixin):
    """MCP Server exposing the FQDN syntax and domain policy checks.

    Uses mixin classes to separate concerns:
    - ToolRegistrationMixin: Registers the validation tools
    - ServerLifecycleMixin: Manages server startup/shutdown and signals
    """

    def __init__(self, config_path: str = DEFAULT_CONFIG_PATH) -> None:
        """Initialize the server.

        Args:
            config_path: Path to the configuration file.
                Defaults to "config/config.yaml"
        """
        self.config_path = config_path
        self.logger = get_logger(__name__)
        self.server = FastMCP(
            name="FQDN Validator MCP Server",
            instructions=(
                "An MCP server that validates domain names and checks them against "
                "the catalog domain policy."
            ),
        )
        self.config = load_config(self.config_path)
        self.policy_validator = self._build_policy_validator()
        self.register_tools()

    def _build_policy_validator(self) -> DomainPolicyValidator | None:
        if not self.config.get("features", {}).get("domain_policy", False):
            return None
        try:
            policy_config = policy_config_from(self.config)
        except ConfigurationError as e:
            self.logger.error("Domain policy disabled: %s", e)
            raise
        self.logger.info(
            "Domain policy enabled for *.%s (%d reserved names)",
            policy_config.catalog_domain_suffix,
            len(policy_config.reserved_names),
        )
        return DomainPolicyValidator(policy_config, resolver_from(self.config))


async def main() -> None:
    """Main entry point for the FQDN validator MCP server."""
    try:
        server = FqdnValidatorMCPServer()
    except ConfigurationError as e:
        logger.error("Invalid configuration: %s", e)
        sys.exit(2)
    try:
        await server.start()
    except KeyboardInterrupt:
        await server.stop()
    except (OSError, RuntimeError) as e:
        logger.error("Unexpected error: %s", e)
        await server.stop()
        sys.exit(1)


def run_server() -> None:
    """Run the server with proper asyncio event loop handling."""
    loop = None
    try:
        if sys.platform == "win32":
            loop = asyncio.ProactorEventLoop()
        else:
            loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        loop.run_until_complete(main())
    except KeyboardInterrupt:
        if loop is not None:
            loop.run_until_complete(asyncio.sleep(0))
    finally:
        if loop is not None:
            loop.close()


if __name__ == "__main__":
    run_server()
