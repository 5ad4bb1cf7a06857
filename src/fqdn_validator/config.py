"""Configuration loading for the FQDN validators.

Settings live in a YAML file under the ``fqdn_validator`` root key::

    fqdn_validator:
      catalog_cname: catalog.example.net
      catalog_domain_suffix: example.com
      reserved_names: [www, mail]
      dns:
        timeout: 2.0
        retries: 1
        nameservers: []

The catalog settings can be overridden with ``FQDN_VALIDATOR_*`` environment
variables.
"""

import os
from collections.abc import Mapping
from typing import Any

import yaml
from fastmcp.utilities.logging import get_logger

from fqdn_validator.exceptions import ConfigurationError
from fqdn_validator.policy import PolicyConfig
from fqdn_validator.resolver import DEFAULT_RETRIES, DEFAULT_TIMEOUT, Resolver

logger = get_logger(__name__)

ROOT = "fqdn_validator"
DEFAULT_CONFIG_PATH = "config/config.yaml"
ENV_PREFIX = "FQDN_VALIDATOR_"


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> dict[str, Any]:
    """Load the YAML configuration file.

    A missing file yields an empty configuration. A file that exists but
    cannot be parsed is a configuration error.
    """
    try:
        with open(config_path, encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.info("Config file %s not found, using default settings", config_path)
        return {}
    except (yaml.YAMLError, OSError) as e:
        logger.error("Error loading config: %s", e)
        raise ConfigurationError(f"Cannot load {config_path}: {e}") from e

    if not isinstance(config, dict):
        raise ConfigurationError(f"{config_path} must contain a mapping")
    return config


def _section(config: Mapping[str, Any]) -> Mapping[str, Any]:
    section = config.get(ROOT) or {}
    if not isinstance(section, Mapping):
        raise ConfigurationError(f'"{ROOT}" must be a mapping')
    return section


def _reserved_names(value: Any) -> frozenset[str]:
    if value is None:
        return frozenset()
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, (list, tuple, set, frozenset)):
        raise ConfigurationError("reserved_names must be a list or a comma separated string")
    return frozenset(str(name).strip() for name in value if str(name).strip())


def policy_config_from(
    config: Mapping[str, Any], environ: Mapping[str, str] | None = None
) -> PolicyConfig:
    """Build the ``PolicyConfig`` from settings and environment overrides.

    Raises:
        ConfigurationError: If the catalog CNAME or domain suffix is missing.
    """
    environ = os.environ if environ is None else environ
    section = _section(config)

    catalog_cname = environ.get(f"{ENV_PREFIX}CATALOG_CNAME", section.get("catalog_cname"))
    suffix = environ.get(
        f"{ENV_PREFIX}CATALOG_DOMAIN_SUFFIX", section.get("catalog_domain_suffix")
    )
    reserved = environ.get(f"{ENV_PREFIX}RESERVED_NAMES", section.get("reserved_names"))

    missing = [
        name
        for name, value in (("catalog_cname", catalog_cname), ("catalog_domain_suffix", suffix))
        if not isinstance(value, str) or not value.strip()
    ]
    if missing:
        raise ConfigurationError(f"Missing required setting(s): {', '.join(missing)}")

    return PolicyConfig(
        catalog_cname=catalog_cname.strip(),
        catalog_domain_suffix=suffix.strip().lower(),
        reserved_names=_reserved_names(reserved),
    )


def resolver_from(config: Mapping[str, Any]) -> Resolver:
    """Build a ``Resolver`` from the ``dns`` settings."""
    dns_settings = _section(config).get("dns") or {}
    try:
        timeout = float(dns_settings.get("timeout", DEFAULT_TIMEOUT))
        retries = int(dns_settings.get("retries", DEFAULT_RETRIES))
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid dns settings: {e}") from e
    if timeout <= 0:
        raise ConfigurationError("dns.timeout must be positive")
    nameservers = dns_settings.get("nameservers") or None
    if nameservers is not None and (
        not isinstance(nameservers, list) or not all(isinstance(ns, str) for ns in nameservers)
    ):
        raise ConfigurationError("dns.nameservers must be a list of strings")
    return Resolver(
        nameservers=nameservers,
        timeout=timeout,
        retries=retries,
    )
