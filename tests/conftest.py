"""Configuration and shared fixtures for pytest."""

import os
import sys
from dataclasses import dataclass
from typing import Any

import pytest

# Make the package importable without installing it
test_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.dirname(test_dir)
src_dir = os.path.join(project_root, "src")

if src_dir not in sys.path:
    sys.path.insert(0, src_dir)

from fqdn_validator.policy import PolicyConfig  # noqa: E402
from fqdn_validator.resolver import StaticResolver  # noqa: E402

CATALOG_CNAME = "catalog.example.net"
CATALOG_ADDRESS = "203.0.113.10"


@dataclass(eq=False)
class Shop:
    """Minimal host record with a domain field."""

    id: int | None
    domain: str | None
    owner: Any = None


class InMemoryRepository:
    """Repository test double filtering a list of records by attribute values."""

    def __init__(self, records: list[Any] | None = None) -> None:
        self.records = list(records or [])
        self.queries: list[dict[str, Any]] = []

    def find_by(self, criteria: dict[str, Any]) -> list[Any]:
        self.queries.append(dict(criteria))
        return [
            record
            for record in self.records
            if all(getattr(record, name, None) == value for name, value in criteria.items())
        ]


@pytest.fixture
def policy_config() -> PolicyConfig:
    return PolicyConfig(
        catalog_cname=CATALOG_CNAME,
        catalog_domain_suffix="example.com",
        reserved_names=frozenset({"www", "mail"}),
    )


@pytest.fixture
def static_resolver() -> StaticResolver:
    return StaticResolver(
        {
            CATALOG_CNAME: [CATALOG_ADDRESS],
            "shop.example.com": [CATALOG_ADDRESS],
            "store.example.org": [CATALOG_ADDRESS],
            "other.example.com": ["198.51.100.7"],
        }
    )
