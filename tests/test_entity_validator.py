"""Tests for record-level validation combining format, policy and uniqueness."""

from unittest.mock import MagicMock

import pytest

from conftest import CATALOG_ADDRESS, CATALOG_CNAME, InMemoryRepository, Shop
from fqdn_validator.entity import MESSAGE_ALREADY_USED, NOT_UNIQUE_ERROR, FqdnEntityValidator
from fqdn_validator.exceptions import (
    ConstraintDefinitionError,
    ResolutionError,
    UnexpectedTypeError,
)
from fqdn_validator.policy import DomainPolicyValidator, PolicyConfig
from fqdn_validator.resolver import StaticResolver
from fqdn_validator.typedefs import ErrorKind


class TestFqdnEntityValidatorDefinition:
    """Test suite for misconfigured validators."""

    @pytest.mark.unit
    def test_field_is_required(self):
        with pytest.raises(ConstraintDefinitionError, match="field has to be specified"):
            FqdnEntityValidator("", InMemoryRepository())

    @pytest.mark.unit
    def test_field_must_be_a_string(self):
        with pytest.raises(UnexpectedTypeError):
            FqdnEntityValidator(None, InMemoryRepository())

    @pytest.mark.unit
    def test_error_path_must_be_a_string(self):
        with pytest.raises(UnexpectedTypeError, match="string or null"):
            FqdnEntityValidator("domain", InMemoryRepository(), error_path=3)

    @pytest.mark.unit
    def test_repository_must_support_lookup(self):
        with pytest.raises(ConstraintDefinitionError):
            FqdnEntityValidator("domain", InMemoryRepository(), repository_method="find_one")

    @pytest.mark.unit
    def test_unknown_field_fails_on_validation(self):
        validator = FqdnEntityValidator("hostname", InMemoryRepository())

        with pytest.raises(ConstraintDefinitionError):
            validator.validate(Shop(1, "shop.example.com"))


class TestFqdnEntityValidatorFormat:
    """Test suite for validation without a domain policy."""

    @pytest.mark.unit
    def test_valid_unique_domain(self):
        validator = FqdnEntityValidator("domain", InMemoryRepository())

        assert validator.validate(Shop(1, "shop.example.com")) is None
        assert validator.is_valid(Shop(1, "shop.example.com")) is True

    @pytest.mark.unit
    def test_null_domain_is_skipped(self):
        repository = InMemoryRepository([Shop(1, None)])
        validator = FqdnEntityValidator("domain", repository)

        assert validator.validate(Shop(2, None)) is None
        assert repository.queries == []

    @pytest.mark.unit
    def test_null_domain_is_checked_when_not_ignored(self):
        repository = InMemoryRepository([Shop(1, None)])
        validator = FqdnEntityValidator("domain", repository, ignore_null=False)

        violation = validator.validate(Shop(2, None))

        assert violation is not None
        assert violation.parameters == {"{{ value }}": "null"}

    @pytest.mark.unit
    def test_non_string_domain_raises(self):
        validator = FqdnEntityValidator("domain", InMemoryRepository())

        with pytest.raises(UnexpectedTypeError):
            validator.validate(Shop(1, 42))

    @pytest.mark.unit
    def test_invalid_format(self):
        repository = InMemoryRepository()
        validator = FqdnEntityValidator("domain", repository, error_path="hostname")

        violation = validator.validate(Shop(1, "-shop.example.com"))

        assert violation.message == "FQDN invalid"
        assert violation.path == "domain"
        assert violation.invalid_value == "-shop.example.com"
        assert violation.parameters == {"{{ value }}": '"-shop.example.com"'}
        assert violation.reason is ErrorKind.FQDN_INVALID
        assert violation.code is None
        assert repository.queries == []

    @pytest.mark.unit
    def test_duplicate_domain(self):
        repository = InMemoryRepository([Shop(1, "shop.example.com")])
        validator = FqdnEntityValidator("domain", repository)

        violation = validator.validate(Shop(2, "shop.example.com"))

        assert violation.message == MESSAGE_ALREADY_USED
        assert violation.code == NOT_UNIQUE_ERROR
        assert violation.path == "domain"
        assert violation.reason is ErrorKind.NOT_UNIQUE
        assert violation.parameters == {"{{ value }}": '"shop.example.com"'}

    @pytest.mark.unit
    def test_duplicate_is_reported_at_error_path(self):
        repository = InMemoryRepository([Shop(1, "shop.example.com")])
        validator = FqdnEntityValidator("domain", repository, error_path="hostname")

        violation = validator.validate(Shop(2, "shop.example.com"))

        assert violation.path == "hostname"

    @pytest.mark.unit
    def test_updating_own_domain_is_valid(self):
        shop = Shop(1, "shop.example.com")
        validator = FqdnEntityValidator("domain", InMemoryRepository([shop]))

        assert validator.validate(shop) is None

    @pytest.mark.unit
    def test_lookup_matches_value_as_written(self):
        repository = InMemoryRepository([Shop(1, "shop.example.com")])
        validator = FqdnEntityValidator("domain", repository)

        assert validator.validate(Shop(2, "SHOP.example.com")) is None
        assert repository.queries == [{"domain": "SHOP.example.com"}]

    @pytest.mark.unit
    def test_normalized_lookup_catches_case_variants(self):
        repository = InMemoryRepository([Shop(1, "shop.example.com")])
        validator = FqdnEntityValidator("domain", repository, normalize_lookup=True)

        violation = validator.validate(Shop(2, "SHOP.example.com"))

        assert violation.reason is ErrorKind.NOT_UNIQUE
        assert violation.parameters == {"{{ value }}": '"shop.example.com"'}
        assert repository.queries == [{"domain": "shop.example.com"}]


class TestFqdnEntityValidatorPolicy:
    """Test suite for validation with a domain policy."""

    @pytest.fixture
    def policy(self, policy_config, static_resolver):
        return DomainPolicyValidator(policy_config, static_resolver)

    @pytest.mark.unit
    def test_policy_violation_uses_message_key(self, policy):
        repository = InMemoryRepository()
        validator = FqdnEntityValidator("domain", repository, policy=policy)

        violation = validator.validate(Shop(1, "www.example.com"))

        assert violation.message == "name_reserved"
        assert violation.reason is ErrorKind.NAME_RESERVED
        assert repository.queries == []

    @pytest.mark.unit
    def test_transient_dns_failure_propagates(self, policy_config):
        resolver = StaticResolver({}, failing=["shop.example.com"])
        validator = FqdnEntityValidator(
            "domain", InMemoryRepository(), policy=DomainPolicyValidator(policy_config, resolver)
        )

        with pytest.raises(ResolutionError):
            validator.validate(Shop(1, "shop.example.com"))

    @pytest.mark.unit
    def test_policy_replaces_format_check(self, policy):
        """The format check is not run separately when a policy is configured."""
        validator = FqdnEntityValidator("domain", InMemoryRepository(), policy=policy)
        validator.format_validator = MagicMock()

        validator.validate(Shop(1, "shop.example.com"))

        validator.format_validator.validate.assert_not_called()

    @pytest.mark.unit
    def test_syntax_failure_reads_like_format_check(self, policy_config):
        """A name failing only the syntax step reports the plain format message."""
        resolver = StaticResolver(
            {"bad_name.example.org": [CATALOG_ADDRESS], CATALOG_CNAME: [CATALOG_ADDRESS]}
        )
        policy = DomainPolicyValidator(policy_config, resolver)
        validator = FqdnEntityValidator("domain", InMemoryRepository(), policy=policy)

        violation = validator.validate(Shop(1, "bad_name.example.org"))

        assert violation.message == "FQDN invalid"
        assert violation.reason is ErrorKind.FQDN_INVALID

    @pytest.mark.unit
    def test_unencodable_name_with_policy(self, policy):
        validator = FqdnEntityValidator("domain", InMemoryRepository(), policy=policy)

        violation = validator.validate(Shop(1, "☃.example.com"))

        assert violation.message == "Not a domain string"
        assert violation.reason is ErrorKind.NOT_A_DOMAIN


class TestEndToEnd:
    """Scenario tests running the full pipeline."""

    @pytest.mark.integration
    def test_aliased_subdomain_is_accepted(self):
        """Candidate and catalog CNAME share an address and no record holds the name."""
        config = PolicyConfig(
            catalog_cname=CATALOG_CNAME,
            catalog_domain_suffix="example.com",
            reserved_names=frozenset({"www"}),
        )
        resolver = StaticResolver(
            {"shop.example.com": [CATALOG_ADDRESS], CATALOG_CNAME: [CATALOG_ADDRESS]}
        )
        repository = InMemoryRepository([Shop(1, "blog.example.com")])
        validator = FqdnEntityValidator(
            "domain", repository, policy=DomainPolicyValidator(config, resolver)
        )

        assert validator.validate(Shop(2, "shop.example.com")) is None
        assert repository.queries == [{"domain": "shop.example.com"}]

    @pytest.mark.integration
    def test_aliased_subdomain_already_taken(self):
        config = PolicyConfig(CATALOG_CNAME, "example.com")
        resolver = StaticResolver(
            {"shop.example.com": [CATALOG_ADDRESS], CATALOG_CNAME: [CATALOG_ADDRESS]}
        )
        repository = InMemoryRepository([Shop(1, "shop.example.com")])
        validator = FqdnEntityValidator(
            "domain", repository, policy=DomainPolicyValidator(config, resolver)
        )

        violation = validator.validate(Shop(2, "shop.example.com"))

        assert violation.code == NOT_UNIQUE_ERROR
