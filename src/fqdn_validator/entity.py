"""Record-level validation of a domain name field.

``FqdnEntityValidator`` reads the domain field off a record, checks its format
(or the full domain policy when one is given) and then its uniqueness in the
record store, reporting at most one violation.
"""

from typing import Any

from fastmcp.utilities.logging import get_logger

from fqdn_validator.exceptions import ConstraintDefinitionError, UnexpectedTypeError
from fqdn_validator.policy import DomainPolicyValidator, normalize
from fqdn_validator.syntax import MESSAGE_FQDN_INVALID, MESSAGE_NOT_A_DOMAIN, FqdnValidator
from fqdn_validator.typedefs import ErrorKind, Violation
from fqdn_validator.uniqueness import (
    AttributeIdentityReader,
    IdentityReader,
    Repository,
    UniquenessChecker,
    format_with_identifiers,
)

logger = get_logger(__name__)

NOT_UNIQUE_ERROR = "23bd9dbf-6b9b-41cd-a99e-4844bcf3077f"
MESSAGE_ALREADY_USED = "This value is already used."

# Syntax failures read the same with or without a domain policy.
SYNTAX_MESSAGES = {
    ErrorKind.FQDN_INVALID: MESSAGE_FQDN_INVALID,
    ErrorKind.NOT_A_DOMAIN: MESSAGE_NOT_A_DOMAIN,
}


class FqdnEntityValidator:
    """Validate the domain name field of host records.

    Args:
        field: Name of the field holding the domain name.
        repository: Store used for the uniqueness lookup.
        identity_reader: Reads fields and identifiers off records. Defaults to
            attribute access with an ``id`` identifier.
        policy: Optional domain policy run instead of the plain format check.
        error_path: Path violations are reported at. Defaults to ``field``.
        ignore_null: Skip the uniqueness lookup for null values.
        repository_method: Name of the repository lookup method.
        normalize_lookup: Look the value up in its lower-cased punycode form.
            By default the stored value is matched as written, so
            ``SHOP.example.com`` and ``shop.example.com`` do not conflict.

    Raises:
        UnexpectedTypeError: If ``field`` or ``error_path`` is not a string.
        ConstraintDefinitionError: If ``field`` is empty or the repository
            cannot be queried.
    """

    def __init__(
        self,
        field: str,
        repository: Repository,
        identity_reader: IdentityReader | None = None,
        policy: DomainPolicyValidator | None = None,
        error_path: str | None = None,
        ignore_null: bool = True,
        repository_method: str = "find_by",
        normalize_lookup: bool = False,
    ) -> None:
        if not isinstance(field, str):
            raise UnexpectedTypeError(field, "string")
        if error_path is not None and not isinstance(error_path, str):
            raise UnexpectedTypeError(error_path, "string or null")
        if not field:
            raise ConstraintDefinitionError("field has to be specified.")

        self.field = field
        self.error_path = error_path
        self.ignore_null = ignore_null
        self.normalize_lookup = normalize_lookup
        self.policy = policy
        self.identity_reader = identity_reader or AttributeIdentityReader()
        self.format_validator = FqdnValidator()
        self.uniqueness = UniquenessChecker(
            field, repository, self.identity_reader, repository_method
        )

    def validate(self, entity: Any) -> Violation | None:
        """Validate ``entity`` and return its violation, if any.

        Raises:
            UnexpectedTypeError: If the field holds something other than a string.
            ResolutionError: If the domain policy could not reach DNS.
        """
        value = self.identity_reader.read(entity, self.field)
        if value is None:
            return None if self.ignore_null else self._check_unique(entity, value)
        if not isinstance(value, str):
            raise UnexpectedTypeError(value, "string")

        violation = self._check_format(value)
        if violation is not None:
            return violation
        return self._check_unique(entity, normalize(value) if self.normalize_lookup else value)

    def is_valid(self, entity: Any) -> bool:
        return self.validate(entity) is None

    def _check_unique(self, entity: Any, value: str | None) -> Violation | None:
        result = self.uniqueness.check_unique(value, entity)
        if result.unique:
            return None

        path = self.error_path if self.error_path is not None else self.field
        logger.info("Value %s of %s is already used", result.rendered, type(entity).__name__)
        return Violation(
            message=MESSAGE_ALREADY_USED,
            path=path,
            invalid_value=value,
            parameters={"{{ value }}": result.rendered or ""},
            code=NOT_UNIQUE_ERROR,
            reason=ErrorKind.NOT_UNIQUE,
        )

    def _check_format(self, value: str) -> Violation | None:
        if self.policy is not None:
            outcome = self.policy.evaluate(value)
            if outcome.valid:
                return None
            reason = outcome.reason
            message = SYNTAX_MESSAGES.get(reason, outcome.message)
        else:
            is_valid, message = self.format_validator.validate(value)
            if is_valid:
                return None
            reason = ErrorKind.FQDN_INVALID

        return Violation(
            message=message or FqdnValidator.MESSAGE_FQDN_INVALID,
            path=self.field,
            invalid_value=value,
            parameters={"{{ value }}": format_with_identifiers(value, self.identity_reader)},
            reason=reason,
        )
