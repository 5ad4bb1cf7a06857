"""FQDN syntax, domain policy and uniqueness validators."""

from .entity import NOT_UNIQUE_ERROR, FqdnEntityValidator
from .exceptions import (
    ConfigurationError,
    ConstraintDefinitionError,
    FqdnValidatorError,
    NotADomainError,
    ResolutionError,
    UnexpectedTypeError,
)
from .policy import DomainPolicyValidator, PolicyConfig, evaluate, normalize
from .resolver import DnsResolver, Resolver, StaticResolver
from .syntax import FqdnValidator, is_valid_fqdn, to_ascii, validate_fqdn
from .typedefs import (
    ErrorKind,
    ResolutionResult,
    ResolutionStatus,
    UniquenessResult,
    ValidationOutcome,
    Violation,
)
from .uniqueness import (
    AttributeIdentityReader,
    IdentityReader,
    Repository,
    UniquenessChecker,
    UniquenessQuery,
    format_with_identifiers,
)

__all__ = [
    "AttributeIdentityReader",
    "ConfigurationError",
    "ConstraintDefinitionError",
    "DnsResolver",
    "DomainPolicyValidator",
    "ErrorKind",
    "FqdnEntityValidator",
    "FqdnValidator",
    "FqdnValidatorError",
    "IdentityReader",
    "NOT_UNIQUE_ERROR",
    "NotADomainError",
    "PolicyConfig",
    "Repository",
    "ResolutionError",
    "ResolutionResult",
    "ResolutionStatus",
    "Resolver",
    "StaticResolver",
    "UnexpectedTypeError",
    "UniquenessChecker",
    "UniquenessQuery",
    "UniquenessResult",
    "ValidationOutcome",
    "Violation",
    "evaluate",
    "format_with_identifiers",
    "is_valid_fqdn",
    "normalize",
    "to_ascii",
    "validate_fqdn",
]
