"""Uniqueness checks of a field value against an external record store.

The store is not owned here: hosts pass a repository exposing a lookup by
field-value criteria, and an identity reader that knows how to read fields and
identifiers off their record types.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Protocol

from fastmcp.utilities.logging import get_logger

from fqdn_validator.exceptions import ConstraintDefinitionError, UnexpectedTypeError
from fqdn_validator.typedefs import UniquenessResult

logger = get_logger(__name__)

PRETTY_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class Repository(Protocol):
    """Record store able to look records up by field values."""

    def find_by(self, criteria: Mapping[str, Any]) -> Sequence[Any]: ...


class IdentityReader(Protocol):
    """Reads field values and identifiers off host records."""

    def read(self, record: Any, field: str) -> Any: ...

    def identifiers(self, record: Any) -> Mapping[str, Any]: ...


class AttributeIdentityReader:
    """Identity reader for records exposing their fields as attributes.

    Args:
        id_fields: Names of the attributes identifying a record.
    """

    def __init__(self, id_fields: Sequence[str] = ("id",)) -> None:
        self.id_fields = tuple(id_fields)

    def read(self, record: Any, field: str) -> Any:
        try:
            return getattr(record, field)
        except AttributeError as e:
            raise ConstraintDefinitionError(
                f'The field "{field}" does not exist on {type(record).__name__}'
            ) from e

    def identifiers(self, record: Any) -> dict[str, Any]:
        return {name: getattr(record, name) for name in self.id_fields if hasattr(record, name)}


@dataclass(frozen=True)
class UniquenessQuery:
    """A single field/value pair to look for in the store."""

    field: str
    value: Any

    def criteria(self) -> dict[str, Any]:
        return {self.field: self.value}


def format_value(value: Any) -> str:
    """Render a scalar value for a user-facing message."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date, time)):
        if isinstance(value, datetime):
            return value.strftime(PRETTY_DATE_FORMAT)
        return value.isoformat()
    if isinstance(value, str):
        return f'"{value}"'
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (list, tuple, dict, set, frozenset)):
        return "array"
    return "object"


_SCALAR_TYPES = (str, int, float, date, time, list, tuple, dict, set, frozenset)


def _is_scalar(value: Any) -> bool:
    return value is None or isinstance(value, _SCALAR_TYPES)


def format_with_identifiers(value: Any, reader: IdentityReader) -> str:
    """Render ``value`` so that record references read as their identifiers.

    Scalars use ``format_value``. A record renders as
    ``object("Host") identified by (id => 1, name => "a")``, or just
    ``object("Host")`` when it has no identifiers. Identifiers that are
    records themselves are not expanded further.
    """
    if _is_scalar(value):
        return format_value(value)

    class_name = type(value).__name__
    identifiers = reader.identifiers(value)
    if not identifiers:
        return f'object("{class_name}")'

    parts = []
    for name, identifier in identifiers.items():
        if _is_scalar(identifier):
            rendered = format_value(identifier)
        else:
            rendered = f'object("{type(identifier).__name__}")'
        parts.append(f"{name} => {rendered}")
    return f'object("{class_name}") identified by ({", ".join(parts)})'


class UniquenessChecker:
    """Check that no other record holds a given value in ``field``.

    Args:
        field: Name of the field the value is matched on.
        repository: Store queried with ``{field: value}`` criteria.
        identity_reader: Reader used to compare records and render conflicts.
        repository_method: Name of the repository lookup method.

    Raises:
        ConstraintDefinitionError: If the field is empty or the repository has
            no callable ``repository_method``.
    """

    def __init__(
        self,
        field: str,
        repository: Repository,
        identity_reader: IdentityReader | None = None,
        repository_method: str = "find_by",
    ) -> None:
        if not isinstance(field, str):
            raise UnexpectedTypeError(field, "string")
        if not field:
            raise ConstraintDefinitionError("field has to be specified.")
        if repository is None:
            raise ConstraintDefinitionError("A repository is required to check uniqueness.")
        lookup = getattr(repository, repository_method, None)
        if not callable(lookup):
            raise ConstraintDefinitionError(
                f'Repository {type(repository).__name__} has no method "{repository_method}".'
            )
        self.field = field
        self.repository = repository
        self.identity_reader = identity_reader or AttributeIdentityReader()
        self._lookup = lookup

    def check_unique(self, value: Any, self_identity: Any = None) -> UniquenessResult:
        """Query the store for ``value`` and decide whether it is unique.

        ``value`` must not be None; null values are exempt from uniqueness and
        callers skip the check for them.

        Args:
            value: The field value to look for.
            self_identity: The record being validated, if it is already stored.

        Returns:
            UniquenessResult: unique, or a conflict carrying the rendered value.
        """
        query = UniquenessQuery(self.field, value)
        matches = list(self._lookup(query.criteria()))

        if not matches or (len(matches) == 1 and self._same_record(matches[0], self_identity)):
            return UniquenessResult.ok()

        logger.debug("%s=%r is already used by %d record(s)", self.field, value, len(matches))
        return UniquenessResult.conflict(
            value=value,
            rendered=format_with_identifiers(value, self.identity_reader),
            match_count=len(matches),
        )

    def _same_record(self, match: Any, record: Any) -> bool:
        if record is None:
            return False
        if match is record:
            return True
        if _is_scalar(match) or _is_scalar(record):
            return False
        ids = self.identity_reader.identifiers(match)
        if not ids or any(identifier is None for identifier in ids.values()):
            return False
        return type(match) is type(record) and ids == self.identity_reader.identifiers(record)
