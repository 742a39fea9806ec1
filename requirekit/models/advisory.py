"""
Non-fatal advisories for requirekit.

Ancestry searches keep going when a published commit is missing locally
or when history looks inconsistent. Such conditions are returned next to
the computed value in an :class:`Assessed` result instead of being raised.
"""

from __future__ import annotations

import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Iterable, List, Mapping, TypeVar

from requirekit.exceptions import RequireKitError

T = TypeVar("T")


class AdvisoryKind(str, Enum):
    UNKNOWN_COMMIT = "unknown-commit"
    AMBIGUOUS_ANCESTRY = "ambiguous-ancestry"


@dataclass(frozen=True)
class Advisory:
    """
    A condition worth reporting that did not stop the computation.

    Attributes:
        kind: Category of the condition.
        package: Package the condition concerns.
        message: Human-readable description.
        details: Structured metadata, as carried by requirekit errors.
    """

    kind: AdvisoryKind
    package: str
    message: str
    details: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_error(cls, kind: AdvisoryKind, package: str, error: RequireKitError) -> "Advisory":
        return cls(kind, package, error.message, dict(error.details))

    def __str__(self) -> str:
        return f"{self.package}: {self.message}"


@dataclass
class Assessed(Generic[T]):
    """A computed value together with the advisories raised computing it."""

    value: T
    advisories: List[Advisory] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when no advisory was raised."""
        return not self.advisories

    def extend(self, advisories: Iterable[Advisory]) -> None:
        for advisory in advisories:
            if advisory not in self.advisories:
                self.advisories.append(advisory)

    def log(self, logger: logging.Logger, level: int = logging.WARNING) -> None:
        """Emit every advisory through ``logger``."""
        for advisory in self.advisories:
            logger.log(level, "%s", advisory)

    def by_kind(self) -> Dict[AdvisoryKind, List[Advisory]]:
        grouped: Dict[AdvisoryKind, List[Advisory]] = {}
        for advisory in self.advisories:
            grouped.setdefault(advisory.kind, []).append(advisory)
        return grouped
