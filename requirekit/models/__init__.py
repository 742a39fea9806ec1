"""
Unified data model exports for requirekit.

This module re-exports all core data models to provide a stable and
convenient public API. Users can import models directly from
``requirekit.models`` instead of individual submodules.

Example:
    >>> from requirekit.models import Requirement, VersionSet, Fixed
"""

from __future__ import annotations

from requirekit.models.version import (
    MAX_VERSION,
    MIN_VERSION,
    VersionInterval,
    VersionNumber,
    VersionSet,
    parse_version,
)
from requirekit.models.requirement import Requirement
from requirekit.models.package import (
    Available,
    Fixed,
    InstalledState,
    InstalledVersion,
    InstallStatus,
    Requires,
)
from requirekit.models.advisory import Advisory, AdvisoryKind, Assessed

__all__ = [
    "MAX_VERSION",
    "MIN_VERSION",
    "VersionInterval",
    "VersionNumber",
    "VersionSet",
    "parse_version",
    "Requirement",
    "Available",
    "Fixed",
    "InstalledState",
    "InstalledVersion",
    "InstallStatus",
    "Requires",
    "Advisory",
    "AdvisoryKind",
    "Assessed",
]
