"""
Centralized constants for requirekit.

This module defines immutable configuration values used across requirekit,
including well-known file names, platform tags, version-control settings,
and logging formats. All values are intended to be treated as read-only.
"""

from typing import Final, FrozenSet, Tuple

# ---------------------------------------------------------------------------
# Well-known file and directory names
# ---------------------------------------------------------------------------

#: Requirement file kept at the root of each package and of the package root.
REQUIRE_FILE: Final[str] = "REQUIRE"

#: Directory holding the published metadata snapshot.
METADATA_DIR: Final[str] = "METADATA"

#: Per-package metadata subdirectory listing published versions.
VERSIONS_DIR: Final[str] = "versions"

#: Per-version file holding the published commit identifier.
SHA1_FILE: Final[str] = "sha1"

#: Per-version file holding the published requirement lines.
REQUIRES_FILE: Final[str] = "requires"

#: Per-package file holding the upstream repository URL.
URL_FILE: Final[str] = "url"

#: Names under the package root that are never installed packages.
RESERVED_NAMES: Final[FrozenSet[str]] = frozenset({METADATA_DIR, REQUIRE_FILE})

# ---------------------------------------------------------------------------
# Requirement line grammar
# ---------------------------------------------------------------------------

#: Prefix introducing a platform tag.
PLATFORM_PREFIX: Final[str] = "@"

#: Prefix negating a platform tag.
NEGATION_PREFIX: Final[str] = "!"

#: Comment marker; everything from here to end of line is ignored.
COMMENT_MARKER: Final[str] = "#"

#: Platform tags understood by the aggregator, one per platform family.
PLATFORM_TAGS: Final[Tuple[str, ...]] = ("windows", "unix", "osx", "linux", "bsd")

# ---------------------------------------------------------------------------
# Installed state
# ---------------------------------------------------------------------------

#: Name of the runtime entry added to the fixed set.
DEFAULT_RUNTIME_NAME: Final[str] = "python"

#: Branch naming scheme used for pinned checkouts.
PINNED_BRANCH_PATTERN: Final[str] = r"^pinned\.[0-9a-f]{8}\.tmp$"

#: Matches GitHub repository URLs in https, git and ssh forms.
GITHUB_URL_PATTERN: Final[str] = (
    r"^(?:git@|git://|https?://(?:[\w\.\+\-:]+@)?)github\.com[:/]"
    r"(([^/].+)/(.+?))(?:\.git)?$"
)

# ---------------------------------------------------------------------------
# Version control
# ---------------------------------------------------------------------------

#: Executable used by the git backend.
GIT_EXECUTABLE: Final[str] = "git"

#: Default timeout in seconds for a single git invocation.
DEFAULT_GIT_TIMEOUT: Final[int] = 60

# ---------------------------------------------------------------------------
# Configuration defaults
# ---------------------------------------------------------------------------

#: Reuse the published-metadata cache between passes when the key matches.
DEFAULT_USE_CACHE: Final[bool] = True

# ---------------------------------------------------------------------------
# Security constraints
# ---------------------------------------------------------------------------

#: Maximum allowed file size (in bytes) when reading requirement files.
MAX_FILE_SIZE: Final[int] = 10 * 1024 * 1024  # 10 MB

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
