"""
Global Configuration and Conventions.

This module centralizes the file names of the legacy Go dependency managers
and the repository-hosting conventions used to find project roots.
"""

from pathlib import Path
from typing import Dict, Set

# --- Legacy Metadata Files ---

GODEP_FILE = Path("Godeps") / "Godeps.json"
GLIDE_YAML_FILE = Path("glide.yaml")
GLIDE_LOCK_FILE = Path("glide.lock")
VNDR_FILE = Path("vendor.conf")

# --- Repository Hosting Conventions ---

# Hosts where the project root is a fixed number of path elements
# (host included), e.g. github.com/<owner>/<repo>
FIXED_DEPTH_HOSTS: Dict[str, int] = {
    "github.com": 3,
    "bitbucket.org": 3,
    "gitlab.com": 3,
    "google.golang.org": 2,
}

# Host prefixes that own a whole namespace of repositories
FIXED_PREFIX_ROOTS: Dict[str, int] = {
    "golang.org/x": 3,
    "cloud.google.com/go": 2,
}

# gopkg.in roots end at the first element carrying a ".vN" suffix
GOPKG_HOST = "gopkg.in"

# Path elements ending in one of these name the repository explicitly
VCS_SUFFIXES: Set[str] = {".git", ".hg", ".bzr", ".svn"}

# --- Source Provider ---

# Scheme used to turn a project root into a clone URL
DEFAULT_REMOTE_SCHEME = "https"

# Upper bound for a single git call
GIT_TIMEOUT_SECONDS = 120

# A full commit id, used when a legacy file only carries a version field
FULL_REVISION_LENGTH = 40


def is_full_revision(value: str) -> bool:
    """Check if a string looks like a full 40-character commit id."""
    if len(value) != FULL_REVISION_LENGTH:
        return False
    return all(c in "0123456789abcdef" for c in value.lower())
