"""
Version Types and Ordering.

Models the three shapes a locked version can take (bare revision, unpaired
version, revision-paired version) and the "upgrade order" used to pick one
version when several point at the same revision.

Upgrade order, lowest rank first:
    1. Semver releases, newest first
    2. Semver pre-releases, newest first
    3. Non-semver tags, ascending by label
    4. Branches, default branch first, then ascending by label

Versions with equal rank keep the order the provider listed them in.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Iterable, List, Optional, Union

from semantic_version import NpmSpec, Version


class VersionKind(StrEnum):
    """
    The kind of label a version carries.

    Attributes:
        SEMVER: A tag that parses as a semantic version.
        TAG: Any other tag.
        BRANCH: A branch name.
    """

    SEMVER = "semver"
    TAG = "tag"
    BRANCH = "branch"


class Revision(str):
    """A bare VCS revision with no version label attached."""

    def __repr__(self) -> str:
        return f"Revision({str(self)!r})"


def parse_semver(label: str) -> Optional[Version]:
    """
    Parse a label as a strict semantic version.

    A single leading "v" is accepted. Partial versions ("1.2") are rejected.

    Args:
        label: The tag or annotation to parse.

    Returns:
        The parsed Version, or None if the label is not strict semver.
    """
    text = label.strip()
    if text[:1] in ("v", "V"):
        text = text[1:]
    if not text:
        return None
    try:
        return Version(text)
    except ValueError:
        return None


def caret_constraint(version: Version) -> str:
    """Render the caret range accepting releases compatible with `version`."""
    return f"^{version}"


RANGE_OPERATORS = ("^", "~", ">", "<", "=")

# An operator, optional spaces and an optional "v" before the version number
OPERATOR_PREFIX = re.compile(r"([\^~<>=]+)\s*[vV]?(?=\d)")


def normalize_range(label: str) -> str:
    """
    Rewrite a range label into the form NpmSpec parses.

    Commas become separators, spaces and a "v" after an operator are
    dropped, and runs of whitespace collapse to one space:
    ">= v1.0.0,  <2.0.0" -> ">=1.0.0 <2.0.0".
    """
    text = OPERATOR_PREFIX.sub(r"\1", label.replace(",", " "))
    return " ".join(text.split())


def is_semver_range(label: str) -> bool:
    """Check if a label is already a version range such as "^1.2.0" or ">=1.0, <2"."""
    text = label.strip()
    if not text.startswith(RANGE_OPERATORS):
        return False
    try:
        NpmSpec(normalize_range(text))
    except ValueError:
        return False
    return True


@dataclass(frozen=True)
class UnpairedVersion:
    """
    A version label with no revision bound to it.

    Attributes:
        label: The tag or branch name as written.
        kind: What sort of label this is.
    """

    label: str
    kind: VersionKind = VersionKind.TAG

    def __str__(self) -> str:
        return self.label

    @property
    def semver(self) -> Optional[Version]:
        if self.kind != VersionKind.SEMVER:
            return None
        return parse_semver(self.label)


@dataclass(frozen=True)
class PairedVersion:
    """
    A version label bound to the exact revision it points at.

    This is also the shape of one entry in a source provider's version
    listing, where `is_default` marks the repository's default branch.

    Attributes:
        label: The tag or branch name.
        revision: The commit the label points at.
        kind: What sort of label this is.
        is_default: True for the default branch of the repository.
    """

    label: str
    revision: str
    kind: VersionKind = VersionKind.TAG
    is_default: bool = field(default=False, compare=False)

    def __str__(self) -> str:
        return self.label

    @property
    def semver(self) -> Optional[Version]:
        if self.kind != VersionKind.SEMVER:
            return None
        return parse_semver(self.label)

    def constraint(self) -> str:
        """
        The manifest constraint implied by locking this version.

        Semver versions yield a caret range; tags and branches yield
        their own name.
        """
        parsed = self.semver
        if parsed is not None:
            return caret_constraint(parsed)
        return self.label


# Provider listings are plain paired versions
KnownVersion = PairedVersion

LockVersion = Union[PairedVersion, UnpairedVersion, Revision]


def new_tag(label: str, revision: str) -> PairedVersion:
    """Create a tag version, classified as semver when the label parses."""
    kind = VersionKind.SEMVER if parse_semver(label) is not None else VersionKind.TAG
    return PairedVersion(label=label, revision=revision, kind=kind)


def new_branch(label: str, revision: str, is_default: bool = False) -> PairedVersion:
    """Create a branch version."""
    return PairedVersion(
        label=label,
        revision=revision,
        kind=VersionKind.BRANCH,
        is_default=is_default,
    )


def sort_for_upgrade(versions: Iterable[PairedVersion]) -> List[PairedVersion]:
    """
    Sort versions into upgrade order.

    Sorting is stable, so versions of equal rank keep their input order.

    Args:
        versions: Versions as listed by a source provider.

    Returns:
        A new list in upgrade order.
    """
    releases: List[PairedVersion] = []
    prereleases: List[PairedVersion] = []
    tags: List[PairedVersion] = []
    branches: List[PairedVersion] = []

    for v in versions:
        if v.kind == VersionKind.BRANCH:
            branches.append(v)
            continue
        parsed = v.semver
        if parsed is None:
            tags.append(v)
        elif parsed.prerelease:
            prereleases.append(v)
        else:
            releases.append(v)

    releases.sort(key=lambda v: v.semver, reverse=True)
    prereleases.sort(key=lambda v: v.semver, reverse=True)
    tags.sort(key=lambda v: v.label)
    branches.sort(key=lambda v: (not v.is_default, v.label))

    return releases + prereleases + tags + branches
