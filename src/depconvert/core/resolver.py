"""
Version Resolver.

Turns a (project root, revision, label) triple recorded by a legacy tool into
a manifest constraint and a lock version, using the versions a source
provider knows about.

Resolution Strategy:
    1. Label - a semver label yields a caret constraint; a known version with
       that label at the recorded revision is locked
    2. Revision - otherwise the first version (in upgrade order) at the
       recorded revision is locked
    3. Bare revision - nothing matches, the revision is locked on its own

The resolver never raises for ambiguous input. Choices it had to make are
returned as notes for the caller to log.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .roots import RootUnresolvableError
from .source import SourceError, SourceProvider
from .versions import (
    KnownVersion,
    LockVersion,
    PairedVersion,
    Revision,
    VersionKind,
    caret_constraint,
    is_semver_range,
    parse_semver,
    sort_for_upgrade,
)


@dataclass(frozen=True)
class Resolution:
    """
    Result of resolving one project root.

    Attributes:
        constraint: Manifest constraint, or None to leave the root unconstrained.
        version: Version to lock (PairedVersion or bare Revision).
        notes: Human-readable explanations of ambiguous choices.
    """

    constraint: Optional[str]
    version: LockVersion
    notes: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_paired(self) -> bool:
        return isinstance(self.version, PairedVersion)


class VersionResolver:
    """
    Resolves recorded revisions against a source provider's versions.

    Version listings are cached per root for the lifetime of the resolver.

    Attributes:
        provider: The source provider to query.

    Example:
        ```python
        resolver = VersionResolver(GitSourceProvider())
        res = resolver.resolve("github.com/sdboyer/deptest", "ff2948a2...", "v0.8.0")
        print(res.constraint, res.version)
        ```
    """

    def __init__(self, provider: SourceProvider):
        self.provider = provider
        self._versions: Dict[str, List[KnownVersion]] = {}

    def versions_for(self, root: str) -> List[KnownVersion]:
        """
        Known versions of `root` in upgrade order.

        Raises:
            RootUnresolvableError: If the provider cannot list the root.
        """
        if root not in self._versions:
            try:
                listed = self.provider.list_versions(root)
            except SourceError as e:
                raise RootUnresolvableError(root, f"unable to list versions: {e.message}")
            self._versions[root] = sort_for_upgrade(listed)
        return self._versions[root]

    def resolve(self, root: str, revision: str, label: str = "") -> Resolution:
        """
        Resolve one project root.

        Args:
            root: The project root.
            revision: The revision the legacy tool recorded.
            label: The tag or branch annotation the legacy tool recorded.

        Returns:
            Resolution with constraint, lock version and notes.

        Raises:
            RootUnresolvableError: If the provider cannot locate the root.
        """
        versions = self.versions_for(root)
        notes: List[str] = []
        constraint: Optional[str] = None
        locked: Optional[PairedVersion] = None
        label = label.strip()

        if label:
            parsed = parse_semver(label)
            if parsed is not None:
                constraint = caret_constraint(parsed)
            elif is_semver_range(label):
                constraint = label

            match = self._find_label(versions, label)
            if match is None:
                if constraint is None:
                    notes.append(f"{root}: {label!r} is not a semantic version or known ref")
                else:
                    notes.append(f"{root}: no version named {label}, matching by revision")
            elif match.revision == revision:
                locked = match
            else:
                notes.append(
                    f"{root}: {label} now points at {short(match.revision)}, "
                    f"not {short(revision)}; matching by revision"
                )

            if constraint is None and match is not None:
                constraint = match.label

        if locked is None:
            candidates = [v for v in versions if v.revision == revision]
            if candidates:
                locked = candidates[0]
                if len(candidates) > 1:
                    labels = ", ".join(v.label for v in candidates)
                    notes.append(f"{root}: {short(revision)} is known as {labels}; using {locked.label}")
                if constraint is None:
                    constraint = locked.constraint()
            else:
                notes.append(f"{root}: no version at {short(revision)}, locking the revision only")

        version: LockVersion = locked if locked is not None else Revision(revision)
        return Resolution(constraint=constraint, version=version, notes=tuple(notes))

    @staticmethod
    def _find_label(versions: List[KnownVersion], label: str) -> Optional[KnownVersion]:
        """Find the version named `label`, comparing semver labels by value."""
        for v in versions:
            if v.label == label:
                return v

        parsed = parse_semver(label)
        if parsed is None:
            return None
        for v in versions:
            if v.kind == VersionKind.SEMVER and v.semver == parsed:
                return v
        return None


def short(revision: str) -> str:
    """Abbreviate a revision for log output."""
    return revision[:8]
