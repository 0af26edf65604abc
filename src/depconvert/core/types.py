"""
Core type definitions for depconvert.

Defines the records produced by legacy importers and the Manifest and Lock
assembled from them. Manifest and Lock are plain containers: they know how
to render themselves as dictionaries but not how to persist themselves.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict

from .versions import LockVersion, PairedVersion, Revision, UnpairedVersion, VersionKind

# The import-path prefix owning one repository
ProjectRoot = str


class ImportRecord(BaseModel):
    """
    One dependency entry read from a legacy metadata file.

    Empty `import_path` or `revision` values are allowed here so that the
    converter can report them with context.

    Attributes:
        import_path: The Go import path as written by the legacy tool.
        revision: The VCS revision the legacy tool recorded.
        version_label: Free-form tag or branch annotation, if any.
        source: Alternate repository location, if any.
    """

    import_path: str
    revision: str = ""
    version_label: str = ""
    source: str = ""

    model_config = ConfigDict(frozen=True, extra="forbid")


@dataclass(frozen=True)
class LockedProject:
    """
    One entry of the Lock.

    Attributes:
        root: The project root being locked.
        version: The resolved version (paired, unpaired or bare revision).
        source: Alternate repository location, or None.
    """

    root: ProjectRoot
    version: LockVersion
    source: Optional[str] = None

    @property
    def revision(self) -> Optional[str]:
        """The locked revision, if the version carries one."""
        if isinstance(self.version, PairedVersion):
            return self.version.revision
        if isinstance(self.version, Revision):
            return str(self.version)
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a plain dictionary."""
        data: Dict[str, Any] = {"name": self.root}
        if self.source:
            data["source"] = self.source

        version = self.version
        if isinstance(version, (PairedVersion, UnpairedVersion)):
            key = "branch" if version.kind == VersionKind.BRANCH else "version"
            data[key] = version.label

        if self.revision:
            data["revision"] = self.revision
        return data

    def __repr__(self) -> str:
        source_part = f", source={self.source!r}" if self.source else ""
        return f"LockedProject({self.root!r}, {self.version!r}{source_part})"


@dataclass
class Manifest:
    """
    Declared constraints and ignore rules for a converted project.

    Attributes:
        constraints: Constraint string per project root.
        sources: Alternate repository location per project root.
        ignored: Package paths excluded from resolution, no duplicates.
    """

    constraints: Dict[ProjectRoot, str] = field(default_factory=dict)
    sources: Dict[ProjectRoot, str] = field(default_factory=dict)
    ignored: List[str] = field(default_factory=list)

    def add_constraint(self, root: ProjectRoot, constraint: str) -> None:
        """Record a constraint; the first constraint for a root wins."""
        self.constraints.setdefault(root, constraint)

    def add_ignored(self, paths: Iterable[str]) -> None:
        """Append ignored packages, skipping ones already present."""
        for path in paths:
            if path and path not in self.ignored:
                self.ignored.append(path)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a plain dictionary with a stable layout."""
        constraints = []
        for root in sorted(set(self.constraints) | set(self.sources)):
            entry: Dict[str, Any] = {"name": root}
            if root in self.constraints:
                entry["version"] = self.constraints[root]
            if root in self.sources:
                entry["source"] = self.sources[root]
            constraints.append(entry)
        return {"constraints": constraints, "ignored": list(self.ignored)}


@dataclass
class Lock:
    """
    Resolved versions for a converted project, in conversion order.

    Attributes:
        projects: Locked projects, at most one per root.
    """

    projects: List[LockedProject] = field(default_factory=list)

    def add(self, project: LockedProject) -> None:
        """Append a locked project unless its root is already locked."""
        if self.has_project(project.root):
            return
        self.projects.append(project)

    def has_project(self, root: ProjectRoot) -> bool:
        """Check if a root already has a lock entry."""
        return any(p.root == root for p in self.projects)

    def get_project(self, root: ProjectRoot) -> Optional[LockedProject]:
        for p in self.projects:
            if p.root == root:
                return p
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a plain dictionary."""
        return {"projects": [p.to_dict() for p in self.projects]}
