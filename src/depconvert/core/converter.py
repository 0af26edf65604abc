"""
Converter.

Drives import records through root deduction and version resolution, and
assembles the resulting Manifest and Lock.

Failure Handling:
    - Structural (empty import path or revision): the whole conversion is
      aborted before any output is produced
    - Resolution (root cannot be located): the root is skipped with a warning
    - Ambiguity (several versions on one revision, odd labels): resolved
      deterministically and logged at verbose level
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .resolver import VersionResolver
from .roots import PathNormalizer, RootUnresolvableError, clean_import_path
from .source import SourceProvider
from .types import ImportRecord, Lock, LockedProject, Manifest


class StructuralError(Exception):
    """Raised when legacy metadata is too broken to convert at all."""


class EmptyImportPathError(StructuralError):
    """
    Raised when a record has no import path.

    Attributes:
        index: Position of the offending record.
    """

    def __init__(self, index: int):
        self.index = index
        super().__init__(f"Invalid configuration: import path is required (entry #{index + 1})")


class EmptyRevisionError(StructuralError):
    """
    Raised when a record has no revision.

    Attributes:
        import_path: The import path missing its revision.
    """

    def __init__(self, import_path: str):
        self.import_path = import_path
        super().__init__(f"Invalid configuration: revision is required for '{import_path}'")


@dataclass
class ConversionResult:
    """
    Everything produced by one conversion run.

    Attributes:
        manifest: The converted manifest.
        lock: The converted lock.
        warnings: Non-fatal problems, one line each.
        skipped: Import paths whose root could not be resolved.
        packages_seen: Every converted import path mapped to its root.
    """

    manifest: Manifest = field(default_factory=Manifest)
    lock: Lock = field(default_factory=Lock)
    warnings: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    packages_seen: Dict[str, str] = field(default_factory=dict)

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)


class Converter:
    """
    Converts legacy import records into a Manifest and Lock.

    A Converter holds its inputs only. All bookkeeping (seen roots, root and
    version memos) is created fresh by each call to `run`.

    Attributes:
        records: Import records in the order the legacy tool listed them.
        provider: Source provider consulted for roots and versions.
        ignored: Package paths to carry into the manifest's ignore list.
        verbose: Whether to log progress and ambiguity lines at INFO level.

    Example:
        ```python
        converter = Converter(records, GitSourceProvider(), verbose=True)
        manifest, lock = converter.convert("github.com/me/myproject")
        ```
    """

    def __init__(
        self,
        records: Sequence[ImportRecord],
        provider: SourceProvider,
        ignored: Iterable[str] = (),
        logger: Optional[logging.Logger] = None,
        verbose: bool = False,
    ):
        self.records = list(records)
        self.provider = provider
        self.ignored = list(ignored)
        self.logger = logger or logging.getLogger(__name__)
        self.verbose = verbose

    def _log_verbose(self, message: str) -> None:
        self.logger.log(logging.INFO if self.verbose else logging.DEBUG, message)

    def _warn(self, result: ConversionResult, message: str) -> None:
        self.logger.warning(message)
        result.add_warning(message)

    def validate(self) -> None:
        """
        Check every record for structural problems.

        Raises:
            EmptyImportPathError: If a record has no import path.
            EmptyRevisionError: If a record has no revision.
        """
        for i, record in enumerate(self.records):
            if not clean_import_path(record.import_path):
                raise EmptyImportPathError(i)
            if not record.revision.strip():
                raise EmptyRevisionError(record.import_path)

    def convert(self, project_root: str) -> Tuple[Manifest, Lock]:
        """
        Convert the records into a Manifest and Lock.

        Args:
            project_root: Import path of the project being migrated.

        Returns:
            Tuple of (Manifest, Lock).

        Raises:
            StructuralError: If any record is missing its path or revision.
        """
        result = self.run(project_root)
        return result.manifest, result.lock

    def run(self, project_root: str) -> ConversionResult:
        """
        Convert the records, keeping warnings and bookkeeping.

        Args:
            project_root: Import path of the project being migrated.

        Returns:
            ConversionResult for this run.

        Raises:
            StructuralError: If any record is missing its path or revision.
        """
        self.validate()

        project_root = clean_import_path(project_root)
        normalizer = PathNormalizer(self.provider)
        resolver = VersionResolver(self.provider)
        result = ConversionResult()
        processed: set[str] = set()
        failed: set[str] = set()

        for record in self.records:
            import_path = clean_import_path(record.import_path)

            try:
                root = normalizer.normalize(import_path)
            except RootUnresolvableError as e:
                self._warn(result, f"Skipping {import_path}: {e.message}")
                result.skipped.append(import_path)
                continue

            result.packages_seen[import_path] = root

            if project_root and root == project_root:
                self._log_verbose(f"  Skipping {import_path}: part of the project being converted")
                continue

            if root in failed:
                self._log_verbose(f"  Skipping {import_path}: {root} could not be resolved")
                result.skipped.append(import_path)
                continue

            if root in processed:
                self._log_verbose(f"  Skipping {import_path}: already converted as {root}")
                continue

            self._log_verbose(f"Converting {root} ({record.revision.strip()})")
            if self._convert_root(root, record, resolver, result):
                processed.add(root)
            else:
                failed.add(root)

        result.manifest.add_ignored(self.ignored)
        return result

    def _convert_root(
        self,
        root: str,
        record: ImportRecord,
        resolver: VersionResolver,
        result: ConversionResult,
    ) -> bool:
        """
        Resolve one root and add its constraint and lock entry.

        Returns:
            False if the root could not be resolved and was skipped.
        """
        try:
            resolution = resolver.resolve(root, record.revision.strip(), record.version_label)
        except RootUnresolvableError as e:
            self._warn(result, f"Skipping {root}: {e.message}")
            result.skipped.append(clean_import_path(record.import_path))
            return False

        for note in resolution.notes:
            self._log_verbose(f"  {note}")

        source = record.source.strip() or None
        if resolution.constraint:
            result.manifest.add_constraint(root, resolution.constraint)
            self._log_verbose(f"  Using {resolution.constraint} as initial constraint for {root}")
        if source:
            result.manifest.sources[root] = source

        result.lock.add(LockedProject(root=root, version=resolution.version, source=source))
        self._log_verbose(f"  Locking {root} at {resolution.version}")
        return True
