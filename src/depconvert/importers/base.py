"""
Base Importer Infrastructure.

Defines the `Importer` base class shared by the legacy readers, the
`ImportConfig` container a reader produces, and `ImporterLoadError`.

An importer does three things:
    - detect: is this tool's metadata present in the project?
    - load: read it into ImportRecords plus ignore rules
    - convert: hand the records to the Converter
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from ..core.converter import ConversionResult, Converter
from ..core.source import SourceProvider
from ..core.types import ImportRecord, Lock, Manifest


class ImporterLoadError(Exception):
    """
    Raised when a legacy metadata file cannot be read or parsed.

    Attributes:
        importer: Name of the importer that failed.
        path: The file being read.
        message: Human-readable error message.
    """

    def __init__(self, importer: str, path: Path | str, message: str):
        self.importer = importer
        self.path = Path(path)
        self.message = message
        super().__init__(f"Unable to load {self.path} ({importer}): {message}")


@dataclass
class ImportConfig:
    """
    Everything a legacy reader extracted from its files.

    Attributes:
        records: Dependency entries in file order.
        ignored: Package paths to exclude from resolution.
        exclude_dirs: Directories relative to the project root to exclude.
        warnings: Features of the legacy file that could not be converted.
    """

    records: List[ImportRecord] = field(default_factory=list)
    ignored: List[str] = field(default_factory=list)
    exclude_dirs: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def ignored_packages(self, project_root: str) -> List[str]:
        """Ignored packages with excluded directories joined to the project root."""
        root = project_root.strip().strip("/")
        excluded = [f"{root}/{d.strip().strip('/')}" for d in self.exclude_dirs if d.strip().strip("/")]
        return self.ignored + excluded


class Importer(ABC):
    """
    Abstract base class for legacy dependency metadata importers.

    Subclasses name their tool and their metadata file and implement `load`.

    Attributes:
        provider: Source provider handed to the Converter.
        logger: Sink for progress and warning lines.
        verbose: Whether progress lines are logged at INFO level.
    """

    def __init__(
        self,
        provider: SourceProvider,
        logger: Optional[logging.Logger] = None,
        verbose: bool = False,
    ):
        self.provider = provider
        self.logger = logger or logging.getLogger(f"{__name__}.{type(self).__name__}")
        self.verbose = verbose

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier of the legacy tool (e.g. 'godep')."""
        pass

    @property
    @abstractmethod
    def config_file(self) -> Path:
        """Path of the tool's metadata file, relative to the project directory."""
        pass

    def detect(self, project_dir: Path) -> bool:
        """Check if this tool's metadata exists in `project_dir`."""
        return (Path(project_dir) / self.config_file).is_file()

    @abstractmethod
    def load(self, project_dir: Path) -> ImportConfig:
        """
        Read the tool's metadata from `project_dir`.

        Raises:
            ImporterLoadError: If the metadata cannot be read or parsed.
        """
        pass

    def _read_text(self, path: Path) -> str:
        """Read a metadata file, mapping I/O problems to ImporterLoadError."""
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ImporterLoadError(self.name, path, str(e))

    def _warn(self, message: str) -> None:
        self.logger.warning(message)

    def _log_verbose(self, message: str) -> None:
        self.logger.log(logging.INFO if self.verbose else logging.DEBUG, message)

    def convert(self, config: ImportConfig, project_root: str) -> ConversionResult:
        """
        Convert loaded metadata.

        Args:
            config: The result of `load`.
            project_root: Import path of the project being migrated.

        Returns:
            ConversionResult with manifest, lock and warnings.

        Raises:
            StructuralError: If a record is missing its path or revision.
        """
        converter = Converter(
            config.records,
            self.provider,
            ignored=config.ignored_packages(project_root),
            logger=self.logger,
            verbose=self.verbose,
        )
        result = converter.run(project_root)
        result.warnings[:0] = config.warnings
        return result

    def run(self, project_dir: Path, project_root: str) -> ConversionResult:
        """Load and convert in one step."""
        self._log_verbose(f"Importing {self.name} configuration from {Path(project_dir) / self.config_file}")
        config = self.load(Path(project_dir))
        return self.convert(config, project_root)

    def import_project(self, project_dir: Path, project_root: str) -> Tuple[Manifest, Lock]:
        """
        Load and convert this tool's metadata.

        Args:
            project_dir: Directory containing the legacy metadata.
            project_root: Import path of the project being migrated.

        Returns:
            Tuple of (Manifest, Lock).
        """
        result = self.run(project_dir, project_root)
        return result.manifest, result.lock
