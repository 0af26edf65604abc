"""
glide Importer.

Reads `glide.yaml` and, when present, `glide.lock`. The yaml carries the
declared packages and their version labels; the lock carries the exact
revisions.

    # glide.yaml
    package: github.com/me/project
    ignore:
      - github.com/me/project/generated
    excludeDirs:
      - samples
    import:
      - package: github.com/sdboyer/deptest
        version: v0.8.0
        repo: https://github.com/fork/deptest.git

    # glide.lock
    imports:
      - name: github.com/sdboyer/deptest
        version: ff2948a2ac8f538c4ecd55962e919d1e13e74baf
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .. import config
from ..core.types import ImportRecord
from .base import ImportConfig, Importer, ImporterLoadError


def _as_list(value: Any) -> Any:
    """YAML writes an empty key as null, and a single entry without a list."""
    if value is None:
        return []
    if isinstance(value, (str, dict)):
        return [value]
    return value


def _as_text(value: Any) -> Any:
    """YAML reads unquoted versions like 1.0 or 2 as numbers."""
    if value is None:
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class GlidePackage(BaseModel):
    """One `import` or `testImport` entry of glide.yaml."""

    name: str = Field(default="", alias="package")
    reference: str = Field(default="", alias="version")
    repository: str = Field(default="", alias="repo")
    subpackages: List[str] = Field(default_factory=list)
    os: List[str] = Field(default_factory=list)
    arch: List[str] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("name", "reference", "repository", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> Any:
        return _as_text(value)

    @field_validator("subpackages", "os", "arch", mode="before")
    @classmethod
    def coerce_list(cls, value: Any) -> Any:
        return _as_list(value)


class GlideYaml(BaseModel):
    """The glide.yaml document."""

    name: str = Field(default="", alias="package")
    ignores: List[str] = Field(default_factory=list, alias="ignore")
    exclude_dirs: List[str] = Field(default_factory=list, alias="excludeDirs")
    imports: List[GlidePackage] = Field(default_factory=list, alias="import")
    test_imports: List[GlidePackage] = Field(default_factory=list, alias="testImport")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("name", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> Any:
        return _as_text(value)

    @field_validator("ignores", "exclude_dirs", "imports", "test_imports", mode="before")
    @classmethod
    def coerce_list(cls, value: Any) -> Any:
        return _as_list(value)


class GlideLockedPackage(BaseModel):
    """One `imports` or `testImports` entry of glide.lock."""

    name: str = ""
    revision: str = Field(default="", alias="version")
    repository: str = Field(default="", alias="repo")
    subpackages: List[str] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("name", "revision", "repository", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> Any:
        return _as_text(value)

    @field_validator("subpackages", mode="before")
    @classmethod
    def coerce_list(cls, value: Any) -> Any:
        return _as_list(value)


class GlideLock(BaseModel):
    """The glide.lock document."""

    imports: List[GlideLockedPackage] = Field(default_factory=list)
    test_imports: List[GlideLockedPackage] = Field(default_factory=list, alias="testImports")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("imports", "test_imports", mode="before")
    @classmethod
    def coerce_list(cls, value: Any) -> Any:
        return _as_list(value)

    def revisions(self) -> Dict[str, str]:
        """Locked revision per package name; the first entry for a name wins."""
        locked: Dict[str, str] = {}
        for pkg in self.imports + self.test_imports:
            if pkg.name and pkg.revision:
                locked.setdefault(pkg.name, pkg.revision)
        return locked


class GlideImporter(Importer):
    """Importer for glide's glide.yaml and glide.lock."""

    @property
    def name(self) -> str:
        return "glide"

    @property
    def config_file(self) -> Path:
        return config.GLIDE_YAML_FILE

    @property
    def lock_file(self) -> Path:
        return config.GLIDE_LOCK_FILE

    def _load_yaml(self, text: str, path: Path | str, model: type[BaseModel]) -> Any:
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as e:
            raise ImporterLoadError(self.name, path, f"invalid YAML: {e}")

        if not isinstance(data, dict):
            raise ImporterLoadError(self.name, path, "expected a mapping at the top level")

        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise ImporterLoadError(self.name, path, str(e.errors()[0]["msg"]))

    def parse(
        self,
        yaml_text: str,
        lock_text: Optional[str] = None,
        yaml_path: Path | str = config.GLIDE_YAML_FILE,
        lock_path: Path | str = config.GLIDE_LOCK_FILE,
    ) -> ImportConfig:
        """
        Parse glide.yaml and optional glide.lock content.

        Args:
            yaml_text: The glide.yaml document.
            lock_text: The glide.lock document, or None if there is no lock.
            yaml_path: File name used in error messages.
            lock_path: File name used in error messages.

        Returns:
            ImportConfig with records for imports and test imports.

        Raises:
            ImporterLoadError: If either document is malformed.
        """
        glide_yaml: GlideYaml = self._load_yaml(yaml_text, yaml_path, GlideYaml)
        locked: Dict[str, str] = {}
        if lock_text is not None:
            glide_lock: GlideLock = self._load_yaml(lock_text, lock_path, GlideLock)
            locked = glide_lock.revisions()

        result = ImportConfig(
            ignored=[p for p in glide_yaml.ignores if p],
            exclude_dirs=[d for d in glide_yaml.exclude_dirs if d],
        )

        for pkg in glide_yaml.imports + glide_yaml.test_imports:
            if pkg.os or pkg.arch:
                message = (
                    f"glide: the {pkg.name} package is restricted to "
                    f"os={','.join(pkg.os) or '*'} arch={','.join(pkg.arch) or '*'}; "
                    "the restriction cannot be converted and is dropped"
                )
                self._warn(message)
                result.warnings.append(message)

            result.records.append(self._to_record(pkg, locked))

        return result

    @staticmethod
    def _to_record(pkg: GlidePackage, locked: Dict[str, str]) -> ImportRecord:
        revision = locked.get(pkg.name, "")
        label = pkg.reference

        # Without a lock, a yaml version that is a commit id is the revision
        if not revision and config.is_full_revision(label):
            revision = label
        if label == revision or config.is_full_revision(label):
            label = ""

        return ImportRecord(
            import_path=pkg.name,
            revision=revision,
            version_label=label,
            source=pkg.repository,
        )

    def load(self, project_dir: Path) -> ImportConfig:
        project_dir = Path(project_dir)
        yaml_path = project_dir / self.config_file
        lock_path = project_dir / self.lock_file

        yaml_text = self._read_text(yaml_path)
        lock_text = None
        if lock_path.is_file():
            lock_text = self._read_text(lock_path)
        else:
            self._log_verbose(f"No {self.lock_file} found; revisions come from {self.config_file} only")

        return self.parse(yaml_text, lock_text, yaml_path, lock_path)
