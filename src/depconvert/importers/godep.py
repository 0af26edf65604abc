"""
godep Importer.

Reads `Godeps/Godeps.json`:

    {
      "ImportPath": "github.com/me/project",
      "GoVersion": "go1.8",
      "Imports": [
        {"ImportPath": "github.com/sdboyer/deptest", "Rev": "ff2948a2...", "Comment": "v0.8.0"}
      ]
    }

`Comment` is the version label. Entries missing `ImportPath` or `Rev` are
kept with empty values so conversion can report them.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .. import config
from ..core.types import ImportRecord
from .base import ImportConfig, Importer, ImporterLoadError


class GodepPackage(BaseModel):
    """One entry of the `Imports` list."""

    import_path: Optional[str] = Field(default=None, alias="ImportPath")
    rev: Optional[str] = Field(default=None, alias="Rev")
    comment: Optional[str] = Field(default=None, alias="Comment")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_record(self) -> ImportRecord:
        return ImportRecord(
            import_path=self.import_path or "",
            revision=self.rev or "",
            version_label=self.comment or "",
        )


class GodepJSON(BaseModel):
    """The Godeps.json document."""

    import_path: Optional[str] = Field(default=None, alias="ImportPath")
    go_version: Optional[str] = Field(default=None, alias="GoVersion")
    packages: Optional[List[str]] = Field(default=None, alias="Packages")
    imports: Optional[List[GodepPackage]] = Field(default=None, alias="Imports")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class GodepImporter(Importer):
    """Importer for godep's Godeps.json."""

    @property
    def name(self) -> str:
        return "godep"

    @property
    def config_file(self) -> Path:
        return config.GODEP_FILE

    def parse(self, text: str, path: Path | str = config.GODEP_FILE) -> ImportConfig:
        """
        Parse Godeps.json content.

        Args:
            text: The JSON document.
            path: File name used in error messages.

        Returns:
            ImportConfig with one record per `Imports` entry.

        Raises:
            ImporterLoadError: If the document is not valid Godeps JSON.
        """
        try:
            doc = GodepJSON.model_validate_json(text)
        except ValidationError as e:
            raise ImporterLoadError(self.name, path, _first_error(e))

        return ImportConfig(records=[pkg.to_record() for pkg in doc.imports or []])

    def load(self, project_dir: Path) -> ImportConfig:
        path = Path(project_dir) / self.config_file
        return self.parse(self._read_text(path), path)


def _first_error(error: ValidationError) -> str:
    """Condense a pydantic error into one line."""
    details = error.errors()
    if not details:
        return str(error)
    first = details[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    if location:
        return f"{first['msg']} at {location}"
    return first["msg"]
