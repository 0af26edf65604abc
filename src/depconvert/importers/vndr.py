"""
vndr Importer.

Reads `vendor.conf`, one dependency per line:

    # comment
    github.com/sdboyer/deptest  ff2948a2ac8f538c4ecd55962e919d1e13e74baf
    github.com/pkg/errors      v0.8.0  https://github.com/fork/errors.git

The second column is recorded as the revision; the optional third column is
an alternate repository. There is no version label.
"""

from __future__ import annotations

from pathlib import Path

from .. import config
from ..core.types import ImportRecord
from .base import ImportConfig, Importer, ImporterLoadError

COMMENT_MARKER = "#"
MAX_FIELDS = 3


class VndrImporter(Importer):
    """Importer for vndr's vendor.conf."""

    @property
    def name(self) -> str:
        return "vndr"

    @property
    def config_file(self) -> Path:
        return config.VNDR_FILE

    def parse(self, text: str, path: Path | str = config.VNDR_FILE) -> ImportConfig:
        """
        Parse vendor.conf content.

        Args:
            text: The file content.
            path: File name used in error messages.

        Returns:
            ImportConfig with one record per dependency line.

        Raises:
            ImporterLoadError: If a line has more than three fields.
        """
        result = ImportConfig()

        for lineno, raw in enumerate(text.splitlines(), start=1):
            line = raw.split(COMMENT_MARKER, 1)[0].strip()
            if not line:
                continue

            fields = line.split()
            if len(fields) > MAX_FIELDS:
                raise ImporterLoadError(
                    self.name,
                    path,
                    f"line {lineno}: expected 'path revision [repository]', got {len(fields)} fields",
                )

            result.records.append(
                ImportRecord(
                    import_path=fields[0],
                    revision=fields[1] if len(fields) > 1 else "",
                    source=fields[2] if len(fields) > 2 else "",
                )
            )

        return result

    def load(self, project_dir: Path) -> ImportConfig:
        path = Path(project_dir) / self.config_file
        return self.parse(self._read_text(path), path)
