"""
Legacy Importers.

One importer per legacy Go dependency manager. Only one importer runs per
conversion: the first in `IMPORTER_TYPES` order whose metadata is present.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Type

from ..core.source import SourceProvider
from .base import ImportConfig, Importer, ImporterLoadError
from .glide import GlideImporter
from .godep import GodepImporter
from .vndr import VndrImporter

# Detection order
IMPORTER_TYPES: Dict[str, Type[Importer]] = {
    "glide": GlideImporter,
    "godep": GodepImporter,
    "vndr": VndrImporter,
}


def create_importers(
    provider: SourceProvider,
    logger: Optional[logging.Logger] = None,
    verbose: bool = False,
    names: Optional[Sequence[str]] = None,
) -> List[Importer]:
    """
    Instantiate importers in detection order.

    Args:
        provider: Source provider shared by all importers.
        logger: Optional logger shared by all importers.
        verbose: Whether importers log progress at INFO level.
        names: Restrict to these importer names.

    Returns:
        List of importers.

    Raises:
        ValueError: If a requested name is unknown.
    """
    selected = list(IMPORTER_TYPES) if names is None else list(names)
    unknown = [n for n in selected if n not in IMPORTER_TYPES]
    if unknown:
        raise ValueError(f"Unknown importer(s): {', '.join(unknown)}")
    return [IMPORTER_TYPES[n](provider, logger=logger, verbose=verbose) for n in selected]


def find_importer(project_dir: Path, importers: Sequence[Importer]) -> Optional[Importer]:
    """
    Pick the first importer whose metadata exists in `project_dir`.

    Args:
        project_dir: Directory to inspect.
        importers: Candidates in priority order.

    Returns:
        The matching importer, or None if no legacy metadata is present.
    """
    for importer in importers:
        if importer.detect(Path(project_dir)):
            return importer
    return None


__all__ = [
    "IMPORTER_TYPES",
    "ImportConfig",
    "Importer",
    "ImporterLoadError",
    "GlideImporter",
    "GodepImporter",
    "VndrImporter",
    "create_importers",
    "find_importer",
]
