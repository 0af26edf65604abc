"""
Project Root Deduction.

Maps an import path to the shortest prefix that owns one repository, e.g.
"github.com/sdboyer/deptest/foo" -> "github.com/sdboyer/deptest".

Deduction Strategy:
    1. Memoized roots - a root found earlier is reused for its sub-packages
    2. Hosting conventions - github.com, gopkg.in, VCS suffixes, ...
    3. Provider probe - ask the source provider which prefix exists
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional

from .. import config
from .source import SourceError, SourceProvider

logger = logging.getLogger(__name__)

GOPKG_VERSION = re.compile(r"\.v\d+$")


class RootUnresolvableError(Exception):
    """
    Raised when no project root can be found for an import path.

    Attributes:
        import_path: The import path that could not be mapped.
        message: Human-readable error message.
    """

    def __init__(self, import_path: str, message: str):
        self.import_path = import_path
        self.message = message
        super().__init__(f"Cannot resolve project root for '{import_path}': {message}")


def clean_import_path(import_path: str) -> str:
    """Strip whitespace and surrounding slashes from an import path."""
    return import_path.strip().strip("/")


def is_within(path: str, root: str) -> bool:
    """Check if `path` equals `root` or lives under it on a "/" boundary."""
    return path == root or path.startswith(root + "/")


def root_from_conventions(import_path: str) -> Optional[str]:
    """
    Deduce a project root from well-known hosting conventions.

    Args:
        import_path: A cleaned import path.

    Returns:
        The project root, or None if no convention applies.
    """
    parts = import_path.split("/")

    # Explicit VCS suffix anywhere in the path names the repository
    for i, part in enumerate(parts):
        if any(part.endswith(suffix) for suffix in config.VCS_SUFFIXES) and i > 0:
            return "/".join(parts[: i + 1])

    host = parts[0]

    depth = config.FIXED_DEPTH_HOSTS.get(host)
    if depth is not None:
        if len(parts) < depth:
            return None
        return "/".join(parts[:depth])

    for prefix, depth in config.FIXED_PREFIX_ROOTS.items():
        if is_within(import_path, prefix):
            if len(parts) < depth:
                return None
            return "/".join(parts[:depth])

    if host == config.GOPKG_HOST:
        # gopkg.in/pkg.v1 or gopkg.in/user/pkg.v1
        for i, part in enumerate(parts[1:3], start=1):
            if GOPKG_VERSION.search(part):
                return "/".join(parts[: i + 1])
        return None

    return None


class PathNormalizer:
    """
    Deduces and memoizes project roots for import paths.

    One instance is meant to live for a single conversion run.

    Attributes:
        provider: Source provider used to probe unknown hosts.
    """

    def __init__(self, provider: SourceProvider):
        self.provider = provider
        self._by_path: Dict[str, str] = {}
        self._roots: List[str] = []

    @property
    def known_roots(self) -> List[str]:
        """Roots deduced so far, in discovery order."""
        return list(self._roots)

    def normalize(self, import_path: str) -> str:
        """
        Map an import path to its project root.

        Args:
            import_path: Any package path inside a repository.

        Returns:
            The project root.

        Raises:
            RootUnresolvableError: If no root can be deduced.
        """
        path = clean_import_path(import_path)
        if not path:
            raise RootUnresolvableError(import_path, "empty import path")

        if path in self._by_path:
            return self._by_path[path]

        root = self._memoized_root(path)
        if root is None:
            root = root_from_conventions(path)
        if root is None:
            root = self._probe(path)

        self._remember(path, root)
        return root

    def _memoized_root(self, path: str) -> Optional[str]:
        for root in self._roots:
            if is_within(path, root):
                return root
        return None

    def _probe(self, path: str) -> str:
        """Find the shortest prefix the provider knows about."""
        parts = path.split("/")
        if "." not in parts[0]:
            raise RootUnresolvableError(path, "import path has no host")

        for i in range(2, len(parts) + 1):
            candidate = "/".join(parts[:i])
            logger.debug(f"Probing {candidate} for {path}")
            try:
                if self.provider.source_exists(candidate):
                    return candidate
            except SourceError as e:
                raise RootUnresolvableError(path, e.message)

        raise RootUnresolvableError(path, "no repository found at any prefix")

    def _remember(self, path: str, root: str) -> None:
        self._by_path[path] = root
        if root not in self._roots:
            self._roots.append(root)
