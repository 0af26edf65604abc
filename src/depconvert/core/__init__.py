"""
depconvert Core Module.

This package contains the building blocks for converting legacy Go
dependency metadata:

Types:
    - ImportRecord: One entry read from a legacy file
    - Manifest, Lock, LockedProject: Conversion output

Versions:
    - PairedVersion, UnpairedVersion, Revision: Lockable versions
    - sort_for_upgrade: Deterministic version ordering

Conversion:
    - SourceProvider, GitSourceProvider: Repository metadata
    - PathNormalizer: Import path -> project root
    - VersionResolver: Revision + label -> constraint + lock version
    - Converter: Orchestrates a full conversion
"""

from .converter import (
    ConversionResult,
    Converter,
    EmptyImportPathError,
    EmptyRevisionError,
    StructuralError,
)
from .resolver import Resolution, VersionResolver
from .roots import PathNormalizer, RootUnresolvableError
from .source import GitSourceProvider, SourceError, SourceProvider
from .types import ImportRecord, Lock, LockedProject, Manifest, ProjectRoot
from .versions import (
    KnownVersion,
    PairedVersion,
    Revision,
    UnpairedVersion,
    VersionKind,
    new_branch,
    new_tag,
    parse_semver,
    sort_for_upgrade,
)

__all__ = [
    # Types
    "ImportRecord",
    "Lock",
    "LockedProject",
    "Manifest",
    "ProjectRoot",
    # Versions
    "KnownVersion",
    "PairedVersion",
    "Revision",
    "UnpairedVersion",
    "VersionKind",
    "new_branch",
    "new_tag",
    "parse_semver",
    "sort_for_upgrade",
    # Sources
    "GitSourceProvider",
    "SourceError",
    "SourceProvider",
    # Conversion
    "PathNormalizer",
    "RootUnresolvableError",
    "Resolution",
    "VersionResolver",
    "ConversionResult",
    "Converter",
    "StructuralError",
    "EmptyImportPathError",
    "EmptyRevisionError",
]
