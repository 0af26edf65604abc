"""
Shared fixtures.

`FakeSourceProvider` stands in for `git ls-remote` with a fixed set of
repositories, and counts queries so tests can check memoization.
"""

from collections import Counter

import pytest

from depconvert.core.source import SourceError
from depconvert.core.versions import new_branch, new_tag

DEPTEST = "github.com/sdboyer/deptest"
DEPTESTDOS = "github.com/sdboyer/deptestdos"

# deptest: v1.0.0 and v0.8.0 were tagged on the same commit
DEPTEST_V1_REV = "ff2948a2ac8f538c4ecd55962e919d1e13e74baf"
DEPTEST_MASTER_REV = "3f4c3bea144e112a69bbe5d8d01c1b09a544253f"
DEPTESTDOS_V2_REV = "5c607206be5decd28e6263ffffdcee067266015e"
DEPTESTDOS_MASTER_REV = "a0196baa11ea047dd65037287451d36b861b00ea"
UNKNOWN_REV = "0000000000000000000000000000000000000000"


def default_repositories():
    return {
        DEPTEST: [
            new_branch("master", DEPTEST_MASTER_REV, is_default=True),
            new_tag("v0.8.0", DEPTEST_V1_REV),
            new_tag("v0.8.1", DEPTEST_MASTER_REV),
            new_tag("v1.0.0", DEPTEST_V1_REV),
        ],
        DEPTESTDOS: [
            new_branch("master", DEPTESTDOS_MASTER_REV, is_default=True),
            new_tag("v2.0.0", DEPTESTDOS_V2_REV),
        ],
    }


class FakeSourceProvider:
    """In-memory source provider."""

    def __init__(self, repositories=None):
        self.repositories = default_repositories() if repositories is None else repositories
        self.list_calls = Counter()
        self.exists_calls = Counter()

    def list_versions(self, root):
        self.list_calls[root] += 1
        if root not in self.repositories:
            raise SourceError(f"repository not found: {root}")
        return list(self.repositories[root])

    def source_exists(self, root):
        self.exists_calls[root] += 1
        return root in self.repositories


@pytest.fixture
def provider():
    return FakeSourceProvider()
