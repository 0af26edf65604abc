"""
Source Metadata Providers.

A source provider answers two questions about a repository: does it exist,
and which versions (tags and branches paired with revisions) does it have.
The converter only reads from a provider; the caller owns it.

`GitSourceProvider` answers both with `git ls-remote`, so no code is
fetched. Listings are cached per provider instance.
"""

from __future__ import annotations

import logging
import os
import subprocess
from typing import Dict, List, Optional, Protocol, runtime_checkable

from .. import config
from .versions import KnownVersion, new_branch, new_tag

logger = logging.getLogger(__name__)

PEELED_SUFFIX = "^{}"


class SourceError(Exception):
    """
    Raised when a source provider cannot answer a query.

    Attributes:
        message: Human-readable error message.
        stderr: Raw stderr output from the underlying tool, if any.
    """

    def __init__(self, message: str, stderr: str = ""):
        self.message = message
        self.stderr = stderr
        super().__init__(f"{message}: {stderr}" if stderr else message)


@runtime_checkable
class SourceProvider(Protocol):
    """The read-only interface the converter needs from a VCS metadata source."""

    def list_versions(self, root: str) -> List[KnownVersion]:
        """
        List every known version of a repository.

        Raises:
            SourceError: If the repository cannot be located or queried.
        """
        ...

    def source_exists(self, root: str) -> bool:
        """Check whether a repository lives at `root`."""
        ...


class GitSourceProvider:
    """
    Source provider backed by `git ls-remote`.

    Attributes:
        scheme: URL scheme used to turn a project root into a remote URL.
        timeout: Upper bound in seconds for each git call.
    """

    def __init__(
        self,
        scheme: str = config.DEFAULT_REMOTE_SCHEME,
        timeout: int = config.GIT_TIMEOUT_SECONDS,
    ):
        self.scheme = scheme
        self.timeout = timeout
        self._listings: Dict[str, List[KnownVersion]] = {}
        self._missing: Dict[str, SourceError] = {}

    def remote_url(self, root: str) -> str:
        """Build the remote URL for a project root."""
        return f"{self.scheme}://{root}"

    def _run_git(self, *args: str) -> str:
        """
        Run a git command and return stdout.

        Raises:
            SourceError: If the command fails or times out.
        """
        cmd = ["git"] + list(args)
        logger.debug(f"Running: {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=True,
                timeout=self.timeout,
                env={**os.environ, "GIT_TERMINAL_PROMPT": "0"},
            )
            return result.stdout.strip()
        except subprocess.CalledProcessError as e:
            raise SourceError(f"Git command failed: {' '.join(args)}", e.stderr.strip())
        except subprocess.TimeoutExpired:
            raise SourceError(f"Git command timed out: {' '.join(args)}")
        except FileNotFoundError:
            raise SourceError("git executable not found")

    def list_versions(self, root: str) -> List[KnownVersion]:
        """
        List tags and branches of the repository at `root`.

        Args:
            root: The project root, e.g. "github.com/sdboyer/deptest".

        Returns:
            Versions in the order git reported them.

        Raises:
            SourceError: If the remote cannot be listed.
        """
        if root in self._listings:
            return list(self._listings[root])
        if root in self._missing:
            raise self._missing[root]

        try:
            output = self._run_git("ls-remote", "--symref", self.remote_url(root))
        except SourceError as e:
            self._missing[root] = e
            raise

        versions = parse_ls_remote(output)
        self._listings[root] = versions
        return list(versions)

    def source_exists(self, root: str) -> bool:
        try:
            self.list_versions(root)
        except SourceError:
            return False
        return True


def parse_ls_remote(output: str) -> List[KnownVersion]:
    """
    Parse `git ls-remote --symref` output into known versions.

    Annotated tags are reported at the commit they point to. Refs other than
    tags and branches (pull requests, notes) are ignored.

    Args:
        output: Raw stdout from git.

    Returns:
        Branches and tags in the order they appear.
    """
    default_branch: Optional[str] = None
    tags: Dict[str, str] = {}
    peeled: Dict[str, str] = {}
    branches: Dict[str, str] = {}

    for line in output.splitlines():
        line = line.strip()
        if not line or "\t" not in line:
            continue
        left, ref = line.split("\t", 1)

        if left.startswith("ref: "):
            if ref == "HEAD":
                default_branch = left[len("ref: "):].removeprefix("refs/heads/")
            continue

        if ref.startswith("refs/heads/"):
            branches[ref.removeprefix("refs/heads/")] = left
        elif ref.startswith("refs/tags/"):
            name = ref.removeprefix("refs/tags/")
            if name.endswith(PEELED_SUFFIX):
                peeled[name[: -len(PEELED_SUFFIX)]] = left
            else:
                tags[name] = left

    versions: List[KnownVersion] = []
    for name, sha in branches.items():
        versions.append(new_branch(name, sha, is_default=(name == default_branch)))
    for name, sha in tags.items():
        versions.append(new_tag(name, peeled.get(name, sha)))
    return versions
