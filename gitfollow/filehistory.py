# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of GitFollow, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterator

from gitfollow.appconsts import *
from gitfollow.commitfilter import CommitFilter, validateCommitFilter
from gitfollow.errors import MissingArgument
from gitfollow.porcelain import *

_logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class FileHistoryEntry:
    """ An entry in a file's commit history. """

    path: str
    "The file's path relative to the repository's root, as of this commit."

    commit: Commit
    "The commit in which the file was created, changed, or renamed."

    def __repr__(self):
        return f"({id7(self.commit)},{self.path})"


class FileHistory:
    """
    A file's history of commits in which that file was created, modified, or
    renamed (as in `git log --follow`).

    Nothing is read from the repository until the history is iterated over.
    Each iteration walks the repository anew.

    CAVEAT: Merge commits are never part of the history, even if the merge
    resolution changed the file. Renames are only followed through commits
    that have a single parent.
    """

    repo: Repo
    path: str
    commitFilter: CommitFilter

    def __init__(self, repo: Repo, path: str, commitFilter: CommitFilter):
        if repo is None:
            raise MissingArgument("repo")
        if path is None:
            raise MissingArgument("path")
        if commitFilter is None:
            raise MissingArgument("commitFilter")

        validateCommitFilter(commitFilter)

        self.repo = repo
        self.path = path
        self.commitFilter = commitFilter

    def __iter__(self) -> Iterator[FileHistoryEntry]:
        return self.fullHistory()

    def __repr__(self):
        return f"FileHistory({self.path!r}, {self.commitFilter})"

    def fullHistory(self) -> Iterator[FileHistoryEntry]:
        """
        Yield the commits in which the file was created, changed, or renamed,
        then keep following the file under its previous name if the oldest
        commit found so far has renamed it.
        """
        path = self.path
        commitFilter = self.commitFilter

        while True:
            lastCommit = None
            for entry in self.partialHistory(path, commitFilter):
                lastCommit = entry.commit
                yield entry

            if lastCommit is None:
                return

            # Only follow renames through commits that have a single parent.
            parents = parentsOf(lastCommit)
            if len(parents) != 1:
                return
            parentCommit = parents[0]

            change = diffTrees(parentCommit.tree, lastCommit.tree)[path]
            if change is None or change.status != DeltaStatus.RENAMED:
                return

            _logger.debug(f"Following rename {change.oldPath} -> {path} at {id7(lastCommit)}")

            if APP_DEBUG:
                assert resolveEntry(parentCommit.tree, change.oldPath) is not None, \
                    f"{change.oldPath} missing from parent of {id7(lastCommit)}"

            path = change.oldPath
            commitFilter = commitFilter.derive(since=parentCommit)

    def partialHistory(self, path: str, commitFilter: CommitFilter) -> Iterator[FileHistoryEntry]:
        """
        Yield the commits in which the file was created or changed under
        the given path. Stop walking at the first commit that lacks the path.
        """
        numVisited = 0
        numRelevant = 0

        for commit in queryCommits(self.repo, commitFilter):
            treeEntry = resolveEntry(commit.tree, path)
            if treeEntry is None:
                break

            numVisited += 1

            if _isNewOrChanged(commit, path, treeEntry.id):
                if APP_DEBUG:
                    assert resolveEntry(commit.tree, path) is not None, f"{path} missing from {id7(commit)}"
                numRelevant += 1
                yield FileHistoryEntry(path, commit)

        _logger.debug(f"{path}: {numVisited} commits visited, {numRelevant} were relevant")


def _isNewOrChanged(commit: Commit, path: str, objectId: Oid) -> bool:
    parents = parentsOf(commit)

    # Root commit: the file was introduced here
    if not parents:
        return True

    # Merge commits are pass-through points
    if len(parents) > 1:
        return False

    parentEntry = resolveEntry(parents[0].tree, path)
    return parentEntry is None or parentEntry.id != objectId


def followFile(repo: Repo, path: str, commitFilter: CommitFilter | None = None) -> FileHistory:
    """
    Get the history of the file at `path`, including renames.

    `commitFilter` specifies the sort mode and the range of commits to
    consider. Only SortMode.TIME (the default) and SortMode.TOPOLOGICAL are
    supported.

    Raises MissingArgument if `repo` or `path` is None, and
    InvalidConfiguration if the filter's sort mode is unsupported.
    """
    if commitFilter is None:
        commitFilter = CommitFilter()
    return FileHistory(repo, path, commitFilter)
