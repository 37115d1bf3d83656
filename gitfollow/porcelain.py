# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of GitFollow, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
The subset of pygit2 that GitFollow builds upon, plus a few helpers that
look up paths in trees, diff trees and walk commits.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterator

from pygit2 import (
    Blob,
    Commit,
    Object,
    Oid,
    Reference,
    Repository,
    Signature,
    Tree,
    discover_repository,
)
from pygit2.enums import (
    DeltaStatus,
    DiffFind,
    ObjectType,
    SortMode,
)

Repo = Repository

NULL_OID = Oid(hex="0" * 40)

__all__ = [
    "Blob",
    "Commit",
    "DeltaStatus",
    "DiffFind",
    "NULL_OID",
    "Object",
    "ObjectType",
    "Oid",
    "Reference",
    "Repo",
    "Signature",
    "SortMode",
    "Tree",
    "TreeChanges",
    "TreeEntryChange",
    "diffTrees",
    "discover_repository",
    "id7",
    "parentsOf",
    "queryCommits",
    "resolveCommitIds",
    "resolveEntry",
]


def id7(obj: Oid | Object | str) -> str:
    """ Abbreviated hash of an Oid or of an object that has an id. """
    oid = getattr(obj, "id", obj)
    return str(oid)[:7]


def resolveEntry(tree: Tree, path: str) -> Object | None:
    """
    Look up a slash-separated path in a tree.
    Return None if the path isn't in the tree.
    """
    if not path:
        return None
    try:
        return tree[path]
    except KeyError:
        return None


def parentsOf(commit: Commit) -> list[Commit]:
    return commit.parents


@dataclasses.dataclass(frozen=True)
class TreeEntryChange:
    status: DeltaStatus
    path: str
    oldPath: str


class TreeChanges:
    """
    Changes between two trees, looked up by their path in the newer tree.
    """

    def __init__(self, deltas):
        self._byPath: dict[str, TreeEntryChange] = {}

        for delta in deltas:
            change = TreeEntryChange(DeltaStatus(delta.status), delta.new_file.path, delta.old_file.path)
            # A renamed delta may share its new path with another delta (e.g. a deletion); keep the rename.
            if change.path not in self._byPath or change.status == DeltaStatus.RENAMED:
                self._byPath[change.path] = change

    def __getitem__(self, path: str) -> TreeEntryChange | None:
        return self._byPath.get(path, None)

    def __contains__(self, path: str):
        return path in self._byPath

    def __len__(self):
        return len(self._byPath)

    def __iter__(self):
        return iter(self._byPath.values())


def diffTrees(oldTree: Tree, newTree: Tree) -> TreeChanges:
    """
    Compare two trees with rename detection (copies are not detected).
    """
    diff = oldTree.diff_to_tree(newTree)
    diff.find_similar(DiffFind.FIND_RENAMES)
    return TreeChanges(diff.deltas)


def resolveCommitIds(repo: Repo, spec) -> list[Oid]:
    """
    Turn a commit specification into a list of commit ids.

    `spec` may be None (empty list), an Oid, a revision string ("HEAD~2",
    "master", "v1.0"...), a Reference, any pygit2 Object that peels to a
    commit, or a list/tuple/set of the above.
    """
    if spec is None:
        return []

    if isinstance(spec, (list, tuple, set)):
        return [oid for item in spec for oid in resolveCommitIds(repo, item)]

    if isinstance(spec, Oid):
        return [spec]

    if isinstance(spec, str):
        return [repo.revparse_single(spec).peel(Commit).id]

    if isinstance(spec, Reference) or (isinstance(spec, Object) and not isinstance(spec, Commit)):
        return [spec.peel(Commit).id]

    return [spec.id]


def queryCommits(repo: Repo, commitFilter) -> Iterator[Commit]:
    """
    Walk the commits selected by a CommitFilter, in the filter's sort order.

    The walk starts at `commitFilter.since`, or at HEAD if `since` is None.
    An unborn HEAD (empty repository) yields no commits.
    """
    if commitFilter.since is None:
        if repo.head_is_unborn:
            return iter(())
        startIds = [repo.head.target]
    else:
        startIds = resolveCommitIds(repo, commitFilter.since)

    walker = repo.walk(None, commitFilter.sortBy)

    for oid in startIds:
        walker.push(oid)

    for oid in resolveCommitIds(repo, commitFilter.until):
        walker.hide(oid)

    if commitFilter.firstParentOnly:
        walker.simplify_first_parent()

    return walker
