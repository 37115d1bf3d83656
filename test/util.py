# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of GitFollow, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import hashlib
import types

import pygit2
import pytest
from pygit2.enums import FileMode

from gitfollow.porcelain import *

TEST_SIGNATURE = Signature("Test Person", "toto@example.com", 1672600000, 0)


def mockOid(name: str) -> Oid:
    assert len(name) <= 20
    return Oid(hex=name.encode().hex().ljust(40, "0"))


# -----------------------------------------------------------------------------
# Real repositories

class RepoBuilder:
    """
    Create commits with pygit2 in a fresh repository.

    Every commit is a full snapshot of the files in its tree (path -> text).
    Each new commit is stamped one minute after the previous one.
    """

    repo: Repo
    clock: int
    snapshots: dict[Oid, dict[str, str]]

    def __init__(self, path: str):
        self.repo = pygit2.init_repository(path, initial_head="master")
        self.clock = TEST_SIGNATURE.time
        self.snapshots = {}

    def nextSignature(self) -> Signature:
        self.clock += 60
        return Signature(TEST_SIGNATURE.name, TEST_SIGNATURE.email, self.clock, 0)

    def tip(self, branch: str = "master") -> Commit | None:
        ref = self.repo.references.get(f"refs/heads/{branch}")
        if ref is None:
            return None
        return ref.peel(Commit)

    def files(self, branch: str = "master") -> dict[str, str]:
        tip = self.tip(branch)
        if tip is None:
            return {}
        return dict(self.snapshots[tip.id])

    def writeTree(self, files: dict[str, str]) -> Oid:
        index = pygit2.Index()
        for path, text in files.items():
            blobId = self.repo.create_blob(text.encode("utf-8"))
            index.add(pygit2.IndexEntry(path, blobId, FileMode.BLOB))
        return index.write_tree(self.repo)

    def commit(
            self,
            files: dict[str, str],
            message: str = "",
            branch: str = "master",
            parents: list[Commit] | None = None,
    ) -> Commit:
        if parents is None:
            tip = self.tip(branch)
            parents = [tip] if tip is not None else []

        treeId = self.writeTree(files)
        signature = self.nextSignature()
        oid = self.repo.create_commit(None, signature, signature, message or "Commit",
                                      treeId, [p.id for p in parents])
        self.repo.references.create(f"refs/heads/{branch}", oid, force=True)
        self.snapshots[oid] = dict(files)
        return self.repo[oid].peel(Commit)

    def change(self, path: str, text: str, message: str = "", branch: str = "master") -> Commit:
        files = self.files(branch)
        files[path] = text
        return self.commit(files, message or f"Changed {path}", branch)

    def move(self, oldPath: str, newPath: str, text: str = "", message: str = "", branch: str = "master") -> Commit:
        files = self.files(branch)
        oldText = files.pop(oldPath)
        files[newPath] = text or oldText
        return self.commit(files, message or f"Moved {oldPath} to {newPath}", branch)

    def branch(self, name: str, fromBranch: str = "master"):
        self.repo.references.create(f"refs/heads/{name}", self.tip(fromBranch).id, force=True)

    def merge(self, branch: str, into: str = "master", files: dict[str, str] | None = None, message: str = "") -> Commit:
        ours = self.tip(into)
        theirs = self.tip(branch)
        if files is None:
            files = self.files(into)
        return self.commit(files, message or f"Merge {branch} into {into}", into, parents=[ours, theirs])


def longText(seed: str, numLines: int = 40) -> str:
    """ Text that is long enough for libgit2 to detect inexact renames. """
    return "".join(f"{seed} line {i:03} lorem ipsum dolor sit amet\n" for i in range(numLines))


# -----------------------------------------------------------------------------
# Mock commit graphs

class MockBlob:
    type = ObjectType.BLOB

    def __init__(self, data: str):
        self.data = data.encode()
        realHash = hashlib.sha1(f'blob {len(self.data)}'.encode() + b'\0' + self.data)
        self.id = Oid(hex=realHash.hexdigest())


class MockSubtree:
    type = ObjectType.TREE

    def __init__(self, name: str):
        self.id = mockOid("tree" + name)


class MockTree(dict):
    def diff_to_tree(self, newTree: MockTree, *args):
        assert not args
        return MockDiff(self, newTree)


class MockDiff:
    """ Only detects exact renames (same blob under another path). """

    def __init__(self, oldTree: MockTree, newTree: MockTree):
        self.deltas = []
        for path in sorted(set(oldTree) | set(newTree)):
            if path not in newTree:
                self._addDelta(DeltaStatus.DELETED, path, path, oldTree[path].id)
            elif path not in oldTree:
                self._addDelta(DeltaStatus.ADDED, path, path, newTree[path].id)
            elif oldTree[path].id != newTree[path].id:
                self._addDelta(DeltaStatus.MODIFIED, path, path, newTree[path].id)

    def _addDelta(self, status, oldPath, newPath, blobId):
        self.deltas.append(types.SimpleNamespace(
            status=status,
            old_file=types.SimpleNamespace(path=oldPath, id=blobId),
            new_file=types.SimpleNamespace(path=newPath, id=blobId)))

    def find_similar(self, flags=None):
        assert flags == DiffFind.FIND_RENAMES
        deleted = [d for d in self.deltas if d.status == DeltaStatus.DELETED]
        for delta in list(self.deltas):
            if delta.status != DeltaStatus.ADDED:
                continue
            for source in deleted:
                if source.old_file.id == delta.new_file.id:
                    delta.status = DeltaStatus.RENAMED
                    delta.old_file = source.old_file
                    deleted.remove(source)
                    self.deltas.remove(source)
                    break


class MockCommit:
    def __init__(self, name: str):
        self.name = name
        self.id = mockOid(name)
        self.parents: list[MockCommit] = []
        self.tree = MockTree()
        self.commit_time = 0

    def __repr__(self):
        return f"MockCommit({self.name})"


def parseGraph(definition: str) -> list[MockCommit]:
    """
    Build a commit graph from a compact text definition, newest commits first.

    "a-b-c" chains commits along their first parents (c is a root commit).
    "m:x,y" gives commit m explicit parents x and y, which must be defined
    further down. Commit times decrease along the definition.
    """
    commits: dict[str, MockCommit] = {}
    sequence: list[MockCommit] = []

    def getCommit(name):
        try:
            return commits[name]
        except KeyError:
            commit = MockCommit(name)
            commits[name] = commit
            return commit

    for token in definition.split():
        chain, _, explicitParents = token.partition(":")
        names = chain.split("-")
        for i, name in enumerate(names):
            commit = getCommit(name)
            assert commit not in sequence, f"commit {name} defined twice"
            sequence.append(commit)
            if i < len(names) - 1:
                commit.parents = [getCommit(names[i + 1])]
            elif explicitParents:
                commit.parents = [getCommit(p) for p in explicitParents.split(",")]

    assert len(sequence) == len(commits), "some parents are never defined"

    for i, commit in enumerate(sequence):
        commit.commit_time = TEST_SIGNATURE.time + 60 * (len(sequence) - i)

    return sequence


def fillTrees(sequence: list[MockCommit], path: str, blobDefs: str):
    """
    Put a blob at `path` in each commit's tree.
    An underscore means that the path does not exist in that commit.
    """
    for commit, blobText in zip(sequence, blobDefs.split(), strict=True):
        if blobText != "_":
            commit.tree[path] = MockBlob(blobText)


def namesOf(entries) -> list[str]:
    return [entry.commit.name for entry in entries]


class MockWalker:
    def __init__(self, repo: MockRepo, sortMode: SortMode):
        self.repo = repo
        self.sortMode = sortMode
        self.pushed: list[Oid] = []
        self.hidden: list[Oid] = []
        self.firstParentOnly = False

    def push(self, oid: Oid):
        self.pushed.append(oid)

    def hide(self, oid: Oid):
        self.hidden.append(oid)

    def simplify_first_parent(self):
        self.firstParentOnly = True

    def _reachable(self, oids: list[Oid], firstParentOnly: bool) -> set[Oid]:
        seen = set()
        frontier = [self.repo.lookup(oid) for oid in oids]
        while frontier:
            commit = frontier.pop()
            if commit.id in seen:
                continue
            seen.add(commit.id)
            frontier.extend(commit.parents[:1] if firstParentOnly else commit.parents)
        return seen

    def __iter__(self):
        self.repo.walks.append(self)
        reachable = self._reachable(self.pushed, self.firstParentOnly)
        hidden = self._reachable(self.hidden, False)
        commits = [c for c in self.repo.sequence if c.id in reachable and c.id not in hidden]
        if self.sortMode & SortMode.TIME:
            commits.sort(key=lambda c: c.commit_time, reverse=True)
        for commit in commits:
            self.repo.numWalked += 1
            yield commit


class MockRepo:
    """ Just enough of a repository for porcelain.queryCommits. """

    def __init__(self, sequence: list[MockCommit]):
        self.sequence = sequence
        self.walks: list[MockWalker] = []
        self.numWalked = 0

    @property
    def head_is_unborn(self):
        return not self.sequence

    @property
    def head(self):
        return types.SimpleNamespace(target=self.sequence[0].id)

    def lookup(self, oid: Oid) -> MockCommit:
        return next(c for c in self.sequence if c.id == oid)

    def walk(self, oid, sortMode):
        assert oid is None
        return MockWalker(self, sortMode)


class ForbiddenRepo:
    """ Fails the test if anything touches the repository. """

    def __getattr__(self, name):
        pytest.fail(f"repository accessed: {name}")
