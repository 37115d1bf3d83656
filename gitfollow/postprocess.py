# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of GitFollow, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
Filters that can be chained after a FileHistory.

Like FileHistory, each filter can be iterated over several times. Every pass
iterates over the upstream history anew.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from gitfollow.filehistory import FileHistoryEntry
from gitfollow.porcelain import *


class ExcludeRenames:
    """
    Filter a file's history by excluding earlier periods during which the file
    had a different path.

    Stops pulling entries from the history as soon as the path changes.
    """

    def __init__(self, history: Iterable[FileHistoryEntry]):
        self._history = history

    def __iter__(self) -> Iterator[FileHistoryEntry]:
        return _ExcludeRenamesPass(iter(self._history))


class _ExcludeRenamesPass:
    def __init__(self, upstream: Iterator[FileHistoryEntry]):
        self._upstream = upstream
        self._lastPath: str | None = None
        self._done = False

    def __iter__(self):
        return self

    def __next__(self) -> FileHistoryEntry:
        if self._done:
            raise StopIteration

        try:
            entry = next(self._upstream)
        except StopIteration:
            self._done = True
            raise

        if self._lastPath is not None and entry.path != self._lastPath:
            self._done = True
            raise StopIteration

        self._lastPath = entry.path
        return entry


class ChangedBlobs:
    """
    Blobs that are new or modified along a file's history.

    Consecutive entries that point to the same blob (e.g. a commit that only
    renamed the file) are collapsed into a single blob. Entries whose path
    doesn't point to a blob are skipped.
    """

    def __init__(self, history: Iterable[FileHistoryEntry]):
        self._history = history

    def __iter__(self) -> Iterator[Blob]:
        return _ChangedBlobsPass(iter(self._history))


class _ChangedBlobsPass:
    def __init__(self, upstream: Iterator[FileHistoryEntry]):
        self._upstream = upstream
        self._lastBlobId = NULL_OID

    def __iter__(self):
        return self

    def __next__(self) -> Blob:
        for entry in self._upstream:
            obj = resolveEntry(entry.commit.tree, entry.path)
            if obj is None or obj.type != ObjectType.BLOB:
                continue
            if obj.id == self._lastBlobId:
                continue
            self._lastBlobId = obj.id
            return obj
        raise StopIteration


def excludeRenames(history: Iterable[FileHistoryEntry]) -> ExcludeRenames:
    return ExcludeRenames(history)


def changedBlobs(history: Iterable[FileHistoryEntry]) -> ChangedBlobs:
    return ChangedBlobs(history)
