# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of GitFollow, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import dataclasses
from typing import Any

from gitfollow.errors import InvalidConfiguration
from gitfollow.porcelain import SortMode

ALLOWED_SORT_MODES = (SortMode.TOPOLOGICAL, SortMode.TIME)
"""
Sort modes that make sense when following a file:
TIME corresponds to `git log --date-order`, TOPOLOGICAL to `git log --topo-order`.
"""


@dataclasses.dataclass(frozen=True)
class CommitFilter:
    """
    Range and order of the commits to consider when walking a repository.

    `since` and `until` accept anything that `porcelain.resolveCommitIds`
    understands (commit, Oid, revision string, or a list of those).
    """

    sortBy: SortMode = SortMode.TIME

    since: Any = None
    "Walk starts here. None means HEAD."

    until: Any = None
    "Commits reachable from here are hidden from the walk. None means no boundary."

    firstParentOnly: bool = False

    def derive(self, since) -> CommitFilter:
        """ Copy this filter, starting the walk at another commit. """
        return dataclasses.replace(self, since=since)


def validateCommitFilter(commitFilter: CommitFilter):
    sortBy = commitFilter.sortBy
    if isinstance(sortBy, bool) or sortBy not in ALLOWED_SORT_MODES:
        raise InvalidConfiguration(sortBy)
