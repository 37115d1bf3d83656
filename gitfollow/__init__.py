# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of GitFollow, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
Follow a file's history across renames, as in `git log --follow`.

CAVEAT: Merge commits are transparent; a file's content introduced by a merge
resolution does not show up as a separate history entry.
"""

from gitfollow.commitfilter import (
    ALLOWED_SORT_MODES,
    CommitFilter,
    validateCommitFilter,
)
from gitfollow.errors import (
    InvalidConfiguration,
    MissingArgument,
)
from gitfollow.filehistory import (
    FileHistory,
    FileHistoryEntry,
    followFile,
)
from gitfollow.postprocess import (
    ChangedBlobs,
    ExcludeRenames,
    changedBlobs,
    excludeRenames,
)
