# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of GitFollow, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations as _annotations

import logging as _logging
import os as _os
import sys as _sys
from contextlib import suppress
from pathlib import Path

from gitfollow import *
from gitfollow.appconsts import APP_DISPLAY_NAME, APP_VERSION
from gitfollow.porcelain import *
from gitfollow.toolbox.benchmark import BENCHMARK_LOGGING_LEVEL, Benchmark


def followCommandLineTool(argv: list[str] | None = None):
    from argparse import ArgumentParser

    parser = ArgumentParser(description=f"{APP_DISPLAY_NAME}: a file's history, including renames")
    parser.add_argument("--version", action="version", version=f"{APP_DISPLAY_NAME} {APP_VERSION}")
    parser.add_argument("path", help="File path")
    parser.add_argument("-r", "--repo", action="store", default="", help="Repository (discovered from the file's location by default)")
    parser.add_argument("-t", "--topo", action="store_true", help="Topological order (--topo-order) instead of commit date order")
    parser.add_argument("-1", "--first-parent", action="store_true", help="Follow only the first parent of merge commits")
    parser.add_argument("--since", action="store", default=None, help="Start walking from this revision (HEAD by default)")
    parser.add_argument("--until", action="store", default=None, help="Hide commits reachable from this revision")
    parser.add_argument("-x", "--exclude-renames", action="store_true", help="Stop at the first rename")
    parser.add_argument("-c", "--changed-blobs", action="store_true", help="Print blobs instead of commits")
    parser.add_argument("-b", "--benchmark", action="store_true", help="Benchmark mode")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    level = _logging.WARNING
    if args.verbose:
        level = _logging.DEBUG
    if args.benchmark:
        level = BENCHMARK_LOGGING_LEVEL
    _logging.basicConfig(stream=_sys.stderr, level=level,
                         format='%(levelname).1s %(asctime)s %(filename)-16s | %(message)s',
                         datefmt="%H:%M:%S")
    _logging.captureWarnings(True)

    repoPath = args.repo or discover_repository(_os.path.dirname(_os.path.abspath(args.path)))
    if not repoPath:
        parser.error(f"not in a git repository: {args.path}")
    repo = Repo(repoPath)

    relPath = Path(args.path)
    if repo.workdir:
        with suppress(ValueError):
            relPath = Path(args.path).resolve().relative_to(Path(repo.workdir).resolve())

    commitFilter = CommitFilter(
        sortBy=SortMode.TOPOLOGICAL if args.topo else SortMode.TIME,
        since=args.since,
        until=args.until,
        firstParentOnly=args.first_parent,
    )

    history = followFile(repo, relPath.as_posix(), commitFilter)
    if args.exclude_renames:
        history = excludeRenames(history)

    with Benchmark("Follow") as bench:
        if args.changed_blobs:
            lines = [f"{id7(blob)} {blob.size:8,d} bytes" for blob in changedBlobs(history)]
        else:
            lines = [f"{id7(entry.commit)} {entry.path:30} {_summary(entry.commit)}" for entry in history]
        bench.tally(len(lines))

    for line in lines:
        print(line)


def _summary(commit: Commit) -> str:
    return commit.message.split("\n", 1)[0]


if __name__ == '__main__':
    followCommandLineTool()
