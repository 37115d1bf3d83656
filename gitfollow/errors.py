# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of GitFollow, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

class MissingArgument(ValueError):
    """ A required argument was None. """

    def __init__(self, argName: str):
        super().__init__(f"missing argument: {argName}")
        self.argName = argName


class InvalidConfiguration(ValueError):
    """ A CommitFilter uses a sort mode that can't be used to follow a file. """

    def __init__(self, sortBy):
        name = getattr(sortBy, "name", None) or repr(sortBy)
        super().__init__(f"unsupported commit sort mode: {name}")
        self.sortBy = sortBy
