class SrchError(Exception):
    """Base class for errors that abort a search before it starts."""


class PatternError(SrchError):
    """The search expression could not be compiled."""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid search pattern '{pattern}': {reason}")


class RootPathError(SrchError):
    """The tree-mode root does not exist or is not a directory."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Folder not found: {path}")
