import dataclasses


@dataclasses.dataclass(frozen=True)
class SearchSpec:
    """
    Options for one search run. Built once from the command line and
    configuration, read-only afterwards.

    Inverted matching selects the lines that do not match, so surrounding
    context has no meaning there: both context counts are forced to 0.
    """
    pattern: str
    case_insensitive: bool = False
    invert: bool = False
    before_context: int = 0
    after_context: int = 0
    file_names_only: bool = False

    def __post_init__(self):
        if self.before_context < 0 or self.after_context < 0:
            raise ValueError(
                f"Context counts cannot be negative (before={self.before_context}, after={self.after_context})")
        if self.invert:
            object.__setattr__(self, "before_context", 0)
            object.__setattr__(self, "after_context", 0)

    @property
    def has_context(self) -> bool:
        return self.before_context > 0 or self.after_context > 0
