from dataclasses import dataclass
import enum
from typing import Optional


class EntryType(enum.Enum):
    FILE = enum.auto()
    DIRECTORY = enum.auto()
    SYMLINK = enum.auto()
    OTHER = enum.auto()


@dataclass(frozen=True, slots=True)
class ScanConfig:
    root: str = "."
    hidden: bool = False
    git_ignore: bool = True
    git_global: bool = True
    git_exclude: bool = True
    dot_ignore: bool = True
    follow_links: bool = False
    max_depth: Optional[int] = None
    threads: Optional[int] = None

    def __post_init__(self):
        if (self.max_depth or 0) < 0:
            raise ValueError("Negative values for max_depth make no sense")
        if (self.threads or 0) < 0:
            raise ValueError("Negative values for threads argument make no sense")

    @property
    def honor_ignore_rules(self) -> bool:
        return self.git_ignore or self.git_global or self.git_exclude or self.dot_ignore
