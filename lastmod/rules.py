import enum
from typing import Optional

from lastmod.config import ScanConfig
from lastmod.fs import Entry
from lastmod.ignore import IgnoreRuleSet


class Decision(enum.Enum):
    # consider the entry: read a file's timestamp, enumerate a directory
    DESCEND = enum.auto()
    SKIP = enum.auto()
    SKIP_SUBTREE = enum.auto()


def _skip(entry:Entry) -> Decision:
    return Decision.SKIP_SUBTREE if entry.is_dir else Decision.SKIP


def is_hidden(name:str) -> bool:
    return name.startswith(".")


def within_depth(entry:Entry, max_depth:Optional[int]) -> bool:
    # max_depth counts levels below the root, so 1 allows only the root's
    # immediate contents (entry depth 0). entry depths themselves start
    # at 0, hence the strict comparisons.
    if max_depth is None:
        return True
    if entry.is_dir:
        # there's no point enumerating a directory whose children would
        # all be beyond the limit
        return entry.depth + 1 < max_depth
    return entry.depth < max_depth


def accept(
    entry:Entry,
    rules:Optional[IgnoreRuleSet],
    config:ScanConfig,
) -> Decision:
    if not within_depth(entry, config.max_depth):
        return _skip(entry)

    if not config.hidden and is_hidden(entry.name):
        return _skip(entry)

    if rules and rules.is_ignored(entry.path, entry.is_dir):
        return _skip(entry)

    return Decision.DESCEND
