import pytest

from lastmod.config import EntryType, ScanConfig
from lastmod.fs import Entry
from lastmod.ignore import IgnoreRuleSet
from lastmod.rules import Decision, accept, within_depth


def _entry(name, entry_type=EntryType.FILE, depth=0, parent="/r"):
    return Entry(f"{parent}/{name}", name, entry_type, depth)


@pytest.mark.parametrize("hidden", (False, True))
@pytest.mark.parametrize("entry_type,skip_decision", (
    (EntryType.FILE, Decision.SKIP),
    (EntryType.SYMLINK, Decision.SKIP),
    (EntryType.OTHER, Decision.SKIP),
    (EntryType.DIRECTORY, Decision.SKIP_SUBTREE),
))
def test_hidden(hidden, entry_type, skip_decision):
    config = ScanConfig(hidden=hidden)

    assert accept(_entry(".secret", entry_type), None, config) is (
        Decision.DESCEND if hidden else skip_decision
    )
    assert accept(_entry("public", entry_type), None, config) is Decision.DESCEND


@pytest.mark.parametrize("max_depth,depth,entry_type,expected", (
    (None, 100, EntryType.FILE, Decision.DESCEND),
    (None, 100, EntryType.DIRECTORY, Decision.DESCEND),
    (1, 0, EntryType.FILE, Decision.DESCEND),
    # children would be at depth 1, which is already too deep
    (1, 0, EntryType.DIRECTORY, Decision.SKIP_SUBTREE),
    (1, 1, EntryType.FILE, Decision.SKIP),
    (2, 0, EntryType.DIRECTORY, Decision.DESCEND),
    (2, 1, EntryType.FILE, Decision.DESCEND),
    (2, 1, EntryType.DIRECTORY, Decision.SKIP_SUBTREE),
    (2, 2, EntryType.FILE, Decision.SKIP),
    (0, 0, EntryType.FILE, Decision.SKIP),
))
def test_max_depth(max_depth, depth, entry_type, expected):
    entry = _entry("x", entry_type, depth)
    assert accept(entry, None, ScanConfig(max_depth=max_depth)) is expected
    assert within_depth(entry, max_depth) is (expected is Decision.DESCEND)


def test_ignore_rules(tmp_path):
    (tmp_path / ".gitignore").write_text("*.log\nout/\n")
    rules = IgnoreRuleSet().extend(str(tmp_path), [".gitignore"], ScanConfig())
    parent = str(tmp_path)
    config = ScanConfig()

    assert accept(_entry("a.log", parent=parent), rules, config) is Decision.SKIP
    assert accept(
        _entry("a.log", EntryType.DIRECTORY, parent=parent),
        rules,
        config,
    ) is Decision.SKIP_SUBTREE
    assert accept(
        _entry("out", EntryType.DIRECTORY, parent=parent),
        rules,
        config,
    ) is Decision.SKIP_SUBTREE
    # directory-only pattern
    assert accept(_entry("out", parent=parent), rules, config) is Decision.DESCEND
    assert accept(_entry("a.txt", parent=parent), rules, config) is Decision.DESCEND

    # no rule set at all when rules are disabled
    assert accept(_entry("a.log", parent=parent), None, config) is Decision.DESCEND
