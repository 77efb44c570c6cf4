from dataclasses import dataclass
import logging
from os import environ, sep
from os.path import (
    dirname,
    expanduser,
    exists,
    isdir,
    join as path_join,
)
from typing import Iterable, Optional

from pathspec import GitIgnoreSpec

from lastmod.config import ScanConfig


logger = logging.getLogger(__name__)

GITIGNORE_NAME = ".gitignore"
DOT_IGNORE_NAME = ".ignore"


@dataclass(frozen=True, slots=True)
class IgnoreLayer:
    base: str
    spec: GitIgnoreSpec
    source: str

    def relative(self, path:str) -> Optional[str]:
        base = self.base.rstrip(sep) + sep
        if not path.startswith(base):
            return None
        return path[len(base):]

    def matched(self, path:str, is_dir:bool) -> Optional[bool]:
        rel = self.relative(path)
        if not rel:
            return None
        if is_dir:
            # directory-only patterns ("build/") need the trailing slash
            rel += "/"
        return self.spec.check_file(rel).include


def load_layer(base:str, source:str) -> Optional[IgnoreLayer]:
    """
    Read ignore file `source` into a layer anchored at `base`. Returns
    None if the file can't be read or holds no rules.
    """
    try:
        with open(source, "r", encoding="utf-8", errors="replace") as f:
            spec = GitIgnoreSpec.from_lines(f.read().splitlines())
    except OSError as e:
        logger.debug("unable to read ignore file %s: %s", source, e)
        return None

    if not spec.patterns:
        return None

    logger.debug(
        "loaded %(count)s ignore rules from %(source)s",
        {"count": len(spec.patterns), "source": source},
    )
    return IgnoreLayer(base, spec, source)


class IgnoreRuleSet:
    """
    Ignore rules in effect for a directory: the layers inherited from
    its ancestors, lowest precedence first, followed by the directory's
    own. Never modified once built, so a single instance is shared by
    every worker handling the subtree.
    """
    __slots__ = ("layers",)

    def __init__(self, layers:Iterable[IgnoreLayer]=()):
        self.layers = tuple(layers)

    def __repr__(self):
        return f"{type(self).__name__}({[l.source for l in self.layers]!r})"

    def __bool__(self):
        return bool(self.layers)

    def matched(self, path:str, is_dir:bool) -> Optional[bool]:
        """
        True if `path` is ignored, False if a negated rule explicitly
        re-includes it, None if no rule has anything to say about it.
        """
        for layer in reversed(self.layers):
            include = layer.matched(path, is_dir)
            if include is not None:
                return include
        return None

    def is_ignored(self, path:str, is_dir:bool) -> bool:
        return bool(self.matched(path, is_dir))

    def with_layers(self, layers:Iterable[IgnoreLayer]) -> "IgnoreRuleSet":
        layers = tuple(layers)
        if not layers:
            return self
        return type(self)(self.layers + layers)

    def extend(
        self,
        directory:str,
        names:Iterable[str],
        config:ScanConfig,
    ) -> "IgnoreRuleSet":
        """
        Rules for `directory`, given the names of its children: this
        rule set extended by any ignore files the directory holds.
        """
        return self.with_layers(directory_layers(directory, names, config))


def directory_layers(
    directory:str,
    names:Iterable[str],
    config:ScanConfig,
) -> list[IgnoreLayer]:
    names = frozenset(names)
    layers = []
    # .ignore files take precedence over .gitignore files in the same
    # directory, so come later
    for enabled, filename in (
        (config.git_ignore, GITIGNORE_NAME),
        (config.dot_ignore, DOT_IGNORE_NAME),
    ):
        if enabled and filename in names:
            layer = load_layer(directory, path_join(directory, filename))
            if layer is not None:
                layers.append(layer)
    return layers


def find_repository_top(path:str) -> Optional[str]:
    """
    The closest directory at or above `path` containing a `.git` entry,
    or None. `path` should be absolute.
    """
    current = path
    while True:
        if exists(path_join(current, ".git")):
            return current
        parent = dirname(current)
        if parent == current:
            return None
        current = parent


def global_excludes_path() -> str:
    config_home = environ.get("XDG_CONFIG_HOME") or expanduser(path_join("~", ".config"))
    return path_join(config_home, "git", "ignore")


def root_rule_set(root:str, config:ScanConfig) -> Optional[IgnoreRuleSet]:
    """
    The rules in effect at the absolute path `root` before any of its own
    ignore files are read: the global excludes file, the repository's
    exclude file, and ignore files in `root`'s ancestors up to the top of
    the repository it lies in. None if ignore rules are disabled.
    """
    if not config.honor_ignore_rules:
        return None

    repo_top = find_repository_top(root)
    anchor = repo_top or root
    layers = []

    if config.git_global:
        source = global_excludes_path()
        if exists(source):
            layer = load_layer(anchor, source)
            if layer is not None:
                layers.append(layer)

    if repo_top is not None:
        git_dir = path_join(repo_top, ".git")
        if config.git_exclude and isdir(git_dir):
            source = path_join(git_dir, "info", "exclude")
            if exists(source):
                layer = load_layer(repo_top, source)
                if layer is not None:
                    layers.append(layer)

        ancestors = []
        current = root
        while current != repo_top:
            current = dirname(current)
            ancestors.append(current)

        for ancestor in reversed(ancestors):
            names = [
                name
                for name in (GITIGNORE_NAME, DOT_IGNORE_NAME)
                if exists(path_join(ancestor, name))
            ]
            layers.extend(directory_layers(ancestor, names, config))

    logger.debug("root ignore rule layers: %s", [l.source for l in layers])
    return IgnoreRuleSet(layers)
