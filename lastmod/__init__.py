import logging
from time import time_ns
from typing import Optional

from humanfriendly import Timer, format_timespan

from lastmod.config import ScanConfig
from lastmod.report import NANOSECONDS
from lastmod.walker import TreeScanner

logger = logging.getLogger(__name__)


def lastmod(
    path:str=".",
    hidden:bool=False,
    no_ignore:bool=False,
    follow_links:bool=False,
    max_depth:Optional[int]=None,
    threads:Optional[int]=None,
) -> Optional[int]:
    """
    Newest modification time, in nanoseconds since the epoch, of the
    files under `path`, or None if no file qualified.
    """
    config = ScanConfig(
        root=path,
        hidden=hidden,
        git_ignore=not no_ignore,
        git_global=not no_ignore,
        git_exclude=not no_ignore,
        # a single switch for every kind of ignore file, .ignore included
        dot_ignore=not no_ignore,
        follow_links=follow_links,
        max_depth=max_depth,
        threads=threads,
    )
    logger.debug("using %r", config)

    scanner = TreeScanner(config)
    logger.info(
        "scanning %(path)s with %(workers)s worker(s)",
        {"path": path, "workers": scanner.workers},
    )

    timer = Timer()
    newest = scanner.scan()

    logger.info(
        "scanned %(directories)s directories in %(elapsed)s: %(files)s files "
        "considered, %(skipped)s entries skipped, %(errors)s unreadable",
        {
            "directories": scanner.stats.directories,
            "elapsed": timer,
            "files": scanner.stats.files,
            "skipped": scanner.stats.skipped,
            "errors": scanner.stats.errors,
        },
    )

    if newest is not None:
        age = (time_ns() - newest) / NANOSECONDS
        logger.info(
            "newest modification was %(age)s %(relation)s",
            {
                "age": format_timespan(abs(age)),
                "relation": "ago" if age >= 0 else "in the future",
            },
        )

    return newest
