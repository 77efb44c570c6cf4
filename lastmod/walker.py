from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
import logging
from os import cpu_count, stat
from os.path import abspath
import queue
from stat import S_ISDIR
from threading import Event
from typing import Optional

from lastmod.config import ScanConfig
from lastmod.fs import (
    DirIdentity,
    EnumerationError,
    Entry,
    MetadataError,
    directory_identity,
    read_modified_time,
    scan_directory,
)
from lastmod.ignore import IgnoreRuleSet, root_rule_set
from lastmod.naive_executor import NaiveExecutor
from lastmod.reducer import MaxTimestamp
from lastmod.rules import Decision, accept


logger = logging.getLogger(__name__)

_STOP = object()


@dataclass(frozen=True, slots=True)
class DirectoryWork:
    path: str
    # depth of the entries this directory contains, 0 for the root's
    child_depth: int
    rules: Optional[IgnoreRuleSet]
    # identities of the directories from the root down to and including
    # this one, only tracked when following symlinks
    ancestors: frozenset[DirIdentity] = frozenset()


@dataclass(slots=True)
class ScanStats:
    directories: int = 0
    files: int = 0
    skipped: int = 0
    errors: int = 0

    def __add__(self, other:"ScanStats") -> "ScanStats":
        return ScanStats(
            self.directories + other.directories,
            self.files + other.files,
            self.skipped + other.skipped,
            self.errors + other.errors,
        )


def make_executor(threads:Optional[int]=None) -> tuple[Executor,int]:
    """
    An executor for `threads` workers, along with the number of workers
    to run on it. 0 runs everything in the calling thread, None picks a
    worker per CPU.
    """
    if (threads or 0) < 0:
        raise ValueError("Negative values for threads argument make no sense")
    elif threads == 0:
        return NaiveExecutor(), 1

    workers = threads or cpu_count() or 1
    return ThreadPoolExecutor(max_workers=workers, thread_name_prefix="lastmod"), workers


class TreeScanner:
    """
    Finds the newest modification time of the files under `config.root`.

    Directories waiting to be enumerated sit in a shared queue which
    `workers` workers running on `executor` pull from, pushing back any
    subdirectories they find. The scan is complete once every directory
    put on the queue has been marked done, which a worker only does after
    pushing that directory's children.
    """

    def __init__(
        self,
        config:ScanConfig,
        executor:Optional[Executor]=None,
        workers:Optional[int]=None,
    ):
        self.config = config
        self._owns_executor = executor is None
        if executor is None:
            executor, default_workers = make_executor(config.threads)
        else:
            default_workers = 1
        self._executor = executor
        self.workers = workers or default_workers
        self.maximum = MaxTimestamp()
        self.stats = ScanStats()
        self._queue = queue.Queue()
        self._cancelled = Event()

    def cancel(self):
        """
        Abandon any directories not yet enumerated. Safe to call from any
        thread.
        """
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def scan(self) -> Optional[int]:
        try:
            root_work = self._root_work(abspath(self.config.root))
            if root_work is not None:
                self._queue.put(root_work)
                self.stats = self.stats + self._run()
        finally:
            if self._owns_executor:
                self._executor.shutdown(wait=True)

        return self.maximum.finalize()

    def _root_work(self, root:str) -> Optional[DirectoryWork]:
        try:
            s = stat(root)
        except OSError as e:
            logger.debug("unable to stat root %s: %s", root, e)
            self.stats.errors += 1
            return None

        if not S_ISDIR(s.st_mode):
            try:
                self.maximum.merge(read_modified_time(root, follow_links=True))
            except MetadataError as e:
                logger.debug("skipping root %s: %s", root, e)
                self.stats.errors += 1
            else:
                self.stats.files += 1
            return None

        if self.config.max_depth == 0:
            return None

        return DirectoryWork(
            root,
            0,
            root_rule_set(root, self.config),
            frozenset(((s.st_dev, s.st_ino),)) if self.config.follow_links else frozenset(),
        )

    def _run(self) -> ScanStats:
        if isinstance(self._executor, NaiveExecutor):
            # nobody else could ever put anything on the queue once it's
            # empty, so don't block waiting for more
            return self._executor.submit(self._work, False).result()

        futures = [self._executor.submit(self._work) for _ in range(self.workers)]
        try:
            self._queue.join()
        except BaseException:
            # e.g. KeyboardInterrupt - workers must still be released or
            # shutting the executor down would wait on them forever
            self.cancel()
            raise
        finally:
            for _ in futures:
                self._queue.put(_STOP)

        return sum((f.result() for f in futures), ScanStats())

    def _work(self, block:bool=True) -> ScanStats:
        stats = ScanStats()
        failure = None

        while True:
            try:
                work = self._queue.get(block=block)
            except queue.Empty:
                break

            try:
                if work is _STOP:
                    break
                if self._cancelled.is_set():
                    continue
                self._process_directory(work, stats)
            except Exception as e:
                # keep draining so the queue can still be joined, but
                # abandon everything else
                if failure is None:
                    failure = e
                self._cancelled.set()
            finally:
                self._queue.task_done()

        if failure is not None:
            raise failure
        return stats

    def _process_directory(self, work:DirectoryWork, stats:ScanStats):
        stats.directories += 1
        try:
            entries = scan_directory(
                work.path,
                work.child_depth,
                self.config.follow_links,
            )
        except EnumerationError as e:
            logger.debug("skipping directory: %s", e)
            stats.errors += 1
            return

        rules = work.rules
        if rules is not None:
            rules = rules.extend(work.path, (e.name for e in entries), self.config)

        for entry in entries:
            if accept(entry, rules, self.config) is not Decision.DESCEND:
                stats.skipped += 1
            elif entry.is_dir:
                self._push_directory(entry, rules, work, stats)
            else:
                self._merge_entry(entry, stats)

    def _merge_entry(self, entry:Entry, stats:ScanStats):
        try:
            mtime = read_modified_time(entry, self.config.follow_links)
        except MetadataError as e:
            logger.debug("skipping entry: %s", e)
            stats.errors += 1
            return

        self.maximum.merge(mtime)
        stats.files += 1

    def _push_directory(
        self,
        entry:Entry,
        rules:Optional[IgnoreRuleSet],
        parent:DirectoryWork,
        stats:ScanStats,
    ):
        ancestors = parent.ancestors
        if self.config.follow_links:
            try:
                identity = directory_identity(entry)
            except MetadataError as e:
                logger.debug("skipping directory: %s", e)
                stats.errors += 1
                return

            if identity in ancestors:
                logger.debug("not descending into %s: filesystem loop", entry.path)
                stats.errors += 1
                return
            ancestors = ancestors | {identity}

        self._queue.put(DirectoryWork(entry.path, entry.depth + 1, rules, ancestors))


def scan(config:ScanConfig, executor:Optional[Executor]=None) -> Optional[int]:
    return TreeScanner(config, executor=executor).scan()
