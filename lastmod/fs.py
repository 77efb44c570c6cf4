from dataclasses import dataclass, field
from os import scandir, stat, DirEntry
from typing import Optional, Union

from lastmod.config import EntryType


DirIdentity = tuple[int,int]


class ScanError(OSError):
    @classmethod
    def from_oserror(cls, exc:OSError, filename:Optional[str]=None):
        return cls(exc.errno, exc.strerror or str(exc), filename or exc.filename)


class EnumerationError(ScanError): pass


class MetadataError(ScanError): pass


@dataclass(frozen=True, slots=True)
class Entry:
    path: str
    name: str
    entry_type: EntryType
    depth: int
    direntry: Optional[DirEntry] = field(default=None, compare=False, repr=False)

    @property
    def is_dir(self) -> bool:
        return self.entry_type is EntryType.DIRECTORY


def _entry_type(direntry:DirEntry, follow_links:bool) -> EntryType:
    # DirEntry caches these, and they report False rather than raising
    # when the entry has vanished
    if direntry.is_symlink() and not follow_links:
        return EntryType.SYMLINK
    try:
        if direntry.is_dir(follow_symlinks=follow_links):
            return EntryType.DIRECTORY
        if direntry.is_file(follow_symlinks=follow_links):
            return EntryType.FILE
    except OSError:
        # a link whose target can't be resolved (loop, permission denied)
        # is left as a leaf, failing alone when its metadata is read
        if direntry.is_symlink():
            return EntryType.SYMLINK
        return EntryType.OTHER
    if direntry.is_symlink():
        # dangling
        return EntryType.SYMLINK
    return EntryType.OTHER


def scan_directory(path:str, depth:int, follow_links:bool=False) -> list[Entry]:
    """
    List the immediate children of `path` as `Entry`s at `depth`.

    The listing is read completely before returning so the directory
    handle is not held open while the caller works through the entries.
    """
    try:
        with scandir(path) as it:
            return [
                Entry(
                    direntry.path,
                    direntry.name,
                    _entry_type(direntry, follow_links),
                    depth,
                    direntry,
                )
                for direntry in it
            ]
    except OSError as e:
        raise EnumerationError.from_oserror(e, path) from e


def read_modified_time(entry:Union[Entry,str], follow_links:bool=False) -> int:
    """
    Modification time of `entry` in nanoseconds since the epoch.

    Raises MetadataError if the entry can't be stat'ed (vanished,
    permission denied, dangling or looping link) or carries a
    timestamp from before the epoch.
    """
    if isinstance(entry, Entry):
        path = entry.path
        stat_func = entry.direntry.stat if entry.direntry is not None else None
    else:
        path, stat_func = entry, None

    try:
        if stat_func is not None:
            s = stat_func(follow_symlinks=follow_links)
        else:
            s = stat(path, follow_symlinks=follow_links)
    except OSError as e:
        raise MetadataError.from_oserror(e, path) from e

    if s.st_mtime_ns < 0:
        raise MetadataError(
            None,
            f"modification time {s.st_mtime_ns}ns precedes the epoch",
            path,
        )

    return s.st_mtime_ns


def directory_identity(entry:Union[Entry,str]) -> DirIdentity:
    """
    (st_dev, st_ino) of the directory `entry` resolves to, following
    symlinks. Raises MetadataError on failure.
    """
    path = entry.path if isinstance(entry, Entry) else entry
    try:
        if isinstance(entry, Entry) and entry.direntry is not None:
            s = entry.direntry.stat(follow_symlinks=True)
        else:
            s = stat(path)
    except OSError as e:
        raise MetadataError.from_oserror(e, path) from e
    return s.st_dev, s.st_ino
