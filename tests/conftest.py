import os
import tempfile

import pytest

# this needs to be set before anything goes looking for a global git
# ignore file. the intention here is to prevent any of the user's git
# configuration leaking in to the scans the tests do.
os.environ["XDG_CONFIG_HOME"] = tempfile.mkdtemp()  # deliberately empty
os.environ["HOME"] = tempfile.mkdtemp()  # deliberately empty


NS = 1_000_000_000
# an arbitrary point in 2020, in nanoseconds
BASE_NS = 1_600_000_000 * NS


def ts(seconds:int) -> int:
    return BASE_NS + seconds * NS


@pytest.fixture
def make_tree(tmp_path):
    """
    Populate a directory from a mapping of relative paths to either a
    modification time offset in seconds (see `ts`) or a tuple of offset
    and file content. Paths ending in "/" become (empty) directories.
    """
    def _make_tree(files, root=None):
        root = tmp_path if root is None else root
        for relpath, spec in files.items():
            path = root / relpath
            if relpath.endswith("/"):
                path.mkdir(parents=True, exist_ok=True)
                continue

            if isinstance(spec, tuple):
                offset, content = spec
            else:
                offset, content = spec, ""

            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
            mtime = ts(offset)
            os.utime(path, ns=(mtime, mtime))
        return root

    return _make_tree
