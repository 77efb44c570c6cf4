from concurrent.futures import ThreadPoolExecutor
import random

import pytest

from lastmod.reducer import MaxTimestamp


def test_nothing_merged():
    assert MaxTimestamp().finalize() is None


def test_zero_timestamp_is_a_result():
    m = MaxTimestamp()
    m.merge(0)
    assert m.finalize() == 0
    assert m.count == 1


def test_never_decreases():
    m = MaxTimestamp()
    for candidate in (5, 12, 3, 12, 7):
        m.merge(candidate)
    assert m.finalize() == 12
    assert m.value == 12
    assert m.count == 5


@pytest.mark.parametrize("threads", (2, 8, 32))
def test_concurrent_merges(threads):
    candidates = list(range(20000))
    random.Random(threads).shuffle(candidates)

    m = MaxTimestamp()
    with ThreadPoolExecutor(max_workers=threads) as executor:
        # chunks so that every thread gets a share of the work
        chunks = [candidates[i::threads] for i in range(threads)]
        list(executor.map(lambda chunk: [m.merge(c) for c in chunk], chunks))

    assert m.finalize() == 19999
    assert m.count == 20000
