from builtins import map as _builtins_map
from concurrent.futures import Executor, Future


class NaiveExecutor(Executor):
    """
    Runs everything immediately in the calling thread.
    """
    def submit(self, fn, /, *args, **kwargs):
        future = Future()
        try:
            result = fn(*args, **kwargs)
        except BaseException as e:
            future.set_exception(e)
        else:
            future.set_result(result)
        return future

    def map(self, func, *iterables, timeout=None, chunksize=1):
        return _builtins_map(func, *iterables)
