from datetime import datetime


TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
NO_FILES_MESSAGE = "No files found"

NANOSECONDS = 1_000_000_000


class TimestampError(ValueError): pass


def format_timestamp(nanos:int) -> str:
    """
    Render `nanos` (since the epoch) in the local timezone, truncated to
    whole seconds.
    """
    try:
        local = datetime.fromtimestamp(nanos // NANOSECONDS)
    except (OverflowError, OSError, ValueError) as e:
        raise TimestampError(
            f"Unable to represent timestamp {nanos}ns as a local time"
        ) from e
    return local.strftime(TIMESTAMP_FORMAT)
