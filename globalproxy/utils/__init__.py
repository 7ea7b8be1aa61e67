from typing import Optional


def error_message(exception: Optional[BaseException]) -> str:
    """Message reported to the caller for a failed proxy cycle.

    Falls back to the exception class name, since transport errors such as
    ``httpx.ConnectTimeout`` are frequently raised without a message.
    """
    if exception is None:
        return "Unknown error"
    try:
        message = str(exception)
    except Exception:
        message = ""
    return message or type(exception).__name__
