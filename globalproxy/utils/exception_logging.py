"""
Exception logging for the proxy error boundary.

Streaming responses run inside anyio task groups, so a failure may arrive
as an exception group; those are unpacked so each upstream failure is
visible in the log.
"""

import logging


def _safe_str(obj) -> str:
    """
    Convert an object to string without ever raising.

    Args:
        obj: The object to convert to string

    Returns:
        str(obj), repr(obj), or a placeholder naming the type
    """
    try:
        return str(obj)
    except Exception:
        try:
            return repr(obj)
        except Exception:
            return f"<{type(obj).__name__} object (string conversion failed)>"


def _safe_get_exceptions(exception_group) -> list:
    try:
        return list(exception_group.exceptions)
    except Exception:
        return []


def log_exception_with_details(
    logger: logging.Logger,
    prefix: str,
    exception: BaseException,
    level: int = logging.ERROR,
) -> None:
    """
    Log an exception, expanding exception groups into one record per
    sub-exception. Never raises, even for broken exception objects or a
    failing logger.

    Args:
        logger: The logger instance to use
        prefix: Prefix for the log message (e.g. "[Proxy]")
        exception: The exception to log
        level: The logging level to use (default: ERROR)
    """
    try:
        safe_prefix = _safe_str(prefix) if prefix is not None else ""
        safe_exception_str = "None" if exception is None else _safe_str(exception)

        sub_exceptions = []
        if exception is not None and hasattr(exception, "exceptions"):
            sub_exceptions = _safe_get_exceptions(exception)

        if not sub_exceptions:
            try:
                logger.log(
                    level,
                    f"{safe_prefix} Exception: {safe_exception_str}",
                    exc_info=exception if isinstance(exception, BaseException) else False,
                )
            except Exception:
                logger.log(level, f"{safe_prefix} Exception: {safe_exception_str}")
            return

        logger.log(
            level,
            f"{safe_prefix} Exception with {len(sub_exceptions)} sub-exceptions: {safe_exception_str}",
        )
        for i, sub_exc in enumerate(sub_exceptions):
            sub_type = type(sub_exc).__name__ if sub_exc is not None else "NoneType"
            try:
                logger.log(
                    level,
                    f"{safe_prefix} Sub-exception {i+1}: {sub_type}: {_safe_str(sub_exc)}",
                    exc_info=sub_exc if isinstance(sub_exc, BaseException) else False,
                )
            except Exception:
                # Keep going with the remaining sub-exceptions
                continue
    except Exception:
        try:
            if logger is not None:
                logger.log(logging.ERROR, "Exception logging failed")
        except Exception:
            pass
