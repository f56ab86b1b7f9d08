"""Debug context for error responses.

Only attached when debug output is visible; never needed for correctness.
"""

import traceback

from errorkit.config import Settings
from errorkit.exceptions import ErrorResponse
from errorkit.models import DebugContext


def should_show_meta(settings: Settings) -> bool:
    """Forced on, forced off, else the host application's debug flag."""
    if settings.force_debug_meta is not None:
        return settings.force_debug_meta
    return settings.app_debug


def collect(exc: BaseException) -> DebugContext:
    """File, line and stack frames of ``exc``.

    Raised exceptions use their traceback (innermost frame first in ``file``
    and ``line``). An ErrorResponse that was built but never raised falls back
    to where it was constructed.
    """
    frames = traceback.extract_tb(exc.__traceback__) if exc.__traceback__ else []
    trace = [
        {"file": frame.filename, "line": frame.lineno, "function": frame.name}
        for frame in reversed(frames)
    ]
    if frames:
        last = frames[-1]
        return DebugContext(file=last.filename, line=last.lineno or 0, trace=trace)
    if isinstance(exc, ErrorResponse):
        file, line = exc.origin
        return DebugContext(file=file, line=line, trace=trace)
    return DebugContext(file="unknown", line=0, trace=trace)
