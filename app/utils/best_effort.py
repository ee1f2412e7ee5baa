"""
Non-critical side effects (audit log writes, Supabase mirroring, profile reads).
They return an Outcome instead of raising so callers decide explicitly what a
failure means for them - usually nothing.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Outcome:
    ok: bool
    value: Any = None
    reason: Optional[str] = None

    @classmethod
    def success(cls, value: Any = None) -> "Outcome":
        return cls(ok=True, value=value)

    @classmethod
    def failed(cls, reason: str) -> "Outcome":
        return cls(ok=False, reason=reason)


def best_effort(label: str, fn: Callable[..., Any], *args, **kwargs) -> Outcome:
    """Run fn; log and convert any exception into a failed Outcome."""
    try:
        return Outcome.success(fn(*args, **kwargs))
    except Exception as e:
        logger.warning("[%s] Non-critical step failed: %s", label, e)
        return Outcome.failed(str(e) or e.__class__.__name__)
