from datetime import datetime, timedelta
from typing import Dict, Optional

# Premium plans an admin can grant and how long each lasts.
# None means the plan never expires.
PLAN_DURATIONS: Dict[str, Optional[timedelta]] = {
    "monthly": timedelta(days=30),
    "annual": timedelta(days=365),
    "lifetime": None,
}

FREE_PLAN = "free"
INACTIVE_STATUS = "inactive"
ACTIVE_STATUS = "active"


def get_plan_expiry(plan: str, now: datetime) -> Optional[datetime]:
    """Expiry timestamp for `plan` starting at `now`; None for lifetime."""
    if plan not in PLAN_DURATIONS:
        raise ValueError(f"Unknown plan: {plan}")
    duration = PLAN_DURATIONS[plan]
    return now + duration if duration is not None else None
