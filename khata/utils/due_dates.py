from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional


@dataclass(frozen=True)
class DueDateInfo:
    text: str
    is_urgent: bool
    days: int  # negative when overdue


def _plural(n: int) -> str:
    return "" if n == 1 else "s"


def due_date_info(collection_date: date, today: Optional[date] = None) -> DueDateInfo:
    """Human label for a collection due date relative to ``today``."""
    today = today or date.today()
    days = (collection_date - today).days

    if days == 0:
        return DueDateInfo("Collection Today", True, days)
    if days == 1:
        return DueDateInfo("Collection Tomorrow", True, days)
    if days == -1:
        return DueDateInfo("Collection Yesterday", True, days)
    if days < 0:
        overdue = -days
        return DueDateInfo(f"Collection {overdue} day{_plural(overdue)} ago", True, days)
    if days <= 7:
        return DueDateInfo(f"Collection in {days} day{_plural(days)}", False, days)
    return DueDateInfo(f"Collection on {collection_date.strftime('%b %d')}", False, days)


def default_collection_date(today: Optional[date] = None, offset_days: int = 1) -> date:
    return (today or date.today()) + timedelta(days=offset_days)
