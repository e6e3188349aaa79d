"""Agate AI — Locally computed campaign metrics.

These two numbers always come from campaign data, never from model output.
"""

from typing import Sequence

from app.models.campaign_models import AdvertStatus


def compute_budget_utilization(estimated_budget: float, actual_cost: float) -> float:
    """Actual cost as a percentage of the estimated budget (0 with no budget)."""
    if not estimated_budget or estimated_budget <= 0:
        return 0.0
    return (actual_cost / estimated_budget) * 100


def count_completed(statuses: Sequence[str]) -> int:
    return sum(1 for s in statuses if s == AdvertStatus.COMPLETED)


def compute_advert_completion_rate(statuses: Sequence[str]) -> int:
    """Whole-number percentage of completed adverts (0 with no adverts)."""
    if not statuses:
        return 0
    return (count_completed(statuses) * 100) // len(statuses)
