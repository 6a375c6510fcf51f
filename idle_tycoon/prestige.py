"""Prestige credits.

Credits are tied to decades of lifetime earnings: reaching 1M pays the first
credit, 10M the second, 100M the third and so on. Lifetime earnings never
reset, and the historical counter on the state records which decades were
already paid out, so prestiging repeatedly inside one decade earns nothing.
"""

import logging
import math
from typing import TYPE_CHECKING, Dict, Optional

if TYPE_CHECKING:
    from .campaign import Campaign
    from .state import GameState

logger = logging.getLogger(__name__)

BASE_THRESHOLD = 1_000_000.0
CREDIT_BONUS = 0.05


def total_credits_unlocked(lifetime_earnings: float, base_threshold: float = BASE_THRESHOLD) -> int:
    if lifetime_earnings < base_threshold:
        return 0
    credits = int(math.floor(math.log10(lifetime_earnings) - math.log10(base_threshold) + 1))
    # log10 can round up just below a power of ten
    while credits > 1 and base_threshold * 10 ** (credits - 1) > lifetime_earnings:
        credits -= 1
    while base_threshold * 10 ** credits <= lifetime_earnings:
        credits += 1
    return credits


def potential_credits(
    lifetime_earnings: float,
    already_banked: int,
    base_threshold: float = BASE_THRESHOLD,
) -> int:
    total = total_credits_unlocked(lifetime_earnings, base_threshold)
    return max(0, total - already_banked)


def credits_earned_now(state: "GameState") -> int:
    return potential_credits(state.lifetime_earnings, state.prestige_credits_earned_historical)


def prod_multiplier(credits: int) -> float:
    return 1.0 + CREDIT_BONUS * credits


def next_credit_threshold_from_lifetime(
    lifetime_earnings: float, base_threshold: float = BASE_THRESHOLD
) -> float:
    """Start of the decade band after the one ``lifetime_earnings`` sits in."""
    if lifetime_earnings < base_threshold:
        return base_threshold
    return base_threshold * 10 ** total_credits_unlocked(lifetime_earnings, base_threshold)


def next_new_credit_threshold(
    lifetime_earnings: float,
    already_banked: int,
    base_threshold: float = BASE_THRESHOLD,
) -> float:
    """Lifetime earnings needed for the first credit that has not been banked yet."""
    already_banked = max(0, already_banked)
    if lifetime_earnings < base_threshold:
        return base_threshold
    total = total_credits_unlocked(lifetime_earnings, base_threshold)
    return base_threshold * 10 ** max(already_banked, total)


def remaining_to_next_new_credit(
    lifetime_earnings: float,
    already_banked: int,
    base_threshold: float = BASE_THRESHOLD,
) -> float:
    target = next_new_credit_threshold(lifetime_earnings, already_banked, base_threshold)
    return max(0.0, target - lifetime_earnings)


def summary(state: "GameState") -> Dict[str, float]:
    target = next_new_credit_threshold(
        state.lifetime_earnings, state.prestige_credits_earned_historical
    )
    return {
        "lifetime": state.lifetime_earnings,
        "credits": state.prestige_credits,
        "available": credits_earned_now(state),
        "multiplier": prod_multiplier(state.prestige_credits),
        "next_target": target,
        "remaining": max(0.0, target - state.lifetime_earnings),
    }


def apply_reset(state: "GameState", campaign: Optional["Campaign"] = None) -> int:
    """Bank any new credits and reset the run.

    Returns the number of credits earned. With nothing to earn the call is a
    no-op returning 0. Without a campaign only money and items are reset.
    """
    earned = credits_earned_now(state)
    if earned <= 0:
        return 0
    state.prestige_credits += earned
    state.prestige_credits_earned_historical += earned
    state.prestiges += 1
    if campaign is not None:
        campaign.reset_to_first_level(state)
    else:
        state.clear_run()
    logger.info(
        "Prestige #%d: +%d credits (total %d)", state.prestiges, earned, state.prestige_credits
    )
    return earned
