"""Compound-interest math used for projections and player explanations.

All functions are pure.  The simulation itself compounds positions tick by
tick in :mod:`fortune_valley.services.investments`; these helpers answer
"what if" questions without touching any state.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray

from fortune_valley.domain.values import InvestmentDefinition

DEFAULT_TICKS_PER_YEAR = 365


def future_value(
    principal: float,
    annual_rate: float,
    compounds_per_year: int,
    years: float,
) -> float:
    """``P * (1 + r/n) ** (n * t)``.

    Returns *principal* unchanged when it is not positive or when
    *compounds_per_year* is not positive.
    """
    if principal <= 0 or compounds_per_year <= 0:
        return principal
    rate_per_period = annual_rate / compounds_per_year
    return principal * (1.0 + rate_per_period) ** (compounds_per_year * years)


def years_to_double(annual_rate: float) -> float:
    """Rule-of-72 estimate; ``inf`` for non-positive rates."""
    if annual_rate <= 0:
        return math.inf
    return 72.0 / (annual_rate * 100.0)


def total_interest_earned(
    principal: float,
    annual_rate: float,
    compounds_per_year: int,
    years: float,
) -> float:
    return future_value(principal, annual_rate, compounds_per_year, years) - principal


def compounding_advantage(
    principal: float,
    annual_rate: float,
    compounds_per_year: int,
    years: float,
) -> float:
    """Extra money earned by compounding compared to simple interest."""
    simple_total = principal + principal * annual_rate * years
    return future_value(principal, annual_rate, compounds_per_year, years) - simple_total


def ticks_to_years(ticks: int, ticks_per_year: int = DEFAULT_TICKS_PER_YEAR) -> float:
    return ticks / ticks_per_year


def projected_value(definition: InvestmentDefinition, principal: float, ticks: int) -> float:
    """Value of *principal* after *ticks* with volatility fixed at 1.

    Only whole compounding periods count:
    ``principal * (1 + rate_per_period) ** (ticks // compounding_frequency_ticks)``.
    """
    periods = max(ticks, 0) // definition.compounding_frequency_ticks
    return principal * (1.0 + definition.rate_per_period) ** periods


def projection_curve(
    definition: InvestmentDefinition,
    principal: float,
    ticks: int,
) -> NDArray[np.float64]:
    """Projected value at every tick ``0..ticks`` (inclusive), as an array.

    The curve is a staircase: the value only moves on compounding ticks.
    """
    steps = np.arange(max(ticks, 0) + 1)
    periods = steps // definition.compounding_frequency_ticks
    return principal * np.power(1.0 + definition.rate_per_period, periods)


def explain_compound_interest(
    principal: float,
    annual_rate: float,
    compounds_per_year: int,
    years: int,
) -> str:
    """Student-friendly explanation of compound growth on *principal*."""
    value = future_value(principal, annual_rate, compounds_per_year, years)
    advantage = compounding_advantage(principal, annual_rate, compounds_per_year, years)
    doubling = years_to_double(annual_rate)
    return (
        f"Starting with ${principal:.0f} at {annual_rate * 100:.1f}% annual interest:\n\n"
        f"After {years} year(s), you'll have: ${value:.2f}\n"
        f"Total earned: ${value - principal:.2f}\n\n"
        f"Compounding {compounds_per_year}x per year earns you ${advantage:.2f} MORE\n"
        "than simple interest would!\n\n"
        f"At this rate, your money doubles in ~{doubling:.1f} years."
    )
