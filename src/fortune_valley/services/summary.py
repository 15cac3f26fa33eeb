"""Builders for the end-of-game recap.

:func:`build_summary` freezes the live simulation state into a
:class:`~fortune_valley.domain.summary.GameSummary`; the other functions
derive the short, student-friendly notes shown on the game-over screen.
They are pure and only read the summary they are given.
"""

from __future__ import annotations

from dataclasses import replace

from fortune_valley.domain.enums import GameOutcome, Owner
from fortune_valley.domain.summary import MAX_KEY_DECISIONS, GameSummary
from fortune_valley.services.city import LotMarket
from fortune_valley.services.investments import InvestmentBook
from fortune_valley.services.ledger import Ledger
from fortune_valley.services.restaurant import IncomeSource


def build_summary(
    outcome: GameOutcome,
    days_played: int,
    ledger: Ledger,
    book: InvestmentBook,
    market: LotMarket,
    income: IncomeSource,
) -> GameSummary:
    """Snapshot the session's components and attach decisions and reflections."""
    purchases = market.purchases
    base = GameSummary(
        outcome=outcome,
        days_played=days_played,
        final_balance=ledger.balance,
        realized_gain=book.realized_gain,
        unrealized_gain=book.unrealized_gain,
        portfolio_value=book.total_portfolio_value,
        sell_history=tuple(book.sell_history),
        lot_ownership=market.ownership_map(),
        lot_purchases=tuple(purchases),
        player_lots=market.player_lot_count,
        rival_lots=market.rival_lot_count,
        total_lots=market.total_lots,
        restaurant_level=income.level,
        restaurant_income=income.total_earned,
        lot_income=income.total_bonus_earned,
        spent_on_lots=sum(p.cost for p in purchases if p.owner is Owner.PLAYER),
        investment_count=book.lifetime_investment_count,
        principal_invested=book.lifetime_principal_invested,
        peak_portfolio_value=book.peak_portfolio_value,
    )
    return replace(
        base,
        key_decisions=tuple(build_key_decisions(base)),
        headline=build_headline(base),
        investment_insight=build_investment_insight(base),
        opportunity_cost_insight=build_opportunity_cost_insight(base),
        what_if_message=build_what_if_message(base),
    )


# ---------------------------------------------------------------------------
# Key decisions
# ---------------------------------------------------------------------------

def build_key_decisions(s: GameSummary) -> list[str]:
    """Up to five notes tying the player's choices to the outcome."""
    notes: list[str] = []
    gains = s.total_investment_gains

    if gains > 500:
        notes.append(f"Your ${gains:,.0f} in investment gains helped you win!")
    elif gains > 100:
        notes.append(f"Compound interest earned you ${gains:,.0f} this game.")
    elif s.investment_count > 0 and gains <= 0:
        notes.append(
            f"Your investments lost ${-gains:,.0f}. "
            "Riskier assets can drop, bonds are more predictable."
        )
    elif s.investment_count == 0:
        notes.append("You didn't use investments. Compound interest could have helped!")

    if s.is_win and s.days_played < 100:
        notes.append("Fast victory! Efficient use of resources.")
    elif not s.is_win and s.days_played > 200:
        notes.append("The rival outpaced you over time.")

    if s.player_lots > 0 and s.rival_lots > s.player_lots:
        notes.append("The rival bought lots faster than you.")

    if s.sell_history:
        best = max(s.sell_history, key=lambda r: r.realized_gain)
        if best.realized_gain > 50:
            notes.append(
                f"Best sell: {best.investment_name} on Day {best.sold_at_tick} "
                f"(+${best.realized_gain:,.0f}, {best.percentage_return:.0f}%)"
            )

    return notes[:MAX_KEY_DECISIONS]


# ---------------------------------------------------------------------------
# Learning reflections
# ---------------------------------------------------------------------------

def build_headline(s: GameSummary) -> str:
    if s.is_win:
        if s.total_investment_gains > 200:
            return "Smart Investor!"
        if s.days_played < 80:
            return "Speed Run!"
        return "You Won!"
    if s.investment_count == 0:
        return "Try Investing Next Time!"
    if s.rival_lots >= s.total_lots:
        return "The Rival Was Too Fast!"
    return "Keep Trying!"


def build_investment_insight(s: GameSummary) -> str:
    if s.investment_count == 0:
        return (
            "You didn't invest any money this game. "
            "Even a safe bond at 5% would have turned $500 into $525 in 30 days. "
            "Try investing next time!"
        )
    gains = s.total_investment_gains
    if gains > 0:
        pct = gains / s.principal_invested * 100.0 if s.principal_invested > 0 else 0.0
        return (
            f"Your investments earned ${gains:,.0f} (+{pct:.0f}%) over {s.days_played} days. "
            "That's compound interest at work!"
        )
    return (
        f"Your investments lost ${-gains:,.0f}. "
        "Higher risk means higher potential loss. "
        "Bonds are safer if you want steady growth."
    )


def build_opportunity_cost_insight(s: GameSummary) -> str:
    player_purchases = s.player_purchases
    if player_purchases:
        first = player_purchases[0]
        days_owned = s.days_played - first.purchased_at_tick
        estimated = first.income_bonus * days_owned
        if estimated > 0:
            return (
                f"You bought {first.lot_name} on Day {first.purchased_at_tick}. "
                f"Its income bonus earned you ~${estimated:,.0f} over the game."
            )
    if s.spent_on_lots > 0:
        return (
            f"You spent ${s.spent_on_lots:,.0f} on lots. "
            "Each dollar spent on a lot is a dollar you couldn't invest."
        )
    return "You didn't buy any lots. Without lots, you can't win the race!"


def build_what_if_message(s: GameSummary) -> str:
    gains = s.total_investment_gains
    if s.is_win and s.investment_count == 0:
        return (
            "What if you had invested some money? "
            "You might have won even faster with compound interest on your side."
        )
    if not s.is_win and s.investment_count == 0:
        return (
            "What if you had put $500 into a bond early on? "
            "The extra earnings might have helped you buy that next lot before the rival."
        )
    if not s.is_win and gains > 0:
        return (
            "Your investments were growing! "
            "What if you had invested earlier or with a larger amount?"
        )
    if s.is_win and gains > 100:
        return (
            "Your investments paid off! "
            "What if you had taken on even more risk? Would it have been worth it?"
        )
    return "Every financial decision has a trade-off. Try a different strategy next time!"
