"""Serialization utilities for the Fortune Valley economy engine.

Provides ``to_dict`` / ``from_dict`` conversion for the records a finished
game hands to the outside world (sell records, lot purchases, the game
summary) and for the game configuration.  Summaries are exported as JSON
or YAML for external consumers such as a narrator or a classroom dashboard.

Every ``to_dict`` output is JSON-serializable (enums become their values,
tuples become lists).  ``from_dict`` reconstructors accept permissive input
and raise ``ValueError`` for truly unrecoverable data.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import yaml

from fortune_valley.domain.enums import GameOutcome, Owner
from fortune_valley.domain.summary import GameSummary
from fortune_valley.domain.values import LotPurchaseRecord, SellRecord
from fortune_valley.infrastructure.config import GameConfig

logger = logging.getLogger(__name__)


# =========================================================================== #
#  Records                                                                     #
# =========================================================================== #

def sell_record_to_dict(r: SellRecord) -> dict[str, Any]:
    return {
        "position_id": r.position_id,
        "investment_name": r.investment_name,
        "principal": r.principal,
        "proceeds": r.proceeds,
        "realized_gain": r.realized_gain,
        "ticks_held": r.ticks_held,
        "sold_at_tick": r.sold_at_tick,
        "percentage_return": r.percentage_return,
    }


def sell_record_from_dict(data: dict[str, Any]) -> SellRecord:
    return SellRecord(
        position_id=str(data.get("position_id", "")),
        investment_name=str(data.get("investment_name", "")),
        principal=float(data.get("principal", 0.0)),
        proceeds=float(data.get("proceeds", 0.0)),
        realized_gain=float(data.get("realized_gain", 0.0)),
        ticks_held=int(data.get("ticks_held", 0)),
        sold_at_tick=int(data.get("sold_at_tick", 0)),
    )


def lot_purchase_to_dict(r: LotPurchaseRecord) -> dict[str, Any]:
    return {
        "lot_id": r.lot_id,
        "lot_name": r.lot_name,
        "owner": r.owner.value,
        "cost": r.cost,
        "income_bonus": r.income_bonus,
        "purchased_at_tick": r.purchased_at_tick,
    }


def lot_purchase_from_dict(data: dict[str, Any]) -> LotPurchaseRecord:
    return LotPurchaseRecord(
        lot_id=str(data["lot_id"]),
        lot_name=str(data.get("lot_name", data["lot_id"])),
        owner=Owner(data.get("owner", Owner.PLAYER.value)),
        cost=float(data.get("cost", 0.0)),
        income_bonus=float(data.get("income_bonus", 0.0)),
        purchased_at_tick=int(data.get("purchased_at_tick", 0)),
    )


# =========================================================================== #
#  Game summary                                                                #
# =========================================================================== #

def summary_to_dict(s: GameSummary) -> dict[str, Any]:
    return {
        "outcome": s.outcome.value,
        "days_played": s.days_played,
        "final_balance": s.final_balance,
        "portfolio_value": s.portfolio_value,
        "net_worth": s.net_worth,
        "realized_gain": s.realized_gain,
        "unrealized_gain": s.unrealized_gain,
        "total_investment_gains": s.total_investment_gains,
        "sell_history": [sell_record_to_dict(r) for r in s.sell_history],
        "lot_ownership": {lot_id: owner.value for lot_id, owner in s.lot_ownership.items()},
        "lot_purchases": [lot_purchase_to_dict(r) for r in s.lot_purchases],
        "player_lots": s.player_lots,
        "rival_lots": s.rival_lots,
        "total_lots": s.total_lots,
        "restaurant_level": s.restaurant_level,
        "restaurant_income": s.restaurant_income,
        "lot_income": s.lot_income,
        "spent_on_lots": s.spent_on_lots,
        "investment_count": s.investment_count,
        "principal_invested": s.principal_invested,
        "peak_portfolio_value": s.peak_portfolio_value,
        "key_decisions": list(s.key_decisions),
        "headline": s.headline,
        "investment_insight": s.investment_insight,
        "opportunity_cost_insight": s.opportunity_cost_insight,
        "what_if_message": s.what_if_message,
    }


def summary_from_dict(data: dict[str, Any]) -> GameSummary:
    """Rebuild a :class:`GameSummary`; derived keys (``net_worth``, ...) are ignored."""
    try:
        outcome = GameOutcome(data["outcome"])
    except (KeyError, ValueError) as exc:
        raise ValueError(f"summary has no valid outcome: {data.get('outcome')!r}") from exc
    return GameSummary(
        outcome=outcome,
        days_played=int(data.get("days_played", 0)),
        final_balance=float(data.get("final_balance", 0.0)),
        realized_gain=float(data.get("realized_gain", 0.0)),
        unrealized_gain=float(data.get("unrealized_gain", 0.0)),
        portfolio_value=float(data.get("portfolio_value", 0.0)),
        sell_history=tuple(sell_record_from_dict(r) for r in data.get("sell_history", [])),
        lot_ownership={k: Owner(v) for k, v in data.get("lot_ownership", {}).items()},
        lot_purchases=tuple(lot_purchase_from_dict(r) for r in data.get("lot_purchases", [])),
        player_lots=int(data.get("player_lots", 0)),
        rival_lots=int(data.get("rival_lots", 0)),
        total_lots=int(data.get("total_lots", 0)),
        restaurant_level=int(data.get("restaurant_level", 1)),
        restaurant_income=float(data.get("restaurant_income", 0.0)),
        lot_income=float(data.get("lot_income", 0.0)),
        spent_on_lots=float(data.get("spent_on_lots", 0.0)),
        investment_count=int(data.get("investment_count", 0)),
        principal_invested=float(data.get("principal_invested", 0.0)),
        peak_portfolio_value=float(data.get("peak_portfolio_value", 0.0)),
        key_decisions=tuple(data.get("key_decisions", [])),
        headline=str(data.get("headline", "")),
        investment_insight=str(data.get("investment_insight", "")),
        opportunity_cost_insight=str(data.get("opportunity_cost_insight", "")),
        what_if_message=str(data.get("what_if_message", "")),
    )


# =========================================================================== #
#  Unified serializer                                                          #
# =========================================================================== #

# Maps type -> (to_dict_fn, from_dict_fn)
_REGISTRY: dict[type, tuple[Any, Any]] = {
    SellRecord: (sell_record_to_dict, sell_record_from_dict),
    LotPurchaseRecord: (lot_purchase_to_dict, lot_purchase_from_dict),
    GameSummary: (summary_to_dict, summary_from_dict),
    GameConfig: (GameConfig.to_dict, GameConfig.from_dict),
}


def serialize(obj: Any) -> dict[str, Any]:
    """Convert a supported object into a plain dict."""
    entry = _REGISTRY.get(type(obj))
    if entry is None:
        raise TypeError(f"Cannot serialize object of type {type(obj).__name__}")
    return entry[0](obj)


def deserialize(data: dict[str, Any], target_type: type) -> Any:
    """Reconstruct an instance of *target_type* from a plain dict."""
    entry = _REGISTRY.get(target_type)
    if entry is None:
        raise TypeError(f"Cannot deserialize into type {target_type.__name__}")
    return entry[1](data)


# =========================================================================== #
#  JSON / YAML helpers                                                         #
# =========================================================================== #

def to_json(obj: Any, *, indent: int | None = 2) -> str:
    """Serialize a supported object to a JSON string."""
    return json.dumps(serialize(obj), indent=indent, default=str)


def from_json(json_str: str, target_type: type) -> Any:
    return deserialize(json.loads(json_str), target_type)


def to_yaml(obj: Any) -> str:
    """Serialize a supported object to a YAML string."""
    return yaml.safe_dump(serialize(obj), default_flow_style=False, sort_keys=False)


def from_yaml(yaml_str: str, target_type: type) -> Any:
    data = yaml.safe_load(yaml_str)
    if not isinstance(data, dict):
        raise ValueError("Top-level YAML must be a mapping")
    return deserialize(data, target_type)
