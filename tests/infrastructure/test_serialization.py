"""Tests for summary and config serialization."""

from __future__ import annotations

import json

import pytest
import yaml

from fortune_valley.domain.enums import GameOutcome, Owner
from fortune_valley.domain.summary import GameSummary
from fortune_valley.domain.values import LotPurchaseRecord, SellRecord
from fortune_valley.infrastructure.config import GameConfig
from fortune_valley.infrastructure.serialization import (
    deserialize,
    from_json,
    from_yaml,
    serialize,
    summary_from_dict,
    summary_to_dict,
    to_json,
    to_yaml,
)


@pytest.fixture
def summary() -> GameSummary:
    return GameSummary(
        outcome=GameOutcome.LOST,
        days_played=240,
        final_balance=512.5,
        realized_gain=35.0,
        unrealized_gain=12.0,
        portfolio_value=612.0,
        sell_history=(
            SellRecord("pos-1", "Bond", 500.0, 535.0, 35.0, 180, sold_at_tick=190),
        ),
        lot_ownership={"corner_shop": Owner.PLAYER, "harbor": Owner.RIVAL},
        lot_purchases=(
            LotPurchaseRecord("corner_shop", "Corner Shop", Owner.PLAYER, 1000.0, 5.0, 90),
            LotPurchaseRecord("harbor", "Harbor", Owner.RIVAL, 2000.0, 10.0, 240),
        ),
        player_lots=1,
        rival_lots=1,
        total_lots=2,
        key_decisions=("The rival outpaced you over time.",),
        headline="Keep Trying!",
    )


class TestSummaryDict:

    def test_enums_become_values(self, summary: GameSummary) -> None:
        data = summary_to_dict(summary)
        assert data["outcome"] == "lost"
        assert data["lot_ownership"] == {"corner_shop": "player", "harbor": "rival"}
        assert data["lot_purchases"][1]["owner"] == "rival"

    def test_derived_fields_exported(self, summary: GameSummary) -> None:
        data = summary_to_dict(summary)
        assert data["net_worth"] == pytest.approx(1124.5)
        assert data["total_investment_gains"] == pytest.approx(47.0)
        assert data["sell_history"][0]["percentage_return"] == pytest.approx(7.0)

    def test_json_serializable(self, summary: GameSummary) -> None:
        json.dumps(summary_to_dict(summary))

    def test_round_trip(self, summary: GameSummary) -> None:
        assert summary_from_dict(summary_to_dict(summary)) == summary

    def test_missing_outcome_rejected(self) -> None:
        with pytest.raises(ValueError):
            summary_from_dict({"days_played": 3})


class TestUnifiedSerializer:

    def test_serialize_dispatches_on_type(self, summary: GameSummary) -> None:
        record = summary.sell_history[0]
        assert serialize(record)["investment_name"] == "Bond"
        assert deserialize(serialize(record), SellRecord) == record

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(TypeError):
            serialize(object())
        with pytest.raises(TypeError):
            deserialize({}, int)

    def test_json_helpers(self, summary: GameSummary) -> None:
        assert from_json(to_json(summary), GameSummary) == summary

    def test_yaml_helpers(self, summary: GameSummary) -> None:
        text = to_yaml(summary)
        assert yaml.safe_load(text)["headline"] == "Keep Trying!"
        assert from_yaml(text, GameSummary) == summary

    def test_config_through_yaml(self) -> None:
        cfg = GameConfig.default(seed=11)
        assert from_yaml(to_yaml(cfg), GameConfig) == cfg
