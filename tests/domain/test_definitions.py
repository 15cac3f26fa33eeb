"""Tests for authored definitions and records in fortune_valley.domain.values."""

from __future__ import annotations

import dataclasses
import math

import pytest

from fortune_valley.domain.enums import GameOutcome, Owner, RiskLevel
from fortune_valley.domain.exceptions import ConfigurationError
from fortune_valley.domain.values import (
    ActionResult,
    CityLotDefinition,
    InvestmentDefinition,
    SellRecord,
    VolatilityRange,
)


class TestVolatilityRange:

    def test_default_is_degenerate(self) -> None:
        vol = VolatilityRange()
        assert vol.low == vol.high == 1.0
        assert vol.is_degenerate

    def test_inverted_range_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            VolatilityRange(1.5, 0.5)

    def test_non_finite_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            VolatilityRange(0.0, math.inf)

    def test_negative_bounds_allowed(self) -> None:
        vol = VolatilityRange(-1.0, 2.0)
        assert not vol.is_degenerate


class TestInvestmentDefinition:

    def test_rate_per_period(self) -> None:
        d = InvestmentDefinition("Bond", annual_return_rate=0.12, compounds_per_year=12)
        assert d.rate_per_period == pytest.approx(0.01)

    def test_frozen(self) -> None:
        d = InvestmentDefinition("Bond")
        with pytest.raises(dataclasses.FrozenInstanceError):
            d.annual_return_rate = 0.3  # type: ignore[misc]

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"annual_return_rate": -0.01},
            {"annual_return_rate": 0.51},
            {"compounds_per_year": 0},
            {"compounding_frequency_ticks": 0},
            {"minimum_deposit": -1.0},
        ],
    )
    def test_invalid_fields_rejected(self, kwargs: dict) -> None:
        with pytest.raises(ConfigurationError):
            InvestmentDefinition("Bad", **kwargs)

    def test_empty_name_rejected(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            InvestmentDefinition("")
        assert exc_info.value.field_name == "display_name"

    def test_configuration_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            InvestmentDefinition("Bad", compounds_per_year=0)

    def test_explain_mentions_risk(self) -> None:
        d = InvestmentDefinition("Stock", risk_level=RiskLevel.HIGH, annual_return_rate=0.2)
        text = d.explain()
        assert "Stock" in text
        assert "risky" in text
        assert "20.0%" in text


class TestCityLotDefinition:

    def test_lot_id_derived_from_name(self) -> None:
        lot = CityLotDefinition("Main Street Shop")
        assert lot.lot_id == "main_street_shop"

    def test_explicit_lot_id_kept(self) -> None:
        lot = CityLotDefinition("Main Street Shop", lot_id="shop-1")
        assert lot.lot_id == "shop-1"

    def test_grid_position_coerced_to_tuple(self) -> None:
        lot = CityLotDefinition("Plot", grid_position=[2, 3])  # type: ignore[arg-type]
        assert lot.grid_position == (2, 3)

    def test_negative_cost_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            CityLotDefinition("Plot", base_cost=-1.0)

    def test_negative_bonus_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            CityLotDefinition("Plot", income_bonus=-1.0)

    def test_payback_ticks(self) -> None:
        assert CityLotDefinition("Plot", base_cost=1000.0, income_bonus=3.0).payback_ticks == 334
        assert CityLotDefinition("Plot", income_bonus=0.0).payback_ticks is None


class TestRecords:

    def test_sell_record_percentage_return(self) -> None:
        r = SellRecord("pos-1", "Bond", principal=200.0, proceeds=250.0,
                       realized_gain=50.0, ticks_held=60)
        assert r.percentage_return == pytest.approx(25.0)

    def test_sell_record_zero_principal(self) -> None:
        r = SellRecord("pos-1", "Bond", principal=0.0, proceeds=0.0,
                       realized_gain=0.0, ticks_held=0)
        assert r.percentage_return == 0.0

    def test_action_result_truthiness(self) -> None:
        assert ActionResult.ok(value=3)
        failed = ActionResult.failed("InsufficientFunds", "too poor")
        assert not failed
        assert failed.reason == "InsufficientFunds"
        assert failed.value is None


class TestEnums:

    def test_outcome_terminal(self) -> None:
        assert not GameOutcome.IN_PROGRESS.is_terminal
        assert GameOutcome.WON.is_terminal
        assert GameOutcome.LOST.is_terminal

    def test_owner_values(self) -> None:
        assert Owner("rival") is Owner.RIVAL
