"""Tests for the domain exception hierarchy."""

from __future__ import annotations

import pytest

from fortune_valley.domain.enums import Owner
from fortune_valley.domain.exceptions import (
    AtMaxLevel,
    ConfigurationError,
    FortuneValleyError,
    GameNotOver,
    InsufficientFunds,
    InvalidAmount,
    LotAlreadyOwned,
    LotNotFound,
    PositionNotFound,
)


class TestHierarchy:

    @pytest.mark.parametrize(
        "exc_type",
        [
            AtMaxLevel,
            ConfigurationError,
            GameNotOver,
            InsufficientFunds,
            InvalidAmount,
            LotAlreadyOwned,
            LotNotFound,
            PositionNotFound,
        ],
    )
    def test_all_derive_from_base(self, exc_type: type) -> None:
        assert issubclass(exc_type, FortuneValleyError)

    def test_reason_is_class_name(self) -> None:
        assert InvalidAmount("bad").reason == "InvalidAmount"

    def test_details_default_empty(self) -> None:
        assert FortuneValleyError("x").details == {}


class TestPayloads:

    def test_insufficient_funds_shortfall(self) -> None:
        exc = InsufficientFunds("nope", required=600.0, available=500.0)
        assert exc.shortfall == pytest.approx(100.0)
        assert str(exc) == "nope"

    def test_shortfall_never_negative(self) -> None:
        assert InsufficientFunds(required=1.0, available=5.0).shortfall == 0.0

    def test_lot_already_owned_payload(self) -> None:
        exc = LotAlreadyOwned(lot_id="harbor", owner=Owner.RIVAL)
        assert exc.lot_id == "harbor"
        assert exc.owner is Owner.RIVAL

    def test_configuration_error_field(self) -> None:
        exc = ConfigurationError("bad", field_name="seed")
        assert exc.field_name == "seed"
        assert isinstance(exc, ValueError)
