"""Tests for the in-memory rate table."""

import math
import random

import pytest

from currencypro.core.errors import BaseCurrencyLocked, InvalidRate, UnknownCurrency
from currencypro.services.rates.table import RateTable


class TestLookup:
    def test_get_returns_entry(self, table):
        entry = table.get("EUR")
        assert entry.code == "EUR"
        assert entry.rate == 3.475

    def test_get_is_case_insensitive(self, table):
        assert table.get("usd").rate == 2.98
        assert "eur" in table

    def test_get_unknown_raises(self, table):
        with pytest.raises(UnknownCurrency) as exc:
            table.get("XYZ")
        assert exc.value.code == "XYZ"

    def test_get_all_is_a_copy(self, table):
        all_rates = table.get_all()
        assert list(all_rates) == ["TND", "EUR", "USD"]
        all_rates.pop("EUR")
        assert "EUR" in table

    def test_base_currency_rate_is_one(self, table):
        assert table.base_currency == "TND"
        assert table.rate("TND") == 1.0

    def test_missing_base_currency_rejected(self):
        with pytest.raises(ValueError):
            RateTable({"EUR": 3.475}, "TND")


class TestUpdate:
    def test_update_then_get(self, table):
        before = table.get("EUR")
        updated = table.update("eur", 3.5)
        after = table.get("EUR")
        assert updated == after
        assert after.rate == 3.5
        assert after.last_updated > before.last_updated

    def test_earlier_reads_are_not_mutated(self, table):
        before = table.get("USD")
        table.update("USD", 3.1)
        assert before.rate == 2.98

    def test_unknown_currency_leaves_table_unchanged(self, table):
        snapshot = table.get_all()
        with pytest.raises(UnknownCurrency):
            table.update("NOTACURRENCY", 2.0)
        assert table.get_all() == snapshot
        assert "NOTACURRENCY" not in table

    @pytest.mark.parametrize("bad", [0.0, -1.0, math.inf, math.nan])
    def test_invalid_rate_rejected(self, table, bad):
        with pytest.raises(InvalidRate):
            table.update("EUR", bad)
        assert table.rate("EUR") == 3.475

    def test_base_currency_locked(self, table):
        with pytest.raises(BaseCurrencyLocked):
            table.update("TND", 2.0)
        assert table.rate("TND") == 1.0

    def test_base_currency_accepts_one(self, table):
        before = table.get("TND").last_updated
        entry = table.update("TND", 1)
        assert entry.rate == 1.0
        assert entry.last_updated > before


class TestDrift:
    def test_drift_moves_non_base_rates_within_bounds(self, table):
        original = {code: table.rate(code) for code in table}
        changed = table.drift(0.01, rng=random.Random(7))

        assert set(changed) == {"EUR", "USD"}
        assert table.rate("TND") == 1.0
        for code, rate in changed.items():
            assert table.rate(code) == rate
            assert abs(rate / original[code] - 1) <= 0.01

    def test_zero_drift_keeps_rates(self, table):
        table.drift(0.0, rng=random.Random(1))
        assert table.rate("EUR") == 3.475
