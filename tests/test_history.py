"""Tests for simulated history generation and the frozen history store."""

import random
from datetime import date, timedelta

import pytest

from currencypro.core.errors import InvalidRate, UnknownCurrency
from currencypro.models.history import HistoryPoint
from currencypro.services.history import HistoryStore, generate_history, summarize


class TestGenerateHistory:
    def test_length_and_order(self, table):
        today = date(2025, 3, 15)
        points = generate_history(table, "TND", "EUR", 30, rng=random.Random(1), today=today)

        assert len(points) == 31
        assert points[0].date == today - timedelta(days=30)
        assert points[-1].date == today
        assert [p.date for p in points] == sorted(p.date for p in points)
        assert all(p.rate > 0 for p in points)

    def test_jitter_bounds_and_change_percent(self, table):
        points = generate_history(table, "EUR", "USD", 90, rng=random.Random(2))
        base_rate = table.rate("USD") / table.rate("EUR")
        for p in points:
            u = p.rate / base_rate - 1
            assert -0.02 - 1e-12 <= u <= 0.02 + 1e-12
            assert p.change_percent == pytest.approx(u * 100, abs=1e-9)

    def test_zero_days_gives_today_only(self, table):
        points = generate_history(table, "TND", "USD", 0, today=date(2025, 1, 1))
        assert [p.date for p in points] == [date(2025, 1, 1)]

    def test_seeded_rng_is_reproducible(self, table):
        a = generate_history(table, "TND", "EUR", 10, rng=random.Random(5), today=date(2025, 1, 1))
        b = generate_history(table, "TND", "EUR", 10, rng=random.Random(5), today=date(2025, 1, 1))
        assert a == b

    def test_unknown_currency(self, table):
        with pytest.raises(UnknownCurrency):
            generate_history(table, "TND", "XYZ", 5)

    def test_negative_days_rejected(self, table):
        with pytest.raises(ValueError):
            generate_history(table, "TND", "EUR", -1)

    def test_non_finite_base_rate_rejected(self, table):
        table.update("EUR", 1e-320)
        with pytest.raises(InvalidRate):
            generate_history(table, "EUR", "TND", 3)


class TestSummarize:
    def test_summary_statistics(self):
        points = [
            HistoryPoint(date=date(2025, 1, 1), rate=1.0, change_percent=-1.0),
            HistoryPoint(date=date(2025, 1, 2), rate=3.0, change_percent=2.0),
            HistoryPoint(date=date(2025, 1, 3), rate=2.0, change_percent=0.0),
        ]
        summary = summarize(points)
        assert summary.current == 2.0
        assert summary.highest == 3.0
        assert summary.lowest == 1.0
        assert summary.average_change == pytest.approx(1.0)

    def test_empty_history_rejected(self):
        with pytest.raises(ValueError):
            summarize([])


class TestHistoryStore:
    @pytest.fixture
    def store(self, table):
        store = HistoryStore(table, default_days=30, rng=random.Random(3))
        store.prime()
        return store

    def test_prime_covers_non_base_currencies(self, store, table):
        assert store.for_currency("TND") is None
        eur = store.for_currency("eur")
        assert len(eur) == 31
        # Single-currency series is measured against the base currency
        for p in eur:
            assert abs(p.rate / table.rate("EUR") - 1) <= 0.02 + 1e-12

    def test_currency_series_frozen(self, store, table):
        first = store.for_currency("USD")
        table.update("USD", 5.0)
        assert store.for_currency("USD") == first

    def test_pair_series_cached_per_key(self, store):
        first = store.for_pair("EUR", "USD", 10)
        again = store.for_pair("eur", "usd", 10)
        assert first == again
        assert len(store.for_pair("EUR", "USD", 5)) == 6

    def test_pair_uses_default_days(self, store):
        assert len(store.for_pair("EUR", "USD")) == 31

    def test_returned_lists_are_copies(self, store):
        series = store.for_pair("EUR", "USD", 3)
        series.clear()
        assert len(store.for_pair("EUR", "USD", 3)) == 4

    def test_pair_unknown_currency(self, store):
        with pytest.raises(UnknownCurrency):
            store.for_pair("EUR", "XYZ", 3)
