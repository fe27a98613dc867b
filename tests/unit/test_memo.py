"""Unit tests for the memoized selector engine."""
from __future__ import annotations

from decimal import Decimal

from stakeview.models import MarketData
from stakeview.selectors.memo import arg, create_selector, pick, value_equal
from stakeview.state import StakingState


def _prices(state: StakingState, *_):
    return state.market_data.snapshot


def _price_of(prices, asset_id):
    market = prices.get(asset_id)
    return market.price if market else None


class TestCreateSelector:
    def test_caches_per_argument_tuple(self) -> None:
        state = StakingState()
        state.market_data.upsert({"a": MarketData(Decimal(1)), "b": MarketData(Decimal(2))})
        select = create_selector(_prices, arg(0), combiner=_price_of)

        assert select(state, "a") == Decimal(1)
        assert select(state, "b") == Decimal(2)
        assert select(state, "a") == Decimal(1)
        assert select(state, "b") == Decimal(2)
        assert select.recomputations == 2
        assert select.cache_size == 2

    def test_other_store_write_reuses_result(self) -> None:
        state = StakingState()
        state.market_data.upsert({"a": MarketData(Decimal(1))})
        select = create_selector(_prices, arg(0), combiner=lambda p, a: dict(p))

        first = select(state, "a")
        state.staking.set_error(None)
        assert select(state, "a") is first
        assert select.recomputations == 1

    def test_input_change_recomputes(self) -> None:
        state = StakingState()
        state.market_data.upsert({"a": MarketData(Decimal(1))})
        select = create_selector(_prices, arg(0), combiner=_price_of)

        assert select(state, "a") == Decimal(1)
        state.market_data.upsert({"a": MarketData(Decimal(3))})
        assert select(state, "a") == Decimal(3)
        assert select.recomputations == 2

    def test_equal_keeps_identity(self) -> None:
        state = StakingState()
        state.market_data.upsert({"a": MarketData(Decimal(1))})
        select = create_selector(
            _prices, combiner=lambda p: tuple(sorted(p)), equal=value_equal
        )

        first = select(state)
        state.market_data.upsert({"a": MarketData(Decimal(5))})
        second = select(state)
        assert select.recomputations == 2
        assert second is first

    def test_lru_eviction(self) -> None:
        state = StakingState()
        select = create_selector(arg(0), combiner=lambda x: [x], max_entries=2)
        select(state, 1)
        select(state, 2)
        select(state, 3)
        assert select.cache_size == 2
        select(state, 1)
        assert select.recomputations == 4

    def test_list_arguments_are_keyed_by_value(self) -> None:
        state = StakingState()
        select = create_selector(arg(0), combiner=lambda xs: len(xs))
        assert select(state, ["a", "b"]) == 2
        assert select(state, ["a", "b"]) == 2
        assert select.recomputations == 1

    def test_clear_cache(self) -> None:
        state = StakingState()
        select = create_selector(arg(0), combiner=lambda x: x)
        select(state, 1)
        select.clear_cache()
        assert select.cache_size == 0
        assert select.recomputations == 0


class TestPick:
    def test_composed_selector_only_sees_picked_args(self) -> None:
        state = StakingState()
        state.market_data.upsert({"a": MarketData(Decimal(2))})
        inner = create_selector(_prices, arg(0), combiner=_price_of)
        outer = create_selector(
            pick(inner, 1), arg(0), combiner=lambda price, factor: price * factor
        )

        assert outer(state, 3, "a") == Decimal(6)
        assert outer(state, 4, "a") == Decimal(8)
        assert inner.recomputations == 1
        assert inner.cache_size == 1


class TestValueEqual:
    def test_structural(self) -> None:
        assert value_equal({"a": (1, 2)}, {"a": (1, 2)})
        assert not value_equal({"a": (1, 2)}, {"a": (2, 1)})


class TestArgumentKeys:
    def test_equal_hashing_arguments_of_other_types_get_own_entries(self) -> None:
        state = StakingState()
        select = create_selector(arg(0), combiner=lambda x: type(x).__name__)

        assert select(state, 1) == "int"
        assert select(state, True) == "bool"
        assert select(state, Decimal(1)) == "Decimal"
        assert select(state, 1.0) == "float"
        assert select.cache_size == 4
        assert select.recomputations == 4

    def test_same_typed_arguments_share_entry(self) -> None:
        state = StakingState()
        select = create_selector(arg(0), combiner=lambda x: [x])
        first = select(state, Decimal("1.0"))
        assert select(state, Decimal("1.00")) is first
