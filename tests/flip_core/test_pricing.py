import random

import pytest

from flip_core.common.enums import SellShortfallPolicy
from flip_core.common.errors import InsufficientSupplyForSell, InvalidCurveParameters
from flip_core.common.math import WAD, int_approx_equal
from flip_core.pricing import batch_buy_price, batch_sell_price, price_curve, unit_price

MAX_SUPPLY = 10000
INITIAL_PRICE = 10 ** 15
FIVE_PERCENT = 5 * 10 ** 16


def _newton_isqrt(n: int) -> int:
    if n == 0:
        return 0
    x = n
    y = (x + 1) // 2
    while y < x:
        x = y
        y = (x + n // x) // 2
    return x


def _reference_unit_price(supply, max_supply, initial_price):
    """Straight transcription of the contract's getPrice, with its own square root."""
    if supply == 0:
        return initial_price
    sqrt1 = _newton_isqrt(100 * supply * max_supply)
    sqrt2 = _newton_isqrt(10000 * supply * supply)
    return initial_price + (initial_price * 2 * sqrt1 * sqrt2) // (max_supply * max_supply)


def _random_tuples(seed, n=200):
    rng = random.Random(seed)
    for _ in range(n):
        max_supply = rng.choice([1, 2, 10, 777, 10000, 10 ** 6, 2 ** 64 + 13])
        current_supply = rng.randint(0, max_supply)
        initial_price = rng.choice([0, 1, 10 ** 15, rng.randint(1, 10 ** 24)])
        fee = rng.choice([0, FIVE_PERCENT, rng.randint(0, WAD)])
        yield max_supply, current_supply, initial_price, fee


def test_first_mint_costs_initial_price():
    assert batch_buy_price(MAX_SUPPLY, 0, INITIAL_PRICE, 1, 0) == INITIAL_PRICE


def test_last_mint_is_the_most_expensive():
    last = batch_buy_price(MAX_SUPPLY, 9999, INITIAL_PRICE, 1, 0)
    assert last == 2000680012000000000
    assert last > batch_buy_price(MAX_SUPPLY, 0, INITIAL_PRICE, 1, 0)


def test_batch_of_five_with_fee_is_exact():
    total = sum(unit_price(s, MAX_SUPPLY, INITIAL_PRICE) for s in range(100, 105))
    assert batch_buy_price(MAX_SUPPLY, 100, INITIAL_PRICE, 5, FIVE_PERCENT) == total + total * FIVE_PERCENT // WAD


def test_single_unit_degenerate_case_matches_unit_price():
    for supply in (0, 1, 50, 5000, 9999):
        assert batch_buy_price(MAX_SUPPLY, supply, INITIAL_PRICE, 1, 0) == unit_price(supply, MAX_SUPPLY, INITIAL_PRICE)


def test_accepts_decimal_strings():
    """
    uint256 values usually come in as strings; they price the same as ints.
    """
    assert batch_buy_price("10000", "100", "1000000000000000", "5", str(FIVE_PERCENT)) == \
        batch_buy_price(MAX_SUPPLY, 100, INITIAL_PRICE, 5, FIVE_PERCENT)
    assert batch_sell_price("10000", "100", "1000000000000000", "5", "0") == \
        batch_sell_price(MAX_SUPPLY, 100, INITIAL_PRICE, 5, 0)


@pytest.mark.parametrize("seed", [1, 2, 3])
def test_matches_reference_for_random_inputs(seed):
    for max_supply, current_supply, initial_price, fee in _random_tuples(seed):
        count = min(5, max_supply - current_supply)
        raw = sum(_reference_unit_price(current_supply + i, max_supply, initial_price) for i in range(count))
        assert batch_buy_price(max_supply, current_supply, initial_price, count, fee) == raw + raw * fee // WAD

        count = min(5, current_supply)
        raw = sum(_reference_unit_price(current_supply - i - 1, max_supply, initial_price) for i in range(count))
        assert batch_sell_price(max_supply, current_supply, initial_price, count, fee) == raw - raw * fee // WAD


@pytest.mark.parametrize("seed", [11, 12])
def test_fee_scaling_and_deduction(seed):
    for max_supply, current_supply, initial_price, fee in _random_tuples(seed, n=50):
        count = min(3, current_supply)
        buy_total = batch_buy_price(max_supply, current_supply, initial_price, count, 0)
        assert batch_buy_price(max_supply, current_supply, initial_price, count, fee) == \
            buy_total + buy_total * fee // WAD
        sell_total = batch_sell_price(max_supply, current_supply, initial_price, count, 0)
        assert batch_sell_price(max_supply, current_supply, initial_price, count, fee) == \
            sell_total - sell_total * fee // WAD
        assert batch_sell_price(max_supply, current_supply, initial_price, count, fee) >= 0


@pytest.mark.parametrize("seed", [21, 22])
def test_count_zero_identity(seed):
    for max_supply, current_supply, initial_price, fee in _random_tuples(seed, n=50):
        assert batch_buy_price(max_supply, current_supply, initial_price, 0, fee) == 0
        assert batch_sell_price(max_supply, current_supply, initial_price, 0, fee) == 0


@pytest.mark.parametrize("supply", [0, 1, 99, 100, 4321, 9998])
def test_buy_sell_near_symmetry(supply):
    """
    Buying a unit and immediately selling it back at zero fee returns what was paid.
    """
    bought = batch_buy_price(MAX_SUPPLY, supply, INITIAL_PRICE, 1, 0)
    sold = batch_sell_price(MAX_SUPPLY, supply + 1, INITIAL_PRICE, 1, 0)
    assert int_approx_equal(bought, sold)
    assert sold == unit_price(supply, MAX_SUPPLY, INITIAL_PRICE)


def test_sell_more_than_supply_is_strict_by_default():
    with pytest.raises(InsufficientSupplyForSell):
        batch_sell_price(MAX_SUPPLY, 3, INITIAL_PRICE, 4, 0)


@pytest.mark.parametrize("policy", [SellShortfallPolicy.TRUNCATE, "truncate", "TRUNCATE"])
def test_sell_more_than_supply_can_truncate(policy):
    expected = batch_sell_price(MAX_SUPPLY, 3, INITIAL_PRICE, 3, 0)
    assert batch_sell_price(MAX_SUPPLY, 3, INITIAL_PRICE, 4, 0, policy) == expected


@pytest.mark.parametrize(
    "args",
    [
        (0, 0, INITIAL_PRICE, 1, 0),                 # zero max supply
        (10, 11, INITIAL_PRICE, 1, 0),               # supply past max
        (10, 0, INITIAL_PRICE, 1, WAD + 1),          # fee above 100%
        (10, 0, -1, 1, 0),                           # negative price
        (10, 0, INITIAL_PRICE, -1, 0),               # negative count
        (10, 0, INITIAL_PRICE, 1.0, 0),              # float count
        (10.5, 0, INITIAL_PRICE, 1, 0),              # float max supply
        ("ten", 0, INITIAL_PRICE, 1, 0),             # not a number
    ]
)
def test_invalid_inputs_raise_invalid_curve_parameters(args):
    with pytest.raises(InvalidCurveParameters):
        batch_buy_price(*args)
    with pytest.raises(InvalidCurveParameters):
        batch_sell_price(*args)


def test_zero_max_supply_never_divides_by_zero():
    with pytest.raises(InvalidCurveParameters):
        unit_price(5, 0, INITIAL_PRICE)


def test_unknown_policy_is_invalid():
    with pytest.raises(InvalidCurveParameters):
        batch_sell_price(MAX_SUPPLY, 3, INITIAL_PRICE, 1, 0, "sometimes")


def test_price_curve_starts_at_initial_price_and_ends_at_max():
    samples = price_curve(MAX_SUPPLY, INITIAL_PRICE)
    assert samples[0].price == INITIAL_PRICE
    assert samples[-1].supply == MAX_SUPPLY
    assert [p.price for p in samples] == sorted(p.price for p in samples)
