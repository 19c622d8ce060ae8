import pytest

from flip_core.common.enums import OrderSide, SellShortfallPolicy


@pytest.mark.parametrize(
    "input_str, expected",
    [
        ("BUY", OrderSide.BUY),
        ("buy", OrderSide.BUY),
        ("Sell", OrderSide.SELL),
        ("SELL", OrderSide.SELL),
    ]
)
def test_order_side_from_str(input_str, expected):
    assert OrderSide.from_str(input_str) == expected


def test_order_side_from_str_invalid():
    with pytest.raises(NotImplementedError) as exc:
        OrderSide.from_str("HOLD")
    assert "No order side enum for HOLD" in str(exc.value)


@pytest.mark.parametrize(
    "input_str, expected",
    [
        ("STRICT", SellShortfallPolicy.STRICT),
        ("strict", SellShortfallPolicy.STRICT),
        ("Truncate", SellShortfallPolicy.TRUNCATE),
    ]
)
def test_sell_shortfall_policy_from_str(input_str, expected):
    assert SellShortfallPolicy.from_str(input_str) == expected


def test_sell_shortfall_policy_from_str_invalid():
    with pytest.raises(NotImplementedError) as exc:
        SellShortfallPolicy.from_str("partial")
    assert "No sell shortfall policy enum for partial" in str(exc.value)


@pytest.mark.parametrize(
    "member, expected",
    [
        (OrderSide.BUY, "BUY"),
        (OrderSide.SELL, "SELL"),
        (SellShortfallPolicy.STRICT, "STRICT"),
        (SellShortfallPolicy.TRUNCATE, "TRUNCATE"),
    ]
)
def test_str_and_repr(member, expected):
    assert str(member) == expected
    assert repr(member) == expected
