import pytest

from unittest.mock import patch

from flip_core.main import build_parser, main


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("FLIP_SELL_POLICY", "FLIP_CHART_POINTS", "FLIP_LOG_LEVEL", "FLIP_API_HOST", "FLIP_API_PORT",
                 "FLIP_API_DEBUG"):
        monkeypatch.delenv(name, raising=False)


def test_buy_prints_wei_and_ether(capsys):
    code = main(["buy", "--max-supply", "10000", "--current-supply", "0", "--initial-price", "1000000000000000"])
    assert code == 0
    assert capsys.readouterr().out.strip() == "1000000000000000 wei (0.001 ETH)"


def test_buy_batch_with_fee(capsys):
    code = main([
        "buy", "--max-supply", "10000", "--current-supply", "100", "--initial-price", "1000000000000000",
        "--count", "1", "--fee-percent", "50000000000000000",
    ])
    assert code == 0
    assert capsys.readouterr().out.strip() == "3150000000000000 wei (0.00315 ETH)"


def test_sell_strict_error_returns_nonzero(capsys):
    code = main(["sell", "--max-supply", "10000", "--current-supply", "0", "--initial-price", "1000000000000000"])
    assert code == 1
    assert "Cannot sell 1 units with a current supply of 0." in capsys.readouterr().err


def test_sell_truncate_policy(capsys):
    code = main([
        "sell", "--max-supply", "10000", "--current-supply", "1", "--initial-price", "1000000000000000",
        "--count", "3", "--policy", "truncate",
    ])
    assert code == 0
    assert capsys.readouterr().out.startswith("1000000000000000 wei")


def test_sell_policy_from_environment(capsys, monkeypatch):
    monkeypatch.setenv("FLIP_SELL_POLICY", "truncate")
    code = main([
        "sell", "--max-supply", "10000", "--current-supply", "1", "--initial-price", "1000000000000000",
        "--count", "3",
    ])
    assert code == 0


def test_invalid_input_returns_nonzero(capsys):
    code = main(["buy", "--max-supply", "0", "--current-supply", "0", "--initial-price", "1"])
    assert code == 1
    assert "max_supply" in capsys.readouterr().err


def test_curve_prints_samples(capsys):
    code = main(["curve", "--max-supply", "100", "--initial-price", "1000000000000000", "--points", "4"])
    assert code == 0
    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 5
    assert lines[0] == "0\t1000000000000000\t0.001"
    assert lines[-1].startswith("100\t")


def test_serve_runs_the_app():
    with patch("flip_core.webapi.webapi.app.run") as mock_run:
        assert main(["serve"]) == 0
    mock_run.assert_called_once_with(host="127.0.0.1", port=5000, debug=False)


def test_parser_requires_a_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])
