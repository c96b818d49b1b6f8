"""
Test the mention responder
"""
import asyncio

import pytest

from clon.core.config import Settings
from clon.schemas.analysis import Bias
from clon.schemas.mention import MentionIntent, ResponseType
from clon.schemas.signal import Direction
from clon.services.mention import MentionResponder, extract_asset, extract_intent, is_mention


def test_is_mention_case_insensitive():
    assert is_mention("hey @TradeBot should I long BTC?", "@tradebot")
    assert not is_mention("should I long BTC?", "@tradebot")


@pytest.mark.parametrize(
    "text, expected",
    [
        ("@tradebot should I long bitcoin?", "BTCUSDT"),
        ("@tradebot thoughts on eth", "ETHUSDT"),
        ("@tradebot cardano looking weak", "ADAUSDT"),
        ("@tradebot what about pepeusdt", "PEPEUSDT"),
        ("@tradebot something else entirely", None),
    ],
)
def test_extract_asset(text, expected):
    assert extract_asset(text) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("should I long here", MentionIntent.LONG),
        ("time to sell?", MentionIntent.SHORT),
        ("hold or fold", MentionIntent.WAIT),
        ("thoughts?", MentionIntent.GENERAL),
    ],
)
def test_extract_intent(text, expected):
    assert extract_intent(text) == expected


@pytest.fixture
def settings():
    return Settings(bot_mention_handle="@tradebot", disclaimer_text="Informational only.")


def _responder(settings, market_data):
    return MentionResponder(market_data=market_data, settings=settings)


def test_aligned_bullish_reply(settings, fake_market_data, rising_candles):
    market_data = fake_market_data(
        candles={("BTCUSDT", "1H"): rising_candles(), ("BTCUSDT", "4H"): rising_candles()},
        prices={"BTCUSDT": 150.0},
    )
    response = asyncio.run(_responder(settings, market_data).handle_mention("@tradebot long BTC?"))

    assert response.type == ResponseType.ANALYSIS
    assert response.asset == "BTCUSDT"
    assert response.current_price == 150.0
    assert response.intent == MentionIntent.LONG
    assert response.bias == Bias.BULLISH
    assert response.overview[0] == "Trend (4H): uptrend (HH + HL)"
    assert response.overview[-1] == "Confluence: Both timeframes align: Bullish"

    setup = response.setup
    assert setup.direction == Direction.LONG
    assert setup.entry == "149.55 - 150.45"
    # No 1H levels on a one-way series: percentage fallbacks
    assert setup.stop == 147.75
    assert setup.targets == (153.75, 157.5)

    assert response.risk_note[-1] == "Informational only."


def test_mixed_timeframes(settings, fake_market_data, rising_candles, falling_candles):
    market_data = fake_market_data(
        candles={("ETHUSDT", "1H"): falling_candles(), ("ETHUSDT", "4H"): rising_candles()},
        prices={"ETHUSDT": 500.0},
    )
    response = asyncio.run(_responder(settings, market_data).handle_mention("@tradebot eth?"))

    assert response.bias == Bias.BULLISH
    assert response.overview[-1] == "Confluence: Mixed: 4H Bullish, 1H Bearish"
    assert response.intent == MentionIntent.GENERAL


def test_neutral_4h_has_no_setup(settings, fake_market_data, rising_candles, flat_candles):
    market_data = fake_market_data(
        candles={("SOLUSDT", "1H"): rising_candles(), ("SOLUSDT", "4H"): flat_candles()},
        prices={"SOLUSDT": 100.0},
    )
    response = asyncio.run(_responder(settings, market_data).handle_mention("@tradebot sol"))

    assert response.bias == Bias.NEUTRAL
    assert response.setup is None


def test_bearish_setup_uses_resistance_fallback(settings, fake_market_data, falling_candles):
    market_data = fake_market_data(
        candles={("BNBUSDT", "1H"): falling_candles(), ("BNBUSDT", "4H"): falling_candles()},
        prices={"BNBUSDT": 200.0},
    )
    response = asyncio.run(_responder(settings, market_data).handle_mention("@tradebot short bnb"))

    assert response.setup.direction == Direction.SHORT
    assert response.setup.stop == 203.0
    assert response.setup.targets == (195.0, 190.0)


def test_no_mention(settings, fake_market_data):
    responder = _responder(settings, fake_market_data())
    assert asyncio.run(responder.handle_mention("long BTC?")) is None


def test_unknown_asset(settings, fake_market_data):
    response = asyncio.run(_responder(settings, fake_market_data()).handle_mention("@tradebot what now?"))

    assert response.type == ResponseType.ERROR
    assert "@tradebot should I long BTC?" in response.message


def test_failed_analysis(settings, fake_market_data):
    market_data = fake_market_data(failing={"XRPUSDT"})
    response = asyncio.run(_responder(settings, market_data).handle_mention("@tradebot xrp"))

    assert response.type == ResponseType.ERROR
    assert response.message == "Analysis failed for XRPUSDT. Please try again shortly."


def test_short_history_is_an_error_reply(settings, fake_market_data, rising_candles):
    market_data = fake_market_data(
        candles={("DOTUSDT", "1H"): rising_candles(150), ("DOTUSDT", "4H"): rising_candles(150)},
        prices={"DOTUSDT": 5.0},
    )
    response = asyncio.run(_responder(settings, market_data).handle_mention("@tradebot dot"))

    assert response.type == ResponseType.ERROR


def test_volume_line_carries_conviction(settings, fake_market_data, make_candles, rising_candles):
    closes = [100 + 0.01 * t * t for t in range(220)]
    spike = make_candles(closes, volumes=[1000.0] * 219 + [5000.0])
    market_data = fake_market_data(
        candles={("BTCUSDT", "1H"): spike, ("BTCUSDT", "4H"): rising_candles()},
        prices={"BTCUSDT": 150.0},
    )
    response = asyncio.run(_responder(settings, market_data).handle_mention("@tradebot btc"))

    assert "Volume: high (strong conviction)" in response.overview
