"""
Mention Responder

Turns "@tradebot should I long BTC?" into a two-timeframe TA reply.
4H sets the bias, 1H supplies the levels.
"""

import asyncio
import logging
import re
from typing import Optional

from clon.core.config import Settings, settings as default_settings
from clon.schemas.analysis import AnalysisReport, Bias
from clon.schemas.market import Ticker
from clon.schemas.mention import MentionIntent, MentionResponse, QuickSetup, ResponseType
from clon.schemas.signal import Direction
from clon.services.analysis.engine import VOLUME_LABELS, AnalysisEngine, get_analysis_engine
from clon.services.base import ServiceError
from clon.services.indicators.calculations import round_half_away
from clon.services.market_data.interface import MarketDataServiceInterface
from clon.services.market_data.service import get_market_data_service

logger = logging.getLogger(__name__)

# Alias -> exchange symbol
ASSET_MAP = {
    "BTC": "BTCUSDT", "BITCOIN": "BTCUSDT",
    "ETH": "ETHUSDT", "ETHEREUM": "ETHUSDT",
    "SOL": "SOLUSDT", "SOLANA": "SOLUSDT",
    "BNB": "BNBUSDT",
    "XRP": "XRPUSDT",
    "ADA": "ADAUSDT", "CARDANO": "ADAUSDT",
    "DOGE": "DOGEUSDT",
    "AVAX": "AVAXUSDT",
    "LINK": "LINKUSDT",
    "DOT": "DOTUSDT",
}

RAW_SYMBOL_PATTERN = re.compile(r"([A-Z]{2,6}USDT)")

INTENT_KEYWORDS = (
    (MentionIntent.LONG, ("long", "buy", "bullish")),
    (MentionIntent.SHORT, ("short", "sell", "bearish")),
    (MentionIntent.WAIT, ("wait", "hold")),
)

SETUP_ENTRY_BUFFER = 0.003
SETUP_STOP_DISTANCE = 0.015
SETUP_TARGET_1_DISTANCE = 0.025
SETUP_TARGET_2_DISTANCE = 0.05

NO_ASSET_MESSAGE = "I couldn't identify an asset in your message. Try: {handle} should I long BTC?"

RISK_NOTES = (
    "Wait for candle close confirmation before entering.",
    "Avoid overleveraging. Manage position size carefully.",
)


# =============================================================================
# PARSING
# =============================================================================


def is_mention(text: str, handle: Optional[str] = None) -> bool:
    handle = handle or default_settings.bot_mention_handle
    return handle.lower() in text.lower()


def extract_asset(text: str) -> Optional[str]:
    """Resolve an alias (whole word) or a raw XXXUSDT token."""
    upper = text.upper()
    for alias, symbol in ASSET_MAP.items():
        if re.search(rf"\b{alias}\b", upper):
            return symbol

    match = RAW_SYMBOL_PATTERN.search(upper)
    return match.group(1) if match else None


def extract_intent(text: str) -> MentionIntent:
    lower = text.lower()
    for intent, keywords in INTENT_KEYWORDS:
        if any(keyword in lower for keyword in keywords):
            return intent
    return MentionIntent.GENERAL


# =============================================================================
# RESPONSE
# =============================================================================


def _quick_setup(bias: Bias, price: float, report_1h: AnalysisReport) -> Optional[QuickSetup]:
    if bias == Bias.NEUTRAL:
        return None

    sr = report_1h.structure.support_resistance
    buffer = price * SETUP_ENTRY_BUFFER
    entry = f"{round_half_away(price - buffer)} - {round_half_away(price + buffer)}"

    if bias == Bias.BULLISH:
        direction = Direction.LONG
        stop = sr.nearest_support or round_half_away(price * (1 - SETUP_STOP_DISTANCE))
        target_1 = sr.nearest_resistance or round_half_away(price * (1 + SETUP_TARGET_1_DISTANCE))
        target_2 = round_half_away(price * (1 + SETUP_TARGET_2_DISTANCE))
    else:
        direction = Direction.SHORT
        stop = sr.nearest_resistance or round_half_away(price * (1 + SETUP_STOP_DISTANCE))
        target_1 = sr.nearest_support or round_half_away(price * (1 - SETUP_TARGET_1_DISTANCE))
        target_2 = round_half_away(price * (1 - SETUP_TARGET_2_DISTANCE))

    return QuickSetup(direction=direction, entry=entry, stop=stop, targets=(target_1, target_2))


def build_mention_response(
    asset: str,
    ticker: Ticker,
    report_1h: AnalysisReport,
    report_4h: AnalysisReport,
    intent: MentionIntent,
    disclaimer: str,
) -> MentionResponse:
    bias_4h = report_4h.bias
    bias_1h = report_1h.bias

    if bias_4h == bias_1h:
        confluence = f"Both timeframes align: {bias_4h.value}"
    else:
        confluence = f"Mixed: 4H {bias_4h.value}, 1H {bias_1h.value}"

    price = ticker.price
    indicators = report_1h.indicators
    ema_200_side = "above" if price > indicators.ema.ema200 else "below"
    ema_50_side = "above" if price > indicators.ema.ema50 else "below"

    overview = [
        f"Trend (4H): {report_4h.structure.trend.value}",
        f"Trend (1H): {report_1h.structure.trend.value}",
        f"EMA: Price {ema_200_side} 200 EMA | {ema_50_side} 50 EMA",
        f"RSI (1H): {indicators.rsi.value} - {indicators.rsi.signal.value}",
        f"MACD (1H): {indicators.macd.crossover.value.replace('_', ' ')}",
        f"Volume: {VOLUME_LABELS[indicators.volume.signal]}",
        f"Confluence: {confluence}",
    ]

    return MentionResponse(
        type=ResponseType.ANALYSIS,
        asset=asset,
        current_price=price,
        intent=intent,
        overview=overview,
        bias=bias_4h,
        setup=_quick_setup(bias_4h, price, report_1h),
        risk_note=[*RISK_NOTES, disclaimer],
    )


# =============================================================================
# SERVICE
# =============================================================================


class MentionResponder:
    """Answers bot mentions with a 1H + 4H analysis."""

    def __init__(
        self,
        market_data: Optional[MarketDataServiceInterface] = None,
        engine: Optional[AnalysisEngine] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or default_settings
        self.market_data = market_data or get_market_data_service()
        self.engine = engine or get_analysis_engine()

    async def handle_mention(self, text: str) -> Optional[MentionResponse]:
        """None when the text does not mention the bot."""
        if not is_mention(text, self.settings.bot_mention_handle):
            return None

        asset = extract_asset(text)
        intent = extract_intent(text)

        if asset is None:
            return MentionResponse(
                type=ResponseType.ERROR,
                message=NO_ASSET_MESSAGE.format(handle=self.settings.bot_mention_handle),
                intent=intent,
            )

        limit = self.settings.candle_limit
        try:
            candles_1h, candles_4h, ticker = await asyncio.gather(
                self.market_data.fetch_candles(asset, "1H", limit),
                self.market_data.fetch_candles(asset, "4H", limit),
                self.market_data.fetch_ticker(asset),
            )
            report_1h = self.engine.analyze(candles_1h, "1H")
            report_4h = self.engine.analyze(candles_4h, "4H")
        except ServiceError as e:
            logger.error(f"Mention analysis failed for {asset}: {e}")
            return MentionResponse(
                type=ResponseType.ERROR,
                message=f"Analysis failed for {asset}. Please try again shortly.",
                asset=asset,
                intent=intent,
            )

        return build_mention_response(
            asset, ticker, report_1h, report_4h, intent, self.settings.disclaimer_text
        )


# Singleton instance
_responder_instance: Optional[MentionResponder] = None


def get_mention_responder() -> MentionResponder:
    """Get or create mention responder instance."""
    global _responder_instance
    if _responder_instance is None:
        _responder_instance = MentionResponder()
    return _responder_instance
