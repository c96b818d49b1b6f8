"""
Test the v1 HTTP API with dependency overrides
"""
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from clon.api.v1 import router as api_v1_router
from clon.api.v1.endpoints.signals import get_watchlist_driver
from clon.core.config import Settings, WatchlistEntry, get_settings
from clon.db.database import get_db
from clon.db.models import Base
from clon.db.signals import DatabaseSignalStore
from clon.schemas.support import SupportReply
from clon.services.market_data import get_market_data_service
from clon.services.mention import MentionResponder, get_mention_responder
from clon.services.signals import WatchlistDriver
from clon.services.support import get_support_agent


class EchoAgent:
    async def respond(self, message, session_id=None):
        return SupportReply(reply=f"echo: {message}", session_id=session_id or "session_new")


@pytest.fixture
def settings():
    return Settings(
        watchlist=[
            WatchlistEntry(symbol="BTCUSDT", timeframe="1H"),
            WatchlistEntry(symbol="SOLUSDT", timeframe="4H"),
        ],
        disclaimer_text="Informational only.",
    )


@pytest.fixture
def market_data(fake_market_data, rising_candles, flat_candles, make_candles):
    return fake_market_data(
        candles={
            ("BTCUSDT", "1H"): rising_candles(),
            ("BTCUSDT", "4H"): rising_candles(),
            ("SOLUSDT", "4H"): flat_candles(),
            ("ADAUSDT", "1H"): rising_candles(120),
        },
        prices={"BTCUSDT": 150.0, "SOLUSDT": 100.0, "ADAUSDT": 0.5},
        failing={"XRPUSDT"},
    )


@pytest.fixture
def client(settings, market_data):
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        async with session_factory() as session:
            yield session
            await session.commit()

    app = FastAPI()
    app.include_router(api_v1_router, prefix="/api/v1")
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_market_data_service] = lambda: market_data
    app.dependency_overrides[get_mention_responder] = lambda: MentionResponder(
        market_data=market_data, settings=settings
    )
    app.dependency_overrides[get_support_agent] = lambda: EchoAgent()
    app.dependency_overrides[get_watchlist_driver] = lambda: WatchlistDriver(
        market_data=market_data, store=DatabaseSignalStore(session_factory), settings=settings
    )

    with TestClient(app) as test_client:
        yield test_client
        test_client.portal.call(engine.dispose)


def test_analysis(client):
    response = client.post("/api/v1/analysis", json={"symbol": "btcusdt", "timeframe": "1H"})

    assert response.status_code == 200
    data = response.json()
    assert data["symbol"] == "BTCUSDT"
    assert data["current_price"] == 150.0
    assert data["report"]["bias"] == "Bullish"
    assert data["report"]["timeframe"] == "1H"
    assert data["disclaimer"] == "Informational only."


def test_analysis_short_history_is_400(client):
    response = client.post("/api/v1/analysis", json={"symbol": "ADAUSDT"})
    assert response.status_code == 400


def test_analysis_upstream_failure_is_502(client):
    response = client.post("/api/v1/analysis", json={"symbol": "XRPUSDT"})
    assert response.status_code == 502


def test_analysis_unknown_timeframe(client):
    response = client.post("/api/v1/analysis", json={"symbol": "BTCUSDT", "timeframe": "2H"})
    assert response.status_code == 422


def test_signal_lifecycle(client):
    assert client.get("/api/v1/signals/active").json() == []

    generated = client.post("/api/v1/signals/generate")
    assert generated.status_code == 200
    # SOL is Neutral
    assert [s["asset"] for s in generated.json()] == ["BTCUSDT"]

    active = client.get("/api/v1/signals/active").json()
    assert len(active) == 1
    signal_id = active[0]["id"]
    assert active[0]["status"] == "Open"

    today = client.get("/api/v1/signals/today").json()
    assert [s["id"] for s in today] == [signal_id]

    hit = client.patch(f"/api/v1/signals/{signal_id}/status", json={"status": "TP1 Hit", "result_pct": 2.5})
    assert hit.status_code == 200
    assert hit.json()["status"] == "TP1 Hit"

    backwards = client.patch(f"/api/v1/signals/{signal_id}/status", json={"status": "Open"})
    assert backwards.status_code == 400

    bogus = client.patch(f"/api/v1/signals/{signal_id}/status", json={"status": "Moon"})
    assert bogus.status_code == 400

    closed = client.get("/api/v1/signals/closed").json()
    assert [s["id"] for s in closed] == [signal_id]

    performance = client.get("/api/v1/performance").json()
    assert performance["total_signals"] == 1
    assert performance["wins"] == 1
    assert performance["win_rate"] == 100.0
    assert performance["avg_result"] == 2.5


def test_unknown_signal_is_404(client):
    response = client.patch("/api/v1/signals/does-not-exist/status", json={"status": "Closed"})
    assert response.status_code == 404


def test_mention(client):
    response = client.post("/api/v1/mention", json={"text": "@tradebot long btc?"})

    assert response.status_code == 200
    data = response.json()
    assert data["type"] == "analysis"
    assert data["asset"] == "BTCUSDT"
    assert data["setup"]["direction"] == "Long"


def test_text_without_mention_returns_null(client):
    response = client.post("/api/v1/mention", json={"text": "long btc?"})

    assert response.status_code == 200
    assert response.json() is None


def test_support(client):
    response = client.post("/api/v1/support", json={"message": "hi", "session_id": "session_1"})

    assert response.status_code == 200
    assert response.json() == {"reply": "echo: hi", "session_id": "session_1"}


def test_ticker(client):
    response = client.get("/api/v1/market/ticker/btcusdt")

    assert response.status_code == 200
    assert response.json()["price"] == 150.0


def test_ticker_upstream_failure(client):
    assert client.get("/api/v1/market/ticker/XRPUSDT").status_code == 502


def test_health():
    from clon.main import app

    response = TestClient(app).get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
