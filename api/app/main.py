from __future__ import annotations
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from backtest_review.config import ReviewSettings, load_settings, configure_logging
from backtest_review.schemas import BacktestDetail, BacktestReview, TradeTable

from .models import MetricsRequest, MetricsResponse, TradesRequest, Health
from .services.review import review_detail, review_metrics, review_trades


def get_settings(request: Request) -> ReviewSettings:
    return request.app.state.settings


def create_app(settings: ReviewSettings | None = None) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Backtest Review API", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.settings = settings

    @app.get("/health", response_model=Health)
    def health():
        return Health()

    @app.post("/review", response_model=BacktestReview)
    def review(detail: BacktestDetail, cfg: ReviewSettings = Depends(get_settings)):
        return review_detail(detail, cfg)

    @app.post("/review/metrics", response_model=MetricsResponse)
    def metrics(req: MetricsRequest, cfg: ReviewSettings = Depends(get_settings)):
        return review_metrics(req, cfg)

    @app.post("/review/trades", response_model=TradeTable)
    def trades(req: TradesRequest, cfg: ReviewSettings = Depends(get_settings)):
        return review_trades(req, cfg)

    return app


app = create_app()
