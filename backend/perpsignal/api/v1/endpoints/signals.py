"""
Signal API Endpoints

Endpoints for on-demand and cached trading signals.
"""

import logging
import math
from typing import NoReturn, Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from perpsignal.core.config import settings
from perpsignal.schemas.indicators import IndicatorSnapshot
from perpsignal.schemas.signal import (
    EvaluateRequest,
    MarketBias,
    RiskLevel,
    ScoreBreakdown,
    SignalOutput,
    SignalRequest,
)
from perpsignal.services.base import ServiceError
from perpsignal.services.cache import get_signal_cache
from perpsignal.services.signal import get_signal_service

logger = logging.getLogger(__name__)

router = APIRouter()


class SignalResponse(BaseModel):
    """Signal for a symbol; signal is null while awaiting data."""
    symbol: str
    signal: Optional[SignalOutput] = None


class IndicatorsResponse(BaseModel):
    """Final indicator values and the scores derived from them."""
    symbol: str
    snapshot: Optional[IndicatorSnapshot] = None
    breakdown: Optional[ScoreBreakdown] = None
    bias: Optional[MarketBias] = None
    risk_level: Optional[RiskLevel] = None


def _json_safe(value):
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    return value


def _raise_http(e: ServiceError) -> NoReturn:
    if e.status_code >= 500:
        logger.error(f"Signal request failed: {e}")
    detail = {k: _json_safe(v) for k, v in e.to_detail().items()}
    raise HTTPException(status_code=e.status_code, detail=detail)


@router.post("/evaluate", response_model=SignalResponse)
async def evaluate_candles(request: EvaluateRequest):
    """
    Evaluate a caller-supplied candle window.

    Candles must be in ascending timestamp order. Fewer than 50
    candles yields a null signal.
    """
    service = get_signal_service()
    try:
        output = await service.evaluate_candles(
            request.symbol,
            request.candles,
            request.decision_policy,
        )
    except ServiceError as e:
        _raise_http(e)
    return SignalResponse(symbol=request.symbol.strip().upper(), signal=output)


@router.get("/{symbol}", response_model=SignalResponse)
async def get_signal(
    symbol: str,
    limit: Optional[int] = Query(default=None, ge=1, le=5000),
):
    """Fetch the most recent candles for a symbol and evaluate them now."""
    service = get_signal_service()
    request = SignalRequest(symbol=symbol, limit=limit or settings.candle_limit)
    try:
        output = await service.execute(request)
    except ServiceError as e:
        _raise_http(e)
    return SignalResponse(symbol=symbol.strip().upper(), signal=output)


@router.get("/{symbol}/latest", response_model=SignalResponse)
async def get_latest_signal(symbol: str):
    """Latest signal published by the runtime, null if none is cached."""
    symbol = symbol.strip().upper()
    cached = await get_signal_cache().get_signal(symbol)
    return SignalResponse(symbol=symbol, signal=cached)


@router.get("/{symbol}/indicators", response_model=IndicatorsResponse)
async def get_indicator_snapshot(
    symbol: str,
    limit: Optional[int] = Query(default=None, ge=1, le=5000),
):
    """Indicator values, category scores and risk after the last candle."""
    service = get_signal_service()
    request = SignalRequest(symbol=symbol, limit=limit or settings.candle_limit)
    try:
        result = await service.evaluate_detailed(request)
    except ServiceError as e:
        _raise_http(e)

    symbol = symbol.strip().upper()
    if result is None:
        return IndicatorsResponse(symbol=symbol)
    return IndicatorsResponse(
        symbol=symbol,
        snapshot=result.snapshot,
        breakdown=result.trading_signal.breakdown,
        bias=result.trading_signal.bias,
        risk_level=result.trading_signal.risk_level,
    )
