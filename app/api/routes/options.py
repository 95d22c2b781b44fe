"""Option chain API routes."""
from typing import Optional
from fastapi import APIRouter, Depends, Header, status
from fastapi.responses import JSONResponse
import logging

from app.core.config import settings
from app.providers import ProviderError
from app.providers.schwab import SchwabClient, get_schwab_client
from app.services.chain_ranker import rank
from app.utils.time import get_market_time

router = APIRouter(tags=["options"])
logger = logging.getLogger(__name__)


async def _ranked_chain(
    symbol: Optional[str],
    access_token: Optional[str],
    client: SchwabClient
) -> JSONResponse:
    """Validate the request, fetch the chain and rank it."""
    if not access_token:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"error": "Access token required"}
        )

    if not symbol or not symbol.strip():
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Symbol is required"}
        )

    symbol = symbol.strip()

    try:
        reference_time = get_market_time(settings.market_timezone)
        raw = await client.get_option_chain(symbol, access_token, reference_time)
        logger.debug(f"Underlying price for {symbol}: {raw.get('underlyingPrice')}")

        result = rank(
            raw,
            symbol,
            reference_time,
            strike_range=settings.strike_range,
            min_open_interest=settings.min_open_interest,
            window_days=settings.expiry_window_days,
            max_results=settings.max_results
        )
    except ProviderError as e:
        if e.status_code is not None:
            logger.warning(f"Upstream error for {symbol}: HTTP {e.status_code}")
            return JSONResponse(
                status_code=e.status_code,
                content={"error": "Failed to fetch options data", "details": e.details}
            )
        logger.error(f"Options API error for {symbol}: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to fetch options data", "details": str(e), "symbol": symbol}
        )
    except Exception as e:
        logger.error(f"Options API error for {symbol}: {e}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to fetch options data", "details": str(e), "symbol": symbol}
        )

    logger.info(
        f"✓ Ranked {symbol}: {len(result.calls)} calls, {len(result.puts)} puts"
    )
    return JSONResponse(status_code=status.HTTP_200_OK, content=result.to_dict())


@router.get("/options/{symbol}")
async def get_options(
    symbol: str,
    access_token: Optional[str] = Header(None, alias="access_token", convert_underscores=False),
    client: SchwabClient = Depends(get_schwab_client)
):
    """
    Get high open interest calls and puts for a symbol.

    Requires the broker access token in the ``access_token`` header.
    """
    return await _ranked_chain(symbol, access_token, client)


@router.get("/options")
async def get_options_by_query(
    symbol: Optional[str] = None,
    access_token: Optional[str] = Header(None, alias="access_token", convert_underscores=False),
    client: SchwabClient = Depends(get_schwab_client)
):
    """Same as ``/options/{symbol}`` with the symbol passed as a query parameter."""
    return await _ranked_chain(symbol, access_token, client)


@router.get("/symbols")
async def get_dashboard_symbols():
    """Symbols shown on the dashboard and the filter parameters applied to each."""
    return {
        "symbols": settings.dashboard_symbols_list,
        "filters": {
            "strike_range": settings.strike_range,
            "min_open_interest": settings.min_open_interest,
            "expiry_window_days": settings.expiry_window_days,
            "max_results": settings.max_results
        }
    }
