"""Schwab OAuth API routes."""
from typing import Optional
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import BaseModel
import logging

from app.providers import ProviderError
from app.providers.schwab import SchwabClient, build_authorize_url, get_schwab_client

router = APIRouter(tags=["authentication"])
logger = logging.getLogger(__name__)


# Request Models
class TokenRequest(BaseModel):
    """Authorization code exchange request."""
    code: Optional[str] = None


class RefreshRequest(BaseModel):
    """Refresh token grant request."""
    refresh_token: Optional[str] = None


@router.get("/auth")
async def authorize():
    """Redirect the browser to the Schwab login page."""
    return RedirectResponse(url=build_authorize_url())


@router.post("/token")
async def exchange_token(
    token_request: TokenRequest,
    client: SchwabClient = Depends(get_schwab_client)
):
    """
    Exchange an authorization code for tokens.

    Returns the broker's token response unchanged.
    """
    if not token_request.code:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Authorization code is required"}
        )

    try:
        data = await client.exchange_code(token_request.code)
    except ProviderError as e:
        if e.status_code is None:
            logger.error(f"Token exchange error: {e}")
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"error": "Token exchange failed", "details": str(e)}
            )
        return JSONResponse(
            status_code=e.status_code,
            content={"error": "Schwab API error", "details": e.details}
        )
    except Exception as e:
        logger.error(f"Token exchange error: {e}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Token exchange failed", "details": str(e)}
        )

    logger.info("✓ Authorization code exchanged")
    return JSONResponse(content=data)


@router.post("/refresh")
async def refresh_token(
    refresh_request: RefreshRequest,
    client: SchwabClient = Depends(get_schwab_client)
):
    """
    Refresh an expired access token.

    Returns the broker's token response unchanged.
    """
    if not refresh_request.refresh_token:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Refresh token is required"}
        )

    try:
        data = await client.refresh_access_token(refresh_request.refresh_token)
    except ProviderError as e:
        logger.error(f"Refresh token failed: {e.details}")
        return JSONResponse(
            status_code=e.status_code or status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Token refresh failed", "details": e.details}
        )
    except Exception as e:
        logger.error(f"Token refresh error: {e}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Token refresh failed", "details": str(e)}
        )

    logger.info("✓ Access token refreshed")
    return JSONResponse(content=data)
