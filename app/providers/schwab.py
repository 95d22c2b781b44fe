"""Charles Schwab market data and OAuth client."""
import httpx
from datetime import date, datetime
from typing import AsyncGenerator, Optional, Union
from urllib.parse import urlencode
import logging
from app.providers import ChainProvider, ProviderError
from app.core.config import settings
from app.utils.time import fetch_date_range


logger = logging.getLogger(__name__)

AUTHORIZE_PATH = "/v1/oauth/authorize"
OAUTH_SCOPE = "readonly"


def build_authorize_url(
    client_id: Optional[str] = None,
    redirect_uri: Optional[str] = None,
    base_url: Optional[str] = None
) -> str:
    """
    Broker login URL the user is redirected to for the authorization-code grant.

    Needs no HTTP client; missing arguments come from settings.
    """
    query = urlencode({
        "client_id": client_id or settings.schwab_client_id,
        "redirect_uri": redirect_uri or settings.schwab_redirect_uri,
        "response_type": "code",
        "scope": OAUTH_SCOPE,
    })
    base = (base_url or settings.schwab_base_url).rstrip("/")
    return f"{base}{AUTHORIZE_PATH}?{query}"



class SchwabClient(ChainProvider):
    """Thin forwarder for the Schwab chain endpoint and OAuth token grants.

    Every method issues exactly one HTTP request. Failures are surfaced as
    ProviderError immediately; nothing is retried.
    """

    TOKEN_PATH = "/v1/oauth/token"
    CHAINS_PATH = "/marketdata/v1/chains"

    def __init__(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        redirect_uri: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        fetch_window_days: Optional[int] = None
    ):
        self.client_id = client_id or settings.schwab_client_id
        self.client_secret = client_secret or settings.schwab_client_secret
        self.redirect_uri = redirect_uri or settings.schwab_redirect_uri
        self.base_url = (base_url or settings.schwab_base_url).rstrip("/")
        self.fetch_window_days = fetch_window_days or settings.fetch_window_days
        self.client = httpx.AsyncClient(timeout=timeout or settings.http_timeout_seconds)

    def authorize_url(self) -> str:
        """Authorize URL for this client's credentials."""
        return build_authorize_url(self.client_id, self.redirect_uri, self.base_url)

    async def exchange_code(self, code: str) -> dict:
        """Exchange an authorization code for access and refresh tokens."""
        logger.info("Exchanging authorization code with Schwab")
        return await self._post_token({
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self.redirect_uri,
        })

    async def refresh_access_token(self, refresh_token: str) -> dict:
        """Obtain a new access token from a refresh token."""
        logger.info("Refreshing Schwab access token")
        return await self._post_token({
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
        })

    async def _post_token(self, form: dict) -> dict:
        """
        POST a grant to the token endpoint using HTTP Basic client credentials.

        Returns:
            The broker's JSON response, unmodified

        Raises:
            ProviderError: With the broker's status and body on non-2xx, or
                without a status on transport or decoding failures
        """
        try:
            response = await self.client.post(
                f"{self.base_url}{self.TOKEN_PATH}",
                data=form,
                auth=httpx.BasicAuth(self.client_id, self.client_secret),
                headers={"Accept": "application/json"},
            )
        except httpx.TimeoutException as e:
            raise ProviderError(f"Schwab token endpoint timeout: {str(e)}")
        except httpx.HTTPError as e:
            raise ProviderError(f"Schwab token endpoint connection error: {str(e)}")

        logger.info(f"Schwab token response status: {response.status_code}")

        if not response.is_success:
            try:
                details = response.json()
            except ValueError:
                details = response.text
            logger.warning(f"Schwab token grant {form['grant_type']} failed: {details}")
            raise ProviderError(
                f"Schwab token endpoint returned {response.status_code}",
                status_code=response.status_code,
                details=details
            )

        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(f"Invalid JSON from Schwab token endpoint: {str(e)}")

    async def get_option_chain(
        self,
        symbol: str,
        access_token: str,
        reference_time: Union[date, datetime]
    ) -> dict:
        """
        Fetch the raw option chain for a symbol.

        The requested range runs from the reference date to
        ``fetch_window_days`` later, for all contract types, with quotes.
        """
        from_date, to_date = fetch_date_range(reference_time, self.fetch_window_days)
        params = {
            "symbol": symbol.upper(),
            "contractType": "ALL",
            "includeQuotes": "true",
            "fromDate": from_date,
            "toDate": to_date,
        }
        logger.info(f"Fetching option chain for {params['symbol']} ({from_date} to {to_date})")

        try:
            response = await self.client.get(
                f"{self.base_url}{self.CHAINS_PATH}",
                params=params,
                headers={
                    "Authorization": f"Bearer {access_token}",
                    "Accept": "application/json",
                },
            )
        except httpx.TimeoutException as e:
            raise ProviderError(f"Schwab API timeout: {str(e)}")
        except httpx.HTTPError as e:
            raise ProviderError(f"Schwab API connection error: {str(e)}")

        logger.info(f"Schwab market data response status: {response.status_code}")

        if not response.is_success:
            body = response.text
            logger.error(f"Schwab market data error for {symbol}: {body}")
            raise ProviderError(
                f"HTTP {response.status_code}: {body}",
                status_code=response.status_code,
                details=body
            )

        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(f"Invalid JSON from Schwab API: {str(e)}")

    async def close(self):
        """Close HTTP client."""
        await self.client.aclose()


async def get_schwab_client() -> AsyncGenerator[SchwabClient, None]:
    """FastAPI dependency yielding a request-scoped Schwab client."""
    client = SchwabClient()
    try:
        yield client
    finally:
        await client.close()
