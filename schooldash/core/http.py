# schooldash/core/http.py
from typing import Any, Optional

import httpx
from tenacity import retry, stop_after_attempt, wait_fixed, retry_if_exception_type

from schooldash.core.config import settings
from schooldash.core.errors import ApiError, NetworkError
from schooldash.core.logging import log


class TokenStore:
    """Holds the bearer token for the lifetime of the process"""

    def __init__(self, token: Optional[str] = None):
        self._token = token

    def get(self) -> Optional[str]:
        return self._token

    def set(self, token: Optional[str]):
        self._token = token or None

    def clear(self):
        self._token = None


def _decode(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class CoreHTTP:
    def __init__(
        self,
        base_url: str | None = None,
        tokens: TokenStore | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.API_BASE).rstrip("/")
        self.tokens = tokens or TokenStore()
        # httpx requires all four timeout parts (or a single default)
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(
                connect=settings.HTTP_CONNECT_TIMEOUT,
                read=settings.HTTP_READ_TIMEOUT,
                write=settings.HTTP_READ_TIMEOUT,
                pool=settings.HTTP_CONNECT_TIMEOUT,
            ),
            headers={"Accept": "application/json", "Content-Type": "application/json"},
            transport=transport,
        )

    async def close(self):
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    def headers(self) -> dict:
        h = {}
        token = self.tokens.get()
        if token:
            h["Authorization"] = token if token.lower().startswith("bearer ") else f"Bearer {token}"
        return h

    @retry(stop=stop_after_attempt(settings.RETRY_ATTEMPTS), wait=wait_fixed(0.4),
           retry=retry_if_exception_type(httpx.TransportError), reraise=True)
    async def _get(self, url: str, params: dict | None) -> httpx.Response:
        return await self._client.get(url, params=params, headers=self.headers())

    async def _send(self, method: str, path: str, data: Any = None, params: dict | None = None) -> Any:
        url = self.base_url + path
        log.debug("core_http_request", method=method, path=path, has_auth="Authorization" in self.headers())

        try:
            if method == "GET":
                response = await self._get(url, params)
            else:
                response = await self._client.request(method, url, json=data, params=params, headers=self.headers())
        except httpx.TransportError as e:
            log.error("core_http_unreachable", method=method, url=url, error=str(e), error_type=type(e).__name__)
            raise NetworkError() from e

        log.debug("core_http_response", method=method, path=path, status_code=response.status_code)

        if response.status_code >= 400:
            payload = _decode(response)
            log.warning("core_http_error", method=method, path=path, status_code=response.status_code)
            raise ApiError(response.status_code, payload)

        return _decode(response)

    async def get(self, path: str, params: dict | None = None) -> Any:
        return await self._send("GET", path, params=params)

    async def post(self, path: str, data: dict | None = None) -> Any:
        return await self._send("POST", path, data=data if data is not None else {})

    async def put(self, path: str, data: dict | None = None) -> Any:
        return await self._send("PUT", path, data=data if data is not None else {})

    async def delete(self, path: str, data: dict | None = None) -> Any:
        return await self._send("DELETE", path, data=data)
