"""HttpRenderer — Renderer implementation talking to the screenshot service over HTTP."""

import time

import httpx

from skill_duel.config.domain.renderer import RendererConfig
from skill_duel.rendering.domain.html import extract_html
from skill_duel.rendering.domain.observer import RendererObserver
from skill_duel.rendering.domain.renderer import RendererHealth


class HttpRenderer:
    """POSTs HTML to ``{url}/screenshot`` and returns the base64 PNG it sends back.

    A ``transport`` may be injected so tests can serve canned responses
    without a network.
    """

    def __init__(
        self,
        config: RendererConfig,
        observer: RendererObserver,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._observer = observer
        self._transport = transport
        self._base_url = config.url.rstrip("/")

    def _client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=timeout, transport=self._transport)

    async def render(self, html: str) -> str | None:
        payload = {
            "html": extract_html(html),
            "width": self._config.width,
            "height": self._config.height,
        }
        start = time.monotonic()
        try:
            async with self._client(self._config.render_timeout_seconds) as client:
                response = await client.post(f"{self._base_url}/screenshot", json=payload)
                response.raise_for_status()
                screenshot = response.json().get("screenshot")
        except (httpx.HTTPError, ValueError, AttributeError) as exc:
            self._observer.render_failed(reason=str(exc) or type(exc).__name__)
            return None

        if not isinstance(screenshot, str) or not screenshot:
            self._observer.render_failed(reason="response carried no screenshot")
            return None

        self._observer.render_completed(
            duration_ms=int((time.monotonic() - start) * 1000),
            size_bytes=len(screenshot),
        )
        return screenshot

    async def health(self) -> RendererHealth:
        url = f"{self._base_url}/health"
        try:
            async with self._client(self._config.health_timeout_seconds) as client:
                response = await client.get(url)
        except httpx.TimeoutException:
            self._observer.renderer_unavailable(url=url, reason="Connection timeout")
            return RendererHealth(available=False, error="Connection timeout")
        except httpx.HTTPError as exc:
            reason = str(exc) or type(exc).__name__
            self._observer.renderer_unavailable(url=url, reason=reason)
            return RendererHealth(available=False, error=reason)

        if response.status_code != 200:
            reason = f"Server returned {response.status_code}"
            self._observer.renderer_unavailable(url=url, reason=reason)
            return RendererHealth(available=False, error=reason)

        try:
            data = response.json()
        except ValueError:
            data = {}
        browser = data.get("browser") if isinstance(data, dict) else None
        return RendererHealth(
            available=True,
            status=data.get("status") if isinstance(data, dict) else None,
            browser_running=None if browser is None else browser == "running",
        )
