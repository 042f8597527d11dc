# growgraph/services/career_advisor.py
import asyncio
import logging
from typing import Any, Protocol
import httpx
from growgraph.core.exceptions import RemoteCallFailure
from growgraph.models.career import UserProfile

logger = logging.getLogger(__name__)


class CareerAdvisor(Protocol):
    """The remote service that proposes careers and describes them."""

    async def get_suggestions(self, node_label: str) -> Any: ...

    async def get_career_detail(self, career_title: str) -> Any: ...

    async def generate_initial_mind_map(self, profile: UserProfile) -> Any: ...


class HttpCareerAdvisor:
    """
    JSON-over-HTTP client for the career service.

    Responses are returned decoded but otherwise unvalidated; shaping them is
    the caller's job. Every failure surfaces as `RemoteCallFailure`.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        retries: int = 3,
        retry_delay: float = 0.5,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.retries = max(1, retries)
        self.retry_delay = retry_delay
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def get_suggestions(self, node_label: str) -> Any:
        return await self._post("suggestions", {"nodeContent": node_label})

    async def get_career_detail(self, career_title: str) -> Any:
        return await self._post("career-details", {"careerTitle": career_title})

    async def generate_initial_mind_map(self, profile: UserProfile) -> Any:
        return await self._post("generate-mindmap", profile.model_dump(by_alias=True))

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _post(self, operation: str, payload: dict[str, Any]) -> Any:
        url = f"{self.base_url}/{operation}"
        response = await self._with_retry(operation, url, payload)

        if response.is_error:
            logger.error("%s returned HTTP %s", operation, response.status_code)
            raise RemoteCallFailure(
                operation, f"HTTP {response.status_code}", status_code=response.status_code
            )
        try:
            return response.json()
        except ValueError as exc:
            logger.error("%s returned a body that is not JSON: %s", operation, exc)
            raise RemoteCallFailure(operation, "Response body is not valid JSON.") from exc

    async def _with_retry(self, operation: str, url: str, payload: dict[str, Any]) -> httpx.Response:
        for attempt in range(self.retries):
            try:
                return await self.client.post(url, json=payload)
            except httpx.TransportError as exc:
                if attempt + 1 == self.retries:
                    logger.error("%s failed after %d attempts: %s", operation, self.retries, exc)
                    raise RemoteCallFailure(operation, str(exc) or type(exc).__name__) from exc
                logger.warning("%s attempt %d failed (%s); retrying.", operation, attempt + 1, exc)
                await asyncio.sleep(self.retry_delay * (attempt + 1))
            except httpx.HTTPError as exc:
                logger.error("%s failed: %s", operation, exc)
                raise RemoteCallFailure(operation, str(exc) or type(exc).__name__) from exc
