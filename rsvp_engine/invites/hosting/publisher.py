from typing import Protocol

import httpx

from rsvp_engine.config.settings import settings


class DocumentPublisher(Protocol):
    """Collaborator that hosts an RSVP document somewhere publicly reachable."""

    def is_ready(self) -> bool: ...

    async def publish(self, content: str) -> str: ...


class PublisherConfig(Protocol):
    external_hosting_url: str
    external_hosting_token: str


class HttpDocumentPublisher:
    """Publishes RSVP documents to a document-hosting HTTP endpoint.

    The endpoint receives the rendered HTML and replies with JSON carrying
    the public ``url`` of the stored document.
    """

    def __init__(
        self,
        config: PublisherConfig = settings,
        http_client_class: type[httpx.AsyncClient] = httpx.AsyncClient,
    ):
        self._config = config
        self._http_client_class = http_client_class

    def is_ready(self) -> bool:
        return bool(self._config.external_hosting_url)

    async def publish(self, content: str) -> str:
        headers = {"Content-Type": "text/html; charset=utf-8"}
        if self._config.external_hosting_token:
            headers["Authorization"] = f"Bearer {self._config.external_hosting_token}"

        async with self._http_client_class() as client:
            response = await client.post(
                self._config.external_hosting_url,
                content=content.encode("utf-8"),
                headers=headers,
            )
            response.raise_for_status()
            url = response.json().get("url")

        if not url:
            raise ValueError("Hosting service did not return a document URL")
        return url


class DisabledPublisher:
    """Publisher used when no external hosting is configured."""

    def is_ready(self) -> bool:
        return False

    async def publish(self, content: str) -> str:
        raise RuntimeError("External hosting is not configured")
