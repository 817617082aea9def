import asyncio
import html
import logging
from collections.abc import Callable

from rsvp_engine.config.settings import settings
from rsvp_engine.core.enums import HostingMethod
from rsvp_engine.invites.dtos import ResolvedLinkDTO
from rsvp_engine.invites.hosting.publisher import DocumentPublisher
from rsvp_engine.invites.hosting.templates import HostedDocumentTemplates

logger = logging.getLogger(__name__)

UrlBuilder = Callable[[str, str], str]


def build_local_rsvp_url(event_id: str, invite_id: str, base_url: str | None = None) -> str:
    base = (base_url or settings.app_url).rstrip("/")
    return f"{base}/rsvp/{event_id}/{invite_id}"


class HostingLinkResolver:
    """Decides whether an invite links to the app or to an externally hosted document.

    External hosting is best effort: when the publisher is not ready, fails,
    or exceeds the timeout, the local URL is used instead and the returned
    ``hosting_method`` says so.
    """

    def __init__(
        self,
        publisher: DocumentPublisher,
        url_builder: UrlBuilder = build_local_rsvp_url,
        timeout: float | None = None,
    ) -> None:
        self._publisher = publisher
        self._url_builder = url_builder
        self._timeout = timeout if timeout is not None else settings.external_hosting_timeout_seconds

    async def resolve(
        self,
        event_id: str,
        invite_id: str,
        prefer_external_hosting: bool,
        timeout: float | None = None,
    ) -> ResolvedLinkDTO:
        local_url = self._url_builder(event_id, invite_id)
        if not prefer_external_hosting:
            return ResolvedLinkDTO(rsvp_url=local_url, hosting_method=HostingMethod.LOCAL)

        if not self._publisher.is_ready():
            logger.info("External hosting not ready, using local link for invite %s", invite_id)
            return ResolvedLinkDTO(rsvp_url=local_url, hosting_method=HostingMethod.LOCAL)

        content = HostedDocumentTemplates.RSVP_DOCUMENT_HTML.format(
            rsvp_url=html.escape(local_url, quote=True),
            event_id=html.escape(event_id, quote=True),
            invite_id=html.escape(invite_id, quote=True),
        )
        try:
            hosted_url = await asyncio.wait_for(
                self._publisher.publish(content),
                timeout=timeout if timeout is not None else self._timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("External hosting timed out for invite %s, falling back to local link", invite_id)
            return ResolvedLinkDTO(rsvp_url=local_url, hosting_method=HostingMethod.LOCAL)
        except Exception as e:
            logger.warning(
                "External hosting failed for invite %s, falling back to local link: %s", invite_id, e
            )
            return ResolvedLinkDTO(rsvp_url=local_url, hosting_method=HostingMethod.LOCAL)

        if not hosted_url:
            logger.warning("External hosting returned no URL for invite %s, using local link", invite_id)
            return ResolvedLinkDTO(rsvp_url=local_url, hosting_method=HostingMethod.LOCAL)

        return ResolvedLinkDTO(rsvp_url=hosted_url, hosting_method=HostingMethod.EXTERNALLY_HOSTED)
