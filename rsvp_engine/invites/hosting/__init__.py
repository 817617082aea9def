from functools import lru_cache

from rsvp_engine.invites.hosting.publisher import (
    DisabledPublisher,
    DocumentPublisher,
    HttpDocumentPublisher,
)
from rsvp_engine.invites.hosting.resolver import HostingLinkResolver, build_local_rsvp_url


@lru_cache
def get_hosting_link_resolver() -> HostingLinkResolver:
    publisher = HttpDocumentPublisher()
    if not publisher.is_ready():
        publisher = DisabledPublisher()
    return HostingLinkResolver(publisher=publisher)


__all__ = [
    "DocumentPublisher",
    "HostingLinkResolver",
    "HttpDocumentPublisher",
    "build_local_rsvp_url",
    "get_hosting_link_resolver",
]
