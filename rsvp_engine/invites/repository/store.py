"""Invite store - owns invite records and returns immutable DTOs."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from functools import lru_cache
from typing import Any

from rsvp_engine.config.settings import settings
from rsvp_engine.core.clock import Clock, utc_now
from rsvp_engine.core.collections import EventCollection
from rsvp_engine.core.enums import InviteStatus
from rsvp_engine.core.ids import new_id
from rsvp_engine.core.normalization import clean_text
from rsvp_engine.errors import CapacityExceededError, NotFoundError, ValidationError
from rsvp_engine.invites.dtos import GuestRowDTO, Invite, InviteStatsDTO
from rsvp_engine.invites.hosting.resolver import HostingLinkResolver
from rsvp_engine.storage import get_key_value_store
from rsvp_engine.storage.base import KeyValueStore

logger = logging.getLogger(__name__)

INVITES_KEY = "event:{event_id}:invites"
INVITE_INDEX_KEY = "invite:{invite_id}"


class InviteStore(ABC):
    @abstractmethod
    async def create_batch(
        self,
        event_id: str,
        count: Any,
        link_resolver: HostingLinkResolver,
        prefer_external_hosting: bool = False,
    ) -> list[Invite]:
        """Create ``count`` anonymous invites, returned in creation order."""
        raise NotImplementedError

    @abstractmethod
    async def create_personalized(
        self,
        event_id: str,
        guest_list: Iterable[GuestRowDTO | Mapping[str, Any]],
        link_resolver: HostingLinkResolver,
        prefer_external_hosting: bool = False,
    ) -> list[Invite]:
        """Create one invite per non-blank guest row."""
        raise NotImplementedError

    @abstractmethod
    async def get(self, invite_id: str) -> Invite:
        """Return the invite or raise ``NotFoundError``."""
        raise NotImplementedError

    @abstractmethod
    async def list_by_event(self, event_id: str) -> list[Invite]:
        """Return the event's invites ordered by creation time."""
        raise NotImplementedError

    @abstractmethod
    async def deactivate(self, invite_id: str) -> Invite:
        """Mark the invite deactivated. Calling it again is a no-op."""
        raise NotImplementedError

    async def stats(self, event_id: str) -> InviteStatsDTO:
        invites = await self.list_by_event(event_id)
        active = sum(1 for invite in invites if invite.status == InviteStatus.ACTIVE)
        personalized = sum(1 for invite in invites if invite.is_personalized)
        return InviteStatsDTO(
            event_id=event_id,
            total_invites=len(invites),
            active_invites=active,
            deactivated_invites=len(invites) - active,
            personalized_invites=personalized,
            anonymous_invites=len(invites) - personalized,
        )


class KeyValueInviteStore(InviteStore):
    """Invite store persisted through the key-value contract.

    Each event's invites live under ``event:{id}:invites``; ``invite:{id}``
    records the owning event so an invite can be found from its id alone.
    Index entries are saved before the batch, so a failed create never
    leaves listed invites that ``get`` cannot find.
    """

    def __init__(
        self,
        kv: KeyValueStore,
        max_batch_size: int | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self._kv = kv
        self._invites = EventCollection(kv, Invite, INVITES_KEY)
        self._max_batch_size = max_batch_size or settings.max_invite_batch_size
        self._clock = clock

    async def create_batch(
        self,
        event_id: str,
        count: Any,
        link_resolver: HostingLinkResolver,
        prefer_external_hosting: bool = False,
    ) -> list[Invite]:
        event_id = self._require_event_id(event_id)
        if isinstance(count, bool) or not isinstance(count, int):
            raise ValidationError("count", "Invite count must be a positive integer")
        if count < 1:
            raise ValidationError("count", "Invite count must be a positive integer")
        self._check_capacity(count)

        rows = [GuestRowDTO() for _ in range(count)]
        return await self._create(event_id, rows, link_resolver, prefer_external_hosting)

    async def create_personalized(
        self,
        event_id: str,
        guest_list: Iterable[GuestRowDTO | Mapping[str, Any]],
        link_resolver: HostingLinkResolver,
        prefer_external_hosting: bool = False,
    ) -> list[Invite]:
        event_id = self._require_event_id(event_id)
        rows = []
        for row in guest_list or []:
            guest = self._to_guest_row(row)
            if guest.name or guest.email or guest.message:
                rows.append(guest)
        if not rows:
            return []
        self._check_capacity(len(rows))
        return await self._create(event_id, rows, link_resolver, prefer_external_hosting)

    async def get(self, invite_id: str) -> Invite:
        invite_id = clean_text(invite_id)
        event_id = await self._event_id_for(invite_id)
        if event_id is not None:
            for invite in await self._invites.read(event_id):
                if invite.id == invite_id:
                    return invite
        raise NotFoundError("invite", invite_id)

    async def list_by_event(self, event_id: str) -> list[Invite]:
        invites = await self._invites.read(clean_text(event_id))
        # sorted() is stable, so invites created in the same instant keep batch order
        return sorted(invites, key=lambda invite: invite.created_at)

    async def deactivate(self, invite_id: str) -> Invite:
        invite = await self.get(invite_id)
        async with self._invites.lock(invite.event_id):
            invites = await self._invites.read(invite.event_id)
            for position, current in enumerate(invites):
                if current.id != invite.id:
                    continue
                if current.status == InviteStatus.DEACTIVATED:
                    return current
                updated = current.model_copy(
                    update={
                        "status": InviteStatus.DEACTIVATED,
                        "deactivated_at": self._clock(),
                    }
                )
                invites[position] = updated
                await self._invites.write(invite.event_id, invites)
                logger.info("Deactivated invite %s for event %s", invite.id, invite.event_id)
                return updated
        raise NotFoundError("invite", invite_id)

    async def _create(
        self,
        event_id: str,
        rows: list[GuestRowDTO],
        link_resolver: HostingLinkResolver,
        prefer_external_hosting: bool,
    ) -> list[Invite]:
        # Links are resolved before taking the lock; external hosting may be slow
        created = []
        for row in rows:
            invite_id = new_id("invite")
            link = await link_resolver.resolve(event_id, invite_id, prefer_external_hosting)
            created.append(
                Invite(
                    id=invite_id,
                    event_id=event_id,
                    guest_name=row.name or "",
                    guest_email=row.email or "",
                    personal_message=row.message or "",
                    rsvp_url=link.rsvp_url,
                    hosting_method=link.hosting_method,
                    status=InviteStatus.ACTIVE,
                    created_at=self._clock(),
                )
            )

        for invite in created:
            await self._kv.save(
                INVITE_INDEX_KEY.format(invite_id=invite.id), event_id.encode("utf-8")
            )

        async with self._invites.lock(event_id):
            existing = await self._invites.read(event_id)
            await self._invites.write(event_id, existing + created)

        logger.info("Created %d invites for event %s", len(created), event_id)
        return created

    async def _event_id_for(self, invite_id: str) -> str | None:
        if not invite_id:
            return None
        raw = await self._kv.load(INVITE_INDEX_KEY.format(invite_id=invite_id))
        return raw.decode("utf-8") if raw is not None else None

    def _check_capacity(self, count: int) -> None:
        if count > self._max_batch_size:
            raise CapacityExceededError(requested=count, limit=self._max_batch_size)

    @staticmethod
    def _require_event_id(event_id: str) -> str:
        event_id = clean_text(event_id)
        if not event_id:
            raise ValidationError("event_id", "Event ID is required")
        return event_id

    @staticmethod
    def _to_guest_row(row: GuestRowDTO | Mapping[str, Any]) -> GuestRowDTO:
        if isinstance(row, GuestRowDTO):
            name, email, message = row.name, row.email, row.message
        elif isinstance(row, Mapping):
            name, email, message = row.get("name"), row.get("email"), row.get("message")
        else:
            name = email = message = None
        return GuestRowDTO(
            name=clean_text(name),
            email=clean_text(email),
            message=clean_text(message),
        )


@lru_cache
def get_invite_store() -> InviteStore:
    return KeyValueInviteStore(get_key_value_store())
