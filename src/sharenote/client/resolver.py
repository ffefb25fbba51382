"""Turn incoming share links back into read-only notes."""

import re
from urllib.parse import parse_qs, urlsplit

import structlog
from pydantic import ValidationError

from sharenote.client.api import AliasClient, AliasServiceError
from sharenote.client.models import SharedNote, SharePayload
from sharenote.codec import Codec

logger = structlog.get_logger(__name__)

ALIAS_PATH_RE = re.compile(r"^/([a-zA-Z0-9_-]+)/?$")
VIEW_PATHS = {"view", "view.html", "index.html"}


def parse_payload(text: str) -> SharePayload | None:
    try:
        return SharePayload.model_validate_json(text)
    except ValidationError as e:
        logger.debug("share_payload_invalid", error=str(e))
        return None


class LinkResolver:
    """Resolves ``/view?d=<token>`` links through the codec and ``/<alias>`` links through the alias store.

    Every failure ends in None, which callers render as a not-found state.
    """

    def __init__(self, codec: Codec | None = None, alias_client: AliasClient | None = None, base_url: str = "") -> None:
        self.codec = codec or Codec()
        self.alias_client = alias_client
        # Path the viewer is mounted under, e.g. "/notes" for https://host/notes
        self.base_path = urlsplit(base_url).path.rstrip("/")

    def decode_token(self, token: str) -> SharePayload | None:
        text = self.codec.decode(token)
        if text is None:
            return None
        return parse_payload(text)

    async def resolve(self, url: str) -> SharedNote | None:
        parts = urlsplit(url)
        params = parse_qs(parts.query)
        embed = params.get("embed", [""])[0] == "true"

        token = params.get("d", [""])[0]
        if token:
            payload = self.decode_token(token)
            if payload is None:
                return None
            return SharedNote(title=payload.title, content=payload.content, shared_at=payload.shared_at, embed=embed)

        path = parts.path
        if self.base_path and path.startswith(self.base_path + "/"):
            path = path[len(self.base_path) :]
        match = ALIAS_PATH_RE.match(path)
        if match is None or match.group(1) in VIEW_PATHS:
            return None
        return await self.resolve_alias(match.group(1), embed=embed)

    async def resolve_alias(self, alias: str, embed: bool = False) -> SharedNote | None:
        if self.alias_client is None:
            return None
        try:
            record = await self.alias_client.get(alias)
        except AliasServiceError as e:
            logger.warning("alias_resolve_failed", alias=alias, error=str(e))
            return None
        if record is None:
            return None

        payload = self.decode_token(record.data)
        if payload is None:
            logger.warning("alias_token_undecodable", alias=alias)
            return None
        return SharedNote(
            title=payload.title,
            content=payload.content,
            shared_at=payload.shared_at,
            alias=alias,
            views=record.views,
            embed=embed,
        )
