"""Share link construction.

A share always produces a self-contained ``/view?d=<token>`` link. Notes with an
alias additionally get the token stored in the alias store and, when that
succeeds, the short ``/<alias>`` link becomes the canonical one.
"""

import structlog

from sharenote import utils
from sharenote.client.api import AliasClient, AliasServiceError
from sharenote.client.models import Note, ShareLink, SharePayload
from sharenote.codec import Codec
from sharenote.errors import ShareError

logger = structlog.get_logger(__name__)

MAX_URL_LENGTH = 15000
TRUNCATED_CONTENT_LENGTH = 8000
TRUNCATION_MARKER = "\n\n...(truncated)"


def build_view_url(base_url: str, token: str) -> str:
    return f"{base_url}/view?d={token}"


def build_alias_url(base_url: str, alias: str) -> str:
    return f"{base_url}/{alias}"


def build_embed_code(url: str) -> str:
    """HTML snippet embedding the stripped-down rendering of a shared note."""
    separator = "&" if "?" in url else "?"
    return (
        f'<iframe src="{url}{separator}embed=true" width="100%" height="500" frameborder="0" '
        'style="border: 1px solid #30363d; border-radius: 8px;"></iframe>'
    )


class LinkBuilder:
    def __init__(
        self,
        base_url: str,
        codec: Codec | None = None,
        alias_client: AliasClient | None = None,
        max_url_length: int = MAX_URL_LENGTH,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.codec = codec or Codec()
        self.alias_client = alias_client
        self.max_url_length = max_url_length

    def encode_payload(self, payload: SharePayload) -> str:
        token = self.codec.encode(payload.to_json())
        if token is None:
            raise ShareError("Error creating share link")
        return token

    def build_embedded(self, payload: SharePayload) -> tuple[str, str, bool]:
        """Encode the payload into a view URL that fits under the length ceiling.

        Returns (url, token, truncated). Oversized content is cut to an
        8000-character prefix plus a visible marker; if that still does not fit,
        the prefix keeps halving.

        Raises:
            ShareError: If the payload cannot be encoded or never fits
        """
        token = self.encode_payload(payload)
        url = build_view_url(self.base_url, token)
        if len(url) <= self.max_url_length:
            return url, token, False

        # Always keep a strict prefix so truncation is detectable by comparing content
        prefix_length = min(TRUNCATED_CONTENT_LENGTH, max(len(payload.content) - 1, 0))
        while True:
            short = payload.model_copy(update={"content": payload.content[:prefix_length] + TRUNCATION_MARKER})
            token = self.encode_payload(short)
            url = build_view_url(self.base_url, token)
            if len(url) <= self.max_url_length:
                logger.info("share_content_truncated", original_length=len(payload.content), kept=prefix_length)
                return url, token, True
            if prefix_length == 0:
                raise ShareError("Note title is too long to share as a link")
            prefix_length //= 2

    async def build_share_url(self, note: Note) -> ShareLink:
        """Create a fresh share link for a note.

        Raises:
            ShareError: If the note cannot be encoded. Nothing is stored in that case.
        """
        payload = SharePayload(title=note.title, content=note.content, shared_at=utils.now())
        fallback_url, embedded_token, truncated = self.build_embedded(payload)
        link = ShareLink(
            url=fallback_url,
            token=embedded_token,
            fallback_url=fallback_url,
            shared_at=payload.shared_at,
            truncated=truncated,
        )

        alias = utils.normalize_alias(note.alias)
        if not alias:
            return link
        link.alias = alias
        if self.alias_client is None:
            link.alias_error = "Alias store not configured"
            return link

        # The alias store has no URL ceiling, so it always gets the full content
        full_token = self.encode_payload(payload) if truncated else embedded_token
        try:
            await self.alias_client.share(alias, full_token, note.title)
        except AliasServiceError as e:
            logger.warning("alias_share_failed", alias=alias, error=str(e))
            link.alias_error = str(e)
            return link

        link.url = build_alias_url(self.base_url, alias)
        link.token = full_token
        link.alias_saved = True
        return link
