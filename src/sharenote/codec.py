"""URL-safe note tokens: DEFLATE + base64url, with a plain base64url fallback.

Tokens carry no mode marker. Decoding tries the compressed interpretation first
and falls back to plain base64url, so tokens written by either mode (or by
clients that predate compression) stay readable.
"""

import base64
import binascii
import zlib

import structlog

logger = structlog.get_logger(__name__)

COMPRESSION_LEVEL = 9


def _to_base64url(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii").replace("+", "-").replace("/", "_").rstrip("=")


def _from_base64url(token: str) -> bytes:
    """Restore the standard alphabet and padding, then decode strictly.

    Raises:
        binascii.Error: If the token is not valid base64
    """
    data = token.replace("-", "+").replace("_", "/")
    data += "=" * (-len(data) % 4)
    return base64.b64decode(data, validate=True)


def encode(text: str, compress: bool = True) -> str | None:
    """Encode text into a URL-safe token.

    Returns None when the text cannot be encoded (e.g. lone surrogates).
    Callers treat that as a hard failure.
    """
    try:
        raw = text.encode("utf-8")
        if compress:
            raw = zlib.compress(raw, COMPRESSION_LEVEL)
        return _to_base64url(raw)
    except (UnicodeEncodeError, zlib.error, TypeError, AttributeError) as e:
        logger.warning("token_encode_failed", error=str(e), compress=compress)
        return None


def decode(token: str, compress: bool = True) -> str | None:
    """Decode a token back into text, or None if it is not a valid token."""
    if not isinstance(token, str):
        return None

    if compress:
        try:
            return zlib.decompress(_from_base64url(token)).decode("utf-8")
        except (binascii.Error, ValueError, zlib.error):
            pass  # Not a compressed token, try the plain interpretation

    try:
        return _from_base64url(token).decode("utf-8")
    except (binascii.Error, ValueError) as e:
        logger.debug("token_decode_failed", error=str(e), length=len(token))
        return None


class Codec:
    """Encoder/decoder pair bound to one mode.

    With ``compress=False`` the codec behaves as if no compressor were
    available: plain base64url in both directions.
    """

    def __init__(self, compress: bool = True) -> None:
        self.compress = compress

    def encode(self, text: str) -> str | None:
        return encode(text, compress=self.compress)

    def decode(self, token: str) -> str | None:
        return decode(token, compress=self.compress)
