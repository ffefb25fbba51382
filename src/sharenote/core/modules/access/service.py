import secrets

import structlog

from sharenote.core.core import Service
from sharenote.errors import AuthenticationError

logger = structlog.get_logger(__name__)


class AccessService(Service):
    """Shared-secret gate for mutating and listing alias operations.

    This is non-cryptographic access control: the secret is a fixed string known
    to every owner client. It is only compared in constant time.
    """

    def ensure_master_key(self, presented: str | None) -> None:
        """Raise AuthenticationError unless the presented secret matches the configured one."""
        expected = self.core.config.master_key
        if not presented or not expected or not secrets.compare_digest(presented.encode(), expected.encode()):
            logger.info("master_key_rejected", presented=presented is not None)
            raise AuthenticationError
