"""Document ID and timestamp generator.

Generates ``_id`` values in ``id_xxxxxxxxx`` format (prefix + 9 lowercase
alphanumeric characters) and ``createdAt`` timestamps for inserted documents.
"""

import re
import secrets
import string
from datetime import datetime, timezone


class DocumentIdGenerator:
    """Generator for document IDs and creation timestamps.

    The ``id_`` prefix keeps generated IDs apart from typical user-supplied
    keys. Capacity is 36**9 (about 1e14) IDs; collisions are not checked.

    Example IDs: id_k3j9x0a1b, id_00zz81mqp
    """

    PREFIX = "id_"
    TOKEN_LENGTH = 9
    ALPHABET = string.ascii_lowercase + string.digits

    PATTERN = re.compile(rf"^{PREFIX}[a-z0-9]{{{TOKEN_LENGTH}}}$")

    @classmethod
    def generate(cls) -> str:
        """Generate a new random document ID.

        Returns:
            A string such as ``id_k3j9x0a1b``.
        """
        token = "".join(secrets.choice(cls.ALPHABET) for _ in range(cls.TOKEN_LENGTH))
        return f"{cls.PREFIX}{token}"

    @classmethod
    def is_generated(cls, document_id: str) -> bool:
        """Check whether an ID has the generated format.

        Examples:
            >>> DocumentIdGenerator.is_generated("id_abc123xyz")
            True
            >>> DocumentIdGenerator.is_generated("user-42")
            False
        """
        if not isinstance(document_id, str):
            return False
        return bool(cls.PATTERN.match(document_id))

    @staticmethod
    def timestamp(now: datetime | None = None) -> str:
        """Format a UTC timestamp as ISO-8601 with milliseconds and a Z suffix.

        Args:
            now: The moment to format. Defaults to the current time.

        Returns:
            A string such as ``2024-01-02T03:04:05.678Z``.
        """
        moment = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
        return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"
