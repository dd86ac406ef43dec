"""Random identifiers for feed items."""

import uuid

from .errors import EntropyError


def generate_identifier() -> str:
    """Return a fresh version-4 identifier as 32 lowercase hex characters.

    Raises:
        EntropyError: If the operating system random source is unavailable
    """
    try:
        # uuid4 reads os.urandom(16) and sets the version and variant bits
        return uuid.uuid4().hex
    except (NotImplementedError, OSError) as e:
        raise EntropyError(f"Random source unavailable: {e}") from e
