"""Schema document acquisition from local files or http(s) URLs."""

import logging
import urllib.error
import urllib.request
from pathlib import Path

from .errors import SourceError

logger = logging.getLogger(__name__)

FETCH_TIMEOUT = 30


def is_url(location: str) -> bool:
    return location.startswith(("http:", "https:"))


def read_source(location: str) -> str:
    """Return the text of a schema document at a path or URL."""
    if not location:
        raise SourceError("A schema source must be specified")

    if is_url(location):
        logger.debug("Fetching %s", location)
        try:
            with urllib.request.urlopen(location, timeout=FETCH_TIMEOUT) as resp:
                return resp.read().decode("utf-8")
        except (urllib.error.URLError, TimeoutError, UnicodeDecodeError) as e:
            raise SourceError(f"Cannot fetch {location}: {e}") from e

    try:
        return Path(location).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceError(f"Cannot read {location}: {e}") from e
