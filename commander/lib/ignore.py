""".gitignore template fetching.

Talks to a gitignore.io compatible API:
    <base>list?format=lines   one template name per line
    <base><name>,<name>       combined .gitignore text
"""

import logging
from urllib.error import URLError
from urllib.parse import quote
from urllib.request import urlopen

logger = logging.getLogger(__name__)

FETCH_TIMEOUT_SECONDS = 15


class IgnoreFetchError(Exception):
    """The template API could not be reached or returned an error."""


def _get(url: str) -> str:
    try:
        with urlopen(url, timeout=FETCH_TIMEOUT_SECONDS) as response:
            return response.read().decode("utf-8", errors="replace")
    except (URLError, TimeoutError, OSError) as e:
        raise IgnoreFetchError(f"Request to {url} failed: {e}") from e


def list_templates(base_url: str, name_filter: str | None = None) -> list[str]:
    """List available template names, optionally only those containing name_filter."""
    body = _get(f"{base_url}list?format=lines")
    names = [line.strip() for line in body.splitlines() if line.strip()]
    if name_filter:
        names = [n for n in names if name_filter in n]
    return names


def fetch_ignores(templates: list[str], base_url: str) -> str:
    """Fetch the combined .gitignore text for templates ("" when none given)."""
    if not templates:
        logger.warning("No ignore templates provided")
        return ""
    names = ",".join(quote(t, safe="+") for t in templates)
    return _get(f"{base_url}{names}")
