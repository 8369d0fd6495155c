"""Installed update channel resolution.

The channel an Office build belongs to is not stored in the registry in a
readable form, so it is looked up in a reference page that lists builds
per channel. The page is a plain HTML table; each table row is flattened
to text and matched against the build number.

Page layout changes degrade to UNDETERMINED_CHANNEL rather than errors.
Only a failed fetch raises (ChannelFetchError).
"""

from __future__ import annotations

import logging
import urllib.error
import urllib.request
from abc import ABC, abstractmethod
from html.parser import HTMLParser

from o365_inspector import __version__
from o365_inspector.errors import ChannelFetchError
from o365_inspector.models import UNDETERMINED_CHANNEL

logger = logging.getLogger(__name__)

# "16.0." is dropped: the reference table lists builds as "7571.2075"
VERSION_PREFIX_LENGTH = 5

CHANNEL_CURRENT = "Current"
CHANNEL_FIRST_RELEASE_DEFERRED = "First Release Deferred"
CHANNEL_DEFERRED = "Deferred"

_USER_AGENT = f"o365-inspector/{__version__}"


def trim_version(version: str | None) -> str:
    """Strip the major/minor prefix from a Click-to-Run version string."""
    if not version:
        return ""
    return version.strip()[VERSION_PREFIX_LENGTH:]


def classify_channel(text: str) -> str:
    """Map the text of matching reference rows to a channel name."""
    if CHANNEL_CURRENT in text and CHANNEL_DEFERRED not in text:
        return CHANNEL_CURRENT
    if CHANNEL_FIRST_RELEASE_DEFERRED in text and CHANNEL_CURRENT not in text:
        return CHANNEL_FIRST_RELEASE_DEFERRED
    if CHANNEL_DEFERRED in text and "First Release" not in text:
        return CHANNEL_DEFERRED
    return UNDETERMINED_CHANNEL


def resolve_from_rows(rows: list[str], version: str | None) -> str:
    """Resolve the channel of `version` from flattened table rows.

    All rows containing the trimmed build number are considered together,
    so a build listed under two different channels is undetermined.
    """
    build = trim_version(version)
    if not build:
        return UNDETERMINED_CHANNEL
    matches = [row for row in rows if build in row]
    if not matches:
        logger.debug("No reference row mentions build %s", build)
        return UNDETERMINED_CHANNEL
    return classify_channel("\n".join(matches))


class _TableRowParser(HTMLParser):
    """Collect the text of every <tr>, cells joined by ' | '."""

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.rows: list[str] = []
        self._cells: list[str] | None = None
        self._text: list[str] | None = None

    def handle_starttag(self, tag, attrs):
        if tag == "tr":
            self._finish_row()
            self._cells = []
        elif tag in ("td", "th") and self._cells is not None:
            self._finish_cell()
            self._text = []
        elif tag == "br" and self._text is not None:
            self._text.append(" ")

    def handle_endtag(self, tag):
        if tag in ("td", "th"):
            self._finish_cell()
        elif tag == "tr":
            self._finish_row()
        elif tag == "table":
            self._finish_row()

    def handle_data(self, data):
        if self._text is not None:
            self._text.append(data)

    def close(self):
        super().close()
        self._finish_row()

    def _finish_cell(self):
        if self._text is not None and self._cells is not None:
            self._cells.append(" ".join("".join(self._text).split()))
        self._text = None

    def _finish_row(self):
        self._finish_cell()
        if self._cells:
            self.rows.append(" | ".join(cell for cell in self._cells if cell))
        self._cells = None


def parse_table_rows(html: str) -> list[str]:
    """Flatten every HTML table row in `html` to a line of text."""
    parser = _TableRowParser()
    parser.feed(html)
    parser.close()
    return [row for row in parser.rows if row]


def fetch_reference_page(url: str, timeout: float = 30.0) -> str:
    """GET the reference page and return its decoded body.

    Raises:
        ChannelFetchError: On HTTP errors, network errors, a bad URL, or a
            body in an unknown charset.
    """
    try:
        req = urllib.request.Request(url, headers={"User-Agent": _USER_AGENT, "Accept": "text/html"})
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            charset = resp.headers.get_content_charset() or "utf-8"
            return resp.read().decode(charset, errors="replace")
    except urllib.error.HTTPError as exc:
        raise ChannelFetchError(url, f"HTTP {exc.code}: {exc.reason}") from exc
    except urllib.error.URLError as exc:
        raise ChannelFetchError(url, str(exc.reason)) from exc
    except (OSError, ValueError, LookupError) as exc:
        raise ChannelFetchError(url, str(exc)) from exc


class ChannelResolver(ABC):
    """Resolves the installed update channel of an Office build."""

    @abstractmethod
    def resolve(self, version: str | None) -> str:
        """Return the channel name for a Click-to-Run version string.

        Raises:
            ChannelFetchError: The reference data could not be retrieved.
        """
        ...


class WebChannelResolver(ChannelResolver):
    """Scrapes the channel reference page on every lookup."""

    def __init__(self, url: str, timeout: float = 30.0):
        self.url = url
        self.timeout = timeout

    def fetch_rows(self) -> list[str]:
        html = fetch_reference_page(self.url, timeout=self.timeout)
        rows = parse_table_rows(html)
        if not rows:
            logger.warning("Reference page %s contains no table rows", self.url)
        return rows

    def resolve(self, version: str | None) -> str:
        return resolve_from_rows(self.fetch_rows(), version)


class StaticChannelResolver(ChannelResolver):
    """Resolves against reference rows that are already loaded."""

    def __init__(self, rows: list[str]):
        self.rows = list(rows)

    @classmethod
    def from_html(cls, html: str) -> StaticChannelResolver:
        return cls(parse_table_rows(html))

    def resolve(self, version: str | None) -> str:
        return resolve_from_rows(self.rows, version)
