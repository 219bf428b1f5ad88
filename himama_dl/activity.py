"""Children and activity records, and local file names for activity media."""

from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass
from urllib.parse import unquote, urlsplit

# The "'-_" part is a character range, so punctuation such as "." and "/"
# survives as well; file names produced before depend on this exact set.
_UNWANTED_CHARS = re.compile(r"[^a-zA-Z0-9'-_ ]")


@dataclass(frozen=True)
class Child:
    """A child account visible to the logged-in parent."""

    name: str
    id: str


@dataclass(frozen=True)
class Activity:
    """One activity entry with a downloadable media file."""

    added_by: str
    date: str
    title: str
    media_url: str

    def suggested_local_filename(self) -> str:
        """Build a stable file name: date, author, title, short hash and extension."""
        date_parts = self.date.split("/")
        if len(date_parts) < 3:
            raise ValueError(f"activity date not in M/D/YY form: {self.date!r}")
        month, day, year = date_parts[0], date_parts[1], date_parts[2]
        date = f"20{year}-{zero_pad(month)}-{zero_pad(day)}"

        path = unquote(urlsplit(self.media_url).path)
        digest = hashlib.sha1(path.encode("utf-8")).hexdigest()

        name_parts = [
            date,
            sanitize_filename_component(self.added_by),
            sanitize_filename_component(self.title),
            digest[:8],
        ]
        return " - ".join(name_parts) + _extension(path).lower()


def _extension(path: str) -> str:
    """Return the suffix of the last path element, starting at its last dot."""
    last = path.rsplit("/", 1)[-1]
    dot = last.rfind(".")
    return last[dot:] if dot >= 0 else ""


def sanitize_filename_component(part: str) -> str:
    """Drop unwanted characters from one file name component and trim it."""
    return _UNWANTED_CHARS.sub("", part).strip()


def zero_pad(text: str) -> str:
    """Left-pad a one-character string with a zero."""
    return "0" + text if len(text) < 2 else text