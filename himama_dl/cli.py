"""Command line downloader for the media attached to HiMama activities."""

from __future__ import annotations

import argparse
import os
import re
import threading
from collections.abc import Callable, Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

import requests

from himama_dl.activity import Activity, Child
from himama_dl.client import Client, HiMamaError

VERSION_BANNER = "himama-dl v0.0.3"

# Listing pages come from the site itself, so keep that modest; media lives
# on object storage and can be fetched much more aggressively.
_PAGE_WORKERS = 5
_DOWNLOAD_WORKERS = 10
_CHUNK_SIZE = 64 * 1024

_WINDOWS_FORBIDDEN = re.compile(r'[<>:"/\\|?*\x00-\x1f]')

# Command line options in order, each with its help text and its prompt label.
_CREDENTIAL_OPTIONS = (
    ("username", "HiMama username (ie, your email)", "Username"),
    ("password", "HiMama password", "Password"),
)


@dataclass
class DownloadStats:
    """Thread-safe counters for one download run."""

    total: int = 0
    completed: int = 0
    skipped: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record_download(self) -> None:
        with self._lock:
            self.completed += 1

    def record_skip(self) -> None:
        with self._lock:
            self.skipped += 1

    def add_total(self, count: int) -> None:
        with self._lock:
            self.total += count


def filter_windows_filename(name: str) -> str:
    """Replace characters that Windows forbids in file names with underscores."""
    return _WINDOWS_FORBIDDEN.sub("_", name)


def select_children(children: Sequence[Child], read_line: Callable[[], str] = input) -> list[Child]:
    """Ask which child to download for; the last menu entry selects all of them."""
    if not children:
        print("Unable to find children")
        raise HiMamaError("no children found")

    all_choice = len(children) + 1
    while True:
        print("Found multiple children. Which account to scrape?")
        for number, child in enumerate(children, start=1):
            print(f"{number}. {child.name} ({child.id})")
        print(f"{all_choice}. All")
        try:
            choice = int(read_line().strip())
        except ValueError:
            continue
        if 1 <= choice <= all_choice:
            break

    if choice == all_choice:
        return list(children)
    return [children[choice - 1]]


def download(url: str, dest: str | os.PathLike[str]) -> None:
    """Fetch ``url`` and write its body to ``dest``, replacing any existing file."""
    with requests.get(url, stream=True) as response:
        fd = os.open(dest, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "wb") as out:
            for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                out.write(chunk)


def iter_activities(client: Client, child: Child) -> Iterator[Activity]:
    """Yield every activity of ``child``, page by page, until a page comes back empty.

    Several pages are requested at once; activities are still yielded in page order.
    """
    with ThreadPoolExecutor(max_workers=_PAGE_WORKERS) as pool:
        first = 1
        while True:
            pages = range(first, first + _PAGE_WORKERS)
            futures = [pool.submit(client.activities, child, page) for page in pages]
            for future in futures:
                activities = future.result()
                if not activities:
                    for pending in futures:
                        pending.cancel()
                    return
                yield from activities
            first += _PAGE_WORKERS


def _file_exists(path: Path) -> bool:
    try:
        os.stat(path)
    except FileNotFoundError:
        return False
    return True


def _fetch_activity(activity: Activity, folder: Path, stats: DownloadStats) -> None:
    filename = filter_windows_filename(activity.suggested_local_filename())
    dest = folder / filename
    if _file_exists(dest):
        stats.record_skip()
    else:
        download(activity.media_url, dest)
        stats.record_download()
    print(f"{stats.completed}/{stats.total}: {filename}")


def scrape(client: Client, child: Child, stats: DownloadStats) -> None:
    """Download every media file of ``child`` into a folder named after the child."""
    folder = Path(child.name)
    try:
        folder.mkdir(mode=0o700)
    except FileExistsError:
        pass

    with ThreadPoolExecutor(max_workers=_DOWNLOAD_WORKERS) as pool:
        futures = []
        for activity in iter_activities(client, child):
            stats.add_total(1)
            futures.append(pool.submit(_fetch_activity, activity, folder, stats))
        for future in futures:
            future.result()


def fetch_credentials(argv: Sequence[str] | None = None) -> tuple[str, str]:
    """Read the username and password from the command line, prompting for any missing."""
    parser = argparse.ArgumentParser(prog="himama-dl")
    for option, help_text, _label in _CREDENTIAL_OPTIONS:
        parser.add_argument(f"-{option}", f"--{option}", help=help_text)
    args = parser.parse_args(argv)

    values = [
        getattr(args, option) or input(f"{label}: ")
        for option, _help_text, label in _CREDENTIAL_OPTIONS
    ]
    return values[0], values[1]


def main(argv: Sequence[str] | None = None) -> None:
    """Log in, choose children and download all of their activity media."""
    print(VERSION_BANNER)

    try:
        username, secret = fetch_credentials(argv)
    except EOFError as exc:
        print("Error collecting credentials:", exc)
        return

    try:
        client = Client(username, secret)
    except HiMamaError as exc:
        print("Error:", exc)
        return

    try:
        children = client.fetch_children()
    except HiMamaError as exc:
        print("Error initializing HiMama client:", exc)
        return

    try:
        chosen = select_children(children)
    except (HiMamaError, EOFError) as exc:
        print("Error selecting children for download:", exc)
        return

    stats = DownloadStats()
    for child in chosen:
        try:
            scrape(client, child, stats)
        except (HiMamaError, requests.RequestException, OSError, ValueError) as exc:
            print("Error downloading data for", child.name, ":", exc)
            return

    print(f"Total: {stats.total}\nDownloaded {stats.completed}\nAlready Downloaded: {stats.skipped}")


if __name__ == "__main__":
    main()