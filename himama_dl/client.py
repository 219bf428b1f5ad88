"""HTTP client for the HiMama parent site: login, children and activity pages."""

from __future__ import annotations

import re

import requests
from bs4 import BeautifulSoup
from bs4.element import NavigableString, PageElement, PreformattedString, Tag

from himama_dl.activity import Activity, Child

HOST = "www.himama.com"
BASE_URL = "https://" + HOST
LOGIN_URL = BASE_URL + "/login"

_CSRF_PATTERN = re.compile(r"<meta name=csrf-token content=([a-zA-Z0-9\/+_-]+) *\/>")
_ACCOUNT_HREF = re.compile(r"/accounts/[0-9]+")


class HiMamaError(Exception):
    """Raised when talking to the site or reading its pages fails."""


class Client:
    """A logged-in session on the HiMama site."""

    def __init__(self, username: str, password: str, session: requests.Session | None = None):
        self.session = session if session is not None else requests.Session()
        token = self._get_login_form()
        self._post_login_form(token, username, password)

    def _get_login_form(self) -> str:
        try:
            response = self.session.get(LOGIN_URL)
        except requests.RequestException as exc:
            raise HiMamaError(f"unable to get {LOGIN_URL}: {exc}") from exc
        with response:
            if response.status_code != 200:
                raise HiMamaError(
                    f"GET {LOGIN_URL}: Unexpected response {response.status_code} (want 200)"
                )
            return extract_csrf_token(response.text)

    def _post_login_form(self, token: str, username: str, password: str) -> None:
        form = {
            "authenticity_token": token,
            "utf8": "\u2713",
            "user[login]": username,
            "user[password]": password,
            "user[remember_me]": "0",
        }
        try:
            response = self.session.post(LOGIN_URL, data=form)
        except requests.RequestException as exc:
            raise HiMamaError(f"POST {LOGIN_URL} Error: {exc}") from exc
        response.close()

    def _get_text(self, url: str, context: str) -> str:
        try:
            with self.session.get(url) as response:
                return response.text
        except requests.RequestException as exc:
            raise HiMamaError(f"{context}: {exc}") from exc

    def fetch_children(self) -> list[Child]:
        """List the children linked from the headlines page."""
        body = self._get_text(BASE_URL + "/headlines", "failed to fetch children")
        return parse_children(body)

    def activities(self, child: Child, page: int) -> list[Activity]:
        """Return the activities with media on one page of a child's activity list."""
        url = f"{BASE_URL}/accounts/{child.id}/activities?page={page}"
        body = self._get_text(url, f"failed to fetch activities page {page}")
        return parse_activities(body)


def extract_csrf_token(body: str) -> str:
    """Find the CSRF token in the login page."""
    match = _CSRF_PATTERN.search(body)
    if match is None:
        raise HiMamaError(f"GET {LOGIN_URL}: Cannot find authenticity token in response")
    return match.group(1)


def _node_data(node: PageElement) -> str:
    return node.name if isinstance(node, Tag) else str(node)


def _nth_child(node: PageElement | None, index: int) -> PageElement | None:
    if not isinstance(node, Tag):
        return None
    children = node.contents
    return children[index] if index < len(children) else None


def _first_child(node: PageElement | None) -> PageElement | None:
    return _nth_child(node, 0)


def _node_text(node: PageElement | None) -> str:
    child = _first_child(node)
    if isinstance(child, NavigableString) and not isinstance(child, PreformattedString):
        return child.strip()
    return ""


def parse_children(body: str) -> list[Child]:
    """Extract child accounts from links of the form /accounts/<id>."""
    soup = BeautifulSoup(body, "html.parser")
    children = []
    for link in soup.find_all("a", href=True):
        href = link["href"]
        if not _ACCOUNT_HREF.fullmatch(href):
            continue
        first = _first_child(link)
        if first is None:
            raise HiMamaError(f"account link {href} has no text")
        children.append(Child(name=_node_data(first).strip(), id=href.split("/")[-1]))
    return children


def parse_activities(body: str) -> list[Activity]:
    """Extract activities from the rows of an activity listing page.

    Rows are read by child position (whitespace text counts as a child);
    rows without a media link are left out.
    """
    soup = BeautifulSoup(body, "html.parser")
    results = []
    for row in soup.find_all("tr"):
        added_by = _node_text(_nth_child(row, 1))
        date = _node_text(_nth_child(row, 3))

        title = ""
        title_cell_first = _first_child(_nth_child(row, 5))
        title_node = title_cell_first.next_sibling if title_cell_first is not None else None
        if title_node is not None:
            inner = _first_child(title_node)
            if inner is not None:
                title = _node_data(inner)

        media_url = ""
        link_first = _first_child(_nth_child(row, 17))
        if link_first is not None:
            link = link_first.next_sibling
            if isinstance(link, Tag) and link.name == "a":
                media_url = link.get("href", "")

        if media_url:
            results.append(
                Activity(added_by=added_by, date=date, title=title, media_url=media_url)
            )
    return results