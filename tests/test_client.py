from urllib.parse import parse_qs

import pytest
import responses

from himama_dl.activity import Activity, Child
from himama_dl.client import (
    BASE_URL,
    LOGIN_URL,
    Client,
    HiMamaError,
    extract_csrf_token,
    parse_activities,
    parse_children,
)

LOGIN_PAGE = "<html><head><meta name=csrf-token content=abc/+_-XYZ /></head></html>"

HEADLINES = """<html><body>
<a href="/accounts/123"> Alice </a>
<a href="/accounts/456">Bob</a>
<a href="/accounts/abc">Nope</a>
<a href="/accounts/7/edit">Edit</a>
<a href="/other">Other</a>
</body></html>"""


@pytest.fixture
def mocked():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


def _row(added_by, date, title, link):
    cells = [added_by, date, f"\n<span>{title}</span>", "", "", "", "", ""]
    cells.append(f'\n<a href="{link}">Download</a>' if link else "")
    return "<tr>\n" + "\n".join(f"<td>{cell}</td>" for cell in cells) + "\n</tr>"


def _page(*rows):
    return "<html><body><table>\n" + "\n".join(rows) + "\n</table></body></html>"


def _login_client(mock):
    mock.add(responses.GET, LOGIN_URL, body=LOGIN_PAGE, status=200)
    mock.add(responses.POST, LOGIN_URL, body="ok", status=200)
    password = "password"
    return Client("user@example.com", password)


def test_extract_csrf_token():
    assert extract_csrf_token(LOGIN_PAGE) == "abc/+_-XYZ"


def test_extract_csrf_token_missing():
    with pytest.raises(HiMamaError, match="authenticity token"):
        extract_csrf_token("<html></html>")


def test_parse_children():
    assert parse_children(HEADLINES) == [Child("Alice", "123"), Child("Bob", "456")]


def test_parse_children_empty():
    assert parse_children("<html><body><p>nothing</p></body></html>") == []


def test_parse_activities():
    body = _page(
        _row("Ms. Smith", "3/7/21", "Painting", "https://files.example.com/a/1.jpg"),
        _row("Mr. Jones", "3/8/21", "Nap", None),
        _row("Ms. Lee", "3/9/21", "Music", "https://files.example.com/a/2.mp4"),
    )
    assert parse_activities(body) == [
        Activity("Ms. Smith", "3/7/21", "Painting", "https://files.example.com/a/1.jpg"),
        Activity("Ms. Lee", "3/9/21", "Music", "https://files.example.com/a/2.mp4"),
    ]


def test_parse_activities_no_rows():
    assert parse_activities(_page()) == []


def test_login_posts_form(mocked):
    client = _login_client(mocked)
    post = mocked.calls[1].request
    form = parse_qs(post.body if isinstance(post.body, str) else post.body.decode())
    assert form["authenticity_token"] == ["abc/+_-XYZ"]
    assert form["user[login]"] == ["user@example.com"]
    assert form["user[password]"] == ["password"]
    assert form["user[remember_me]"] == ["0"]
    assert form["utf8"] == ["\u2713"]
    mocked.add(responses.GET, BASE_URL + "/headlines", body=HEADLINES, status=200)
    assert client.fetch_children() == [Child("Alice", "123"), Child("Bob", "456")]


def test_login_bad_status(mocked):
    mocked.add(responses.GET, LOGIN_URL, body="down", status=503)
    password = "password"
    with pytest.raises(HiMamaError, match="503"):
        Client("user@example.com", password)


def test_login_missing_token(mocked):
    mocked.add(responses.GET, LOGIN_URL, body="<html></html>", status=200)
    password = "password"
    with pytest.raises(HiMamaError, match="authenticity token"):
        Client("user@example.com", password)


def test_fetch_children(mocked):
    client = _login_client(mocked)
    mocked.add(responses.GET, BASE_URL + "/headlines", body=HEADLINES, status=200)
    assert client.fetch_children() == [Child("Alice", "123"), Child("Bob", "456")]


def test_activities_requests_page(mocked):
    client = _login_client(mocked)
    body = _page(_row("Ms. Smith", "3/7/21", "Painting", "https://files.example.com/a/1.jpg"))
    mocked.add(responses.GET, BASE_URL + "/accounts/123/activities", body=body, status=200)
    result = client.activities(Child("Alice", "123"), 2)
    assert result == [
        Activity("Ms. Smith", "3/7/21", "Painting", "https://files.example.com/a/1.jpg")
    ]
    assert mocked.calls[-1].request.url.endswith("/accounts/123/activities?page=2")