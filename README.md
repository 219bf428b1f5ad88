# himama-dl

Downloads every photo and video attached to the activities of a HiMama
account. It fetches the media of one child, or of all your children, into
folders on your computer.

## Installation

```
pip install .
```

## Usage

```
himama-dl --username parent@example.com --password password
```

The single-dash forms `-username` and `-password` work too. If you leave
either out, you are asked for it when the program starts. After signing in,
the program lists the children linked from the account's headlines page:

```
Found multiple children. Which account to scrape?
1. Alex (1001)
2. Sam (1002)
3. All
```

Type a number and press return; the menu is shown again until you enter a
valid one. Each child's media goes into a directory named after the child,
under the current working directory (created if missing, mode `0700`).

The program reads the child's activity index page by page, five pages at a
time, and stops at the first page that has no activities with media. Up to
ten files are downloaded at the same time. Files are written with mode `0600`.

Each file gets a name of this form:

```
YYYY-MM-DD - <added by> - <title> - <hash>.<ext>
```

- the date comes from the activity's `M/D/YY` date;
- `<added by>` and `<title>` keep only letters, digits, spaces and the
  characters in the range from `'` to `_`, and are trimmed;
- `<hash>` is the first eight hex digits of the SHA-1 of the media URL's
  (percent-decoded) path;
- `<ext>` is the lower-cased extension of that path.

Characters that Windows does not allow in file names become `_`.

A file that already exists is not downloaded again, so running the program
later picks up only new media. While it runs it prints a `downloaded/total:
filename` line per item, and at the end the total number of media items, how
many were downloaded and how many were already on disk.

## Using it as a library

```python
from himama_dl.client import Client

password = "password"
client = Client("parent@example.com", password=password)
for child in client.fetch_children():
    for activity in client.activities(child, 1):
        print(activity.suggested_local_filename(), activity.media_url)
```

- `himama_dl.activity` holds the `Child` and `Activity` records,
  `sanitize_filename_component` and `zero_pad`.
- `himama_dl.client` holds `Client` (which takes an optional
  `requests.Session`), `HiMamaError`, and the page parsers
  `extract_csrf_token`, `parse_children` and `parse_activities`.
- `himama_dl.cli` holds the command: `main`, `fetch_credentials`,
  `select_children`, `iter_activities`, `scrape`, `download`,
  `filter_windows_filename` and the `DownloadStats` counters.

## Limitations

- A wrong username or password is not reported when signing in; the login
  form is submitted and its response is not checked, so a failed login shows
  up later as no children being found.
- Downloads are not retried, and a partly written file from an interrupted
  download is treated as already downloaded on the next run.

## Development

```
pip install -e ".[test]"
pytest
```