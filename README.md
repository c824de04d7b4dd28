# gofetch

A small wget-style command-line downloader. It fetches single files, lists
of URLs, or a page together with the resources it refers to, and has a
small Flask web front end.

## Installation

```
pip install .
```

## Usage

Download a single file into the current directory. The name comes from the
last path segment of the URL, or `index.html` when that segment has no
extension. When no option is given, a URL without a scheme gets `https://`
put in front of it.

```
gofetch https://example.com/file.zip
```

A progress bar is shown while the body is written. A server answer other
than `200 OK` saves nothing.

### Options

| Option | Meaning |
| --- | --- |
| `-O <filename>` | Save under a different file name. |
| `-P <path>` | Directory to save into; it is created if missing and a leading `~/` is expanded. |
| `--rate-limit <rate>` | Cap the download speed. A plain number is bytes per second; `k`, `M` and `G` suffixes multiply by 1,000, 1,000,000 and 1,000,000,000 and then take 90% of the result. |
| `-B` | Write the log to `wget-log` instead of the terminal, without a progress bar. |
| `-i <file>` | Download every URL listed in the file, one per line, all at the same time. |
| `--mirror` | Download a page, then the targets of its `a`, `link` (`href`), `img` and `script` (`src`) tags and the `url(...)` references in its `style` blocks, recreating the host and directory layout of each URL. |
| `-R`, `--reject <exts>` | Comma-separated file extensions to skip while mirroring. |
| `-X`, `--exclude <dirs>` | Comma-separated path prefixes to skip while mirroring. |
| `--convert-links` | While mirroring, rewrite links in the saved page to point at the local copies. |
| `--web` | Start the web interface on port 8080. |
| `--help`, `-h` | Show the help text. |

Long options are also accepted with a single dash (`-mirror`, `-rate-limit`, ...).

Some options cannot be combined: `-i` excludes `-O`, `-P`, `-B` and
`--rate-limit`; `--mirror` excludes `-O`, `-i`, `-P`, `-B` and
`--rate-limit`; and an option cannot be given together with its alias.
Giving both a reject list and an exclude list requires `--mirror`.

The command exits with status 1 when the options conflict or a download fails.

### Examples

```
gofetch -O myfile.zip https://example.com/file.zip
gofetch -P ~/Downloads https://example.com/file.zip
gofetch --rate-limit=1M https://example.com/bigfile.zip
gofetch -i urls.txt
gofetch --mirror --convert-links -R jpg,gif https://example.com
gofetch --web
```

## Library use

- `gofetch.utils`: `make_a_name` derives a file name from a URL,
  `ensure_scheme` adds a missing scheme, `display_help` prints the usage text.
- `gofetch.limiter`: `parse_rate_limit` turns `500k`-style strings into bytes
  per second; `RateLimiter` is a token bucket and `RateLimitedReader` throttles
  reads from a binary stream through it.
- `gofetch.config`: `parse_flags` returns a `ParsedArgs` and raises
  `ConfigError` for conflicting options.
- `gofetch.logger`: `Logger` writes messages to stdout, or collects them and
  rewrites a log file on every message.
- `gofetch.downloader`: `download_file` fetches one URL, `download_with_flags`
  applies an option set, `download_list` fetches every URL in a file; failures
  raise `DownloadError`.
- `gofetch.mirror`: `Mirrorer` mirrors a page and its resources;
  `parse_mirror_flags` builds one from command-line options and runs it.
- `gofetch.web`: `create_app` returns the Flask application,
  `start_web_server` runs it, `downloads_path` gives `~/Downloads`.

## Web interface

`GET /` and `GET /documentation` render `index.html` and
`documentation.html`. `POST /download` takes a form field `url`, makes sure
`~/Downloads` exists, fetches the URL into the server's working directory and
answers with a plain-text message naming a path under `~/Downloads`.

## Limitations

- The web interface reads its pages from `web/templates` and static files
  from `web/static` in the working directory. The package ships no templates
  or static files, so those pages only render where you provide them.
- Mirroring covers one page and the resources it links to; it does not
  follow links further.

## Running the tests

```
pip install ".[test]"
pytest
```