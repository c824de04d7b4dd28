from pathlib import Path
from urllib.parse import urlsplit

import pytest
import responses
from bs4 import BeautifulSoup

from gofetch.mirror import Mirrorer, parse_mirror_flags

PAGE = (
    "<html><head>"
    '<link rel="stylesheet" href="/style.css">'
    "<style>body { background: url('/img/bg.gif'); }</style>"
    "</head><body>"
    '<img src="a.png">'
    '<script src="js/app.js"></script>'
    "</body></html>"
)


@pytest.fixture(autouse=True)
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _register_site(rsps):
    rsps.get("http://example.com/", body=PAGE, content_type="text/html")
    rsps.get("http://example.com/style.css", body="css")
    rsps.get("http://example.com/a.png", body=b"png")
    rsps.get("http://example.com/img/bg.gif", body=b"gif")
    rsps.get("http://example.com/js/app.js", body="js")


def test_process_url_without_base_is_unchanged():
    assert Mirrorer().process_url("a.png") == "a.png"


def test_process_url_keeps_absolute_and_empty():
    mirrorer = Mirrorer()
    mirrorer.base_url = urlsplit("http://example.com/docs")
    assert mirrorer.process_url("https://cdn.example.com/x.js") == "https://cdn.example.com/x.js"
    assert mirrorer.process_url("") == ""


def test_process_url_root_base():
    mirrorer = Mirrorer()
    mirrorer.base_url = urlsplit("http://example.com/")
    assert mirrorer.process_url("img.png") == "http://example.com/img.png"


def test_process_url_joins_leading_slash_onto_base_path():
    mirrorer = Mirrorer()
    mirrorer.base_url = urlsplit("http://example.com/docs")
    assert mirrorer.process_url("/css/a.css") == "http://example.com/docs/css/a.css"


def test_process_url_plain_relative_under_base_path():
    mirrorer = Mirrorer()
    mirrorer.base_url = urlsplit("http://example.com/docs")
    assert mirrorer.process_url("pic.jpg") == "http://example.com/docs/pic.jpg"


def test_link_allowed_rejects_extensions():
    mirrorer = Mirrorer(exclude_exts=["jpg", "gif"])
    assert mirrorer.link_allowed("/photos/cat.jpg") is False
    assert mirrorer.link_allowed("anim.gif") is False
    assert mirrorer.link_allowed("page.html") is True


def test_link_allowed_rejects_directories():
    mirrorer = Mirrorer(exclude_dirs=["/img"])
    assert mirrorer.link_allowed("/img/a.png") is False
    assert mirrorer.link_allowed("./img/a.png") is False
    assert mirrorer.link_allowed("/css/site.css") is True


def test_link_allowed_without_exclusions():
    assert Mirrorer().link_allowed("anything/at/all.txt") is True


def test_mirror_downloads_and_converts_links(workdir):
    with responses.RequestsMock() as rsps:
        _register_site(rsps)
        page = Mirrorer(convert_links=True).mirror("http://example.com/")

    assert page == Path("example.com") / "index.html"
    assert (workdir / "example.com" / "style.css").read_text() == "css"
    assert (workdir / "example.com" / "a.png").read_bytes() == b"png"
    assert (workdir / "example.com" / "img" / "bg.gif").read_bytes() == b"gif"
    assert (workdir / "example.com" / "js" / "app.js").read_text() == "js"

    html = (workdir / page).read_text(encoding="utf-8")
    soup = BeautifulSoup(html, "html.parser")
    assert soup.find("link")["href"] == "style.css"
    assert soup.find("img")["src"] == "a.png"
    assert soup.find("script")["src"] == "js/app.js"
    assert "url('img/bg.gif')" in soup.find("style").get_text()


def test_mirror_without_conversion_keeps_links(workdir):
    with responses.RequestsMock() as rsps:
        _register_site(rsps)
        page = Mirrorer().mirror("http://example.com/")

    soup = BeautifulSoup((workdir / page).read_text(encoding="utf-8"), "html.parser")
    assert soup.find("link")["href"] == "/style.css"
    assert "url('/img/bg.gif')" in soup.find("style").get_text()
    assert (workdir / "example.com" / "style.css").exists()


def test_mirror_skips_rejected_extensions(workdir):
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        _register_site(rsps)
        page = Mirrorer(exclude_exts=["png"]).mirror("http://example.com/")
        requested = [call.request.url for call in rsps.calls]

    assert page == Path("example.com") / "index.html"
    assert "http://example.com/a.png" not in requested
    assert not (workdir / "example.com" / "a.png").exists()
    assert (workdir / "example.com" / "style.css").exists()


def test_mirror_returns_none_for_missing_page(workdir):
    with responses.RequestsMock() as rsps:
        rsps.get("http://example.com/", status=404)
        result = Mirrorer().mirror("http://example.com/")

    assert result is None
    assert not (workdir / "example.com" / "index.html").exists()


def test_parse_mirror_flags_requires_url():
    with pytest.raises(SystemExit) as excinfo:
        parse_mirror_flags({"mirror": "mirror"}, "")
    assert excinfo.value.code == 1


def test_parse_mirror_flags_applies_aliases(workdir):
    flags = {"mirror": "mirror", "reject": "jpg,gif", "X": "/a,/b", "convertLinks": "true"}
    with responses.RequestsMock() as rsps:
        rsps.get("http://example.com/", body="<html><body></body></html>")
        mirrorer = parse_mirror_flags(flags, "http://example.com/")

    assert mirrorer.exclude_exts == ["jpg", "gif"]
    assert mirrorer.exclude_dirs == ["/a", "/b"]
    assert mirrorer.convert_links is True
    assert "R" not in flags
    assert (workdir / "example.com" / "index.html").exists()