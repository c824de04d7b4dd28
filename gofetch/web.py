"""A small web front end for starting downloads."""

from __future__ import annotations

import os
from pathlib import Path

from flask import Flask, Response, render_template, request

from gofetch.downloader import DownloadError, download_file


def downloads_path() -> str:
    """Return the user's Downloads directory, or ``./`` when home is unknown."""
    try:
        home = Path.home()
    except RuntimeError as exc:
        print("Error getting home directory:", exc)
        return "./"
    return os.path.join(str(home), "Downloads")


def _base_name(url: str) -> str:
    if not url:
        return "."
    stripped = url.rstrip("/")
    if not stripped:
        return "/"
    return stripped.rsplit("/", 1)[-1]


def _text(message: str, status: int) -> Response:
    return Response(message, status=status, mimetype="text/plain")


def create_app() -> Flask:
    """Build the application, serving ``web/static`` and ``web/templates`` from the working directory."""
    app = Flask(
        __name__,
        static_folder=os.path.abspath(os.path.join("web", "static")),
        static_url_path="/static",
        template_folder=os.path.abspath(os.path.join("web", "templates")),
    )

    @app.get("/")
    def index():
        return render_template("index.html")

    @app.get("/documentation")
    def documentation():
        return render_template("documentation.html")

    @app.post("/download")
    def download():
        url = request.form.get("url", "")
        directory = downloads_path()
        output_path = os.path.join(directory, _base_name(url))

        try:
            os.makedirs(directory, mode=0o755, exist_ok=True)
        except OSError as exc:
            return _text(f"Failed to create download directory: {exc}", 500)

        try:
            download_file(url, False)
        except DownloadError as exc:
            return _text(f"Failed to download: {exc}", 500)
        return _text(f"File downloaded successfully to {output_path}", 200)

    return app


def start_web_server(host: str = "0.0.0.0", port: int = 8080) -> None:
    """Run the web interface until interrupted."""
    create_app().run(host=host, port=port)