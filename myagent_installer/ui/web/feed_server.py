"""
Local release feed — Flask app factory.

Serves a synthetic feed directory laid out like the real one::

    <root>/latest                 → GET /latest
    <root>/download/<asset>       → GET /download/<asset>

Run standalone for the self-test harness::

    python -m myagent_installer.ui.web.feed_server --root DIR --port 18199
"""

from __future__ import annotations

import logging
from pathlib import Path

import click
from flask import Flask, Response, send_from_directory

logger = logging.getLogger(__name__)


def create_feed_app(serve_dir: Path) -> Flask:
    """Create the feed app serving files under ``serve_dir``."""
    app = Flask(__name__)
    app.config["FEED_ROOT"] = str(Path(serve_dir).resolve())

    @app.route("/latest")
    def latest() -> Response:
        return send_from_directory(
            app.config["FEED_ROOT"], "latest", mimetype="application/json",
        )

    @app.route("/download/<path:filename>")
    def download(filename: str) -> Response:
        return send_from_directory(
            Path(app.config["FEED_ROOT"]) / "download", filename,
            mimetype="application/octet-stream",
        )

    return app


@click.command()
@click.option("--root", "root", type=click.Path(exists=True, file_okay=False), required=True,
              help="Feed directory (holds 'latest' and 'download/').")
@click.option("--port", type=int, default=18199, help="Port on 127.0.0.1.")
def main(root: str, port: int) -> None:
    """Serve a synthetic release feed on 127.0.0.1."""
    app = create_feed_app(Path(root))
    logger.info("Serving %s on 127.0.0.1:%d", root, port)
    app.run(host="127.0.0.1", port=port, debug=False, use_reloader=False)


if __name__ == "__main__":
    main()
