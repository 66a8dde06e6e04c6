"""Command-line interface for qrshare.

Provides the main entry point for sharing a file, printing the share
URL, and configuring the desktop automation workflow.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="qrshare",
        description="Share a file with nearby devices via a QR code",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: config/qrshare.yaml)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    share_parser = subparsers.add_parser("share", help="Serve a file until the viewer leaves")
    share_parser.add_argument("file", type=Path, help="File to share")
    share_parser.add_argument("--host", type=str, default=None, help="Interface to bind")
    share_parser.add_argument("--port", type=int, default=None, help="Port to listen on")
    share_parser.add_argument(
        "--no-browser", action="store_true",
        help="Do not open the status page in the local browser",
    )
    share_parser.add_argument(
        "--no-terminal-qr", action="store_true",
        help="Do not print the QR code to the terminal",
    )

    url_parser = subparsers.add_parser("url", help="Print the URL a file would be shared at")
    url_parser.add_argument("file", type=Path, help="File to share")
    url_parser.add_argument("--port", type=int, default=None, help="Port to listen on")

    workflow_parser = subparsers.add_parser(
        "install-workflow",
        help="Fill in the paths of a desktop automation workflow template",
    )
    workflow_parser.add_argument(
        "template", type=Path,
        help="Workflow bundle (e.g. 'Share via QR.workflow') or its document file",
    )

    return parser.parse_args(argv)


def _advertised_url(settings, file_name: str) -> str:
    from qrshare.utils.network import build_share_url, get_local_ip

    server = settings.server
    host = server.advertise_host or get_local_ip()
    return build_share_url(host, server.port, file_name, scheme=server.scheme)


def _share(settings, args) -> int:
    """Serve the file until the session ends."""
    from qrshare.presentation import make_qr_data_url, render_qr_ascii, render_status_page
    from qrshare.server.app import create_app
    from qrshare.server.runner import ShareServer
    from qrshare.session.engine import SessionEngine
    from qrshare.sharing import SharedFile

    shared = SharedFile.from_path(args.file)
    url = _advertised_url(settings, shared.name)
    pres = settings.presentation

    page = render_status_page(
        file_name=shared.name,
        qr_data_url=make_qr_data_url(url, box_size=pres.qr_box_size, border=pres.qr_border),
        url=url,
        heartbeat_interval=settings.session.heartbeat_interval,
    )

    engine = SessionEngine(
        stale_timeout=settings.session.stale_timeout,
        sweep_interval=settings.session.sweep_interval,
    )

    browser_url = None
    if pres.open_browser:
        browser_url = f"{settings.server.scheme}://localhost:{settings.server.port}"

    app = create_app(
        engine=engine,
        shared_file=shared,
        page_html=page,
        share_url=url,
        browser_url=browser_url,
    )
    server = ShareServer(app, engine, settings.server)

    print(f"Server running on port {settings.server.port}")
    print(f"Sharing: {shared.name}")
    print(f"URL: {url}")
    if pres.terminal_qr:
        print(render_qr_ascii(url))

    server.run()

    reason = engine.shutdown_reason
    logger.info("Share finished: %s", reason.value if reason else "unknown")
    return 0


def _url(settings, args) -> int:
    from qrshare.sharing import SharedFile

    shared = SharedFile.from_path(args.file)
    print(_advertised_url(settings, shared.name))
    return 0


def _install_workflow(args) -> int:
    from qrshare.automation import configure_workflow

    document = configure_workflow(args.template)
    print("Workflow configured successfully!")
    print(f"Updated: {document}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the qrshare CLI."""
    args = parse_args(argv)

    if args.command is None:
        parse_args(["--help"])
        return 0

    from qrshare.config.settings import load_settings
    from qrshare.errors import QrShareError
    from qrshare.utils.logging import setup_logging

    settings = load_settings(args.config)

    if args.verbose:
        settings.logging.level = "DEBUG"
    if getattr(args, "port", None) is not None:
        settings.server.port = args.port
    if getattr(args, "host", None) is not None:
        settings.server.host = args.host
    if getattr(args, "no_browser", False):
        settings.presentation.open_browser = False
    if getattr(args, "no_terminal_qr", False):
        settings.presentation.terminal_qr = False

    setup_logging(settings.logging)

    try:
        if args.command == "share":
            logger.info("Sharing %s", args.file)
            return _share(settings, args)
        elif args.command == "url":
            return _url(settings, args)
        elif args.command == "install-workflow":
            logger.info("Configuring workflow %s", args.template)
            return _install_workflow(args)
    except QrShareError as e:
        print(e, file=sys.stderr)
        return 1
    return 0


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
