"""
Entry point for the Dutch mortgage calculator.

Usage:
    python main.py          # launches the web app at localhost:5000
    python main.py --cli    # runs the terminal interface
"""

import argparse
import logging
import sys

import config as cfg


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Dutch Mortgage Calculator: Annuity vs Linear",
    )
    parser.add_argument(
        "--cli",
        action="store_true",
        help="Run in terminal mode instead of launching the web app",
    )
    parser.add_argument("--host", default=cfg.HOST, help="Web server host")
    parser.add_argument("--port", type=int, default=cfg.PORT, help="Web server port")
    parser.add_argument(
        "--no-browser",
        action="store_true",
        help="Do not open a browser window when the web app starts",
    )
    parser.add_argument(
        "--log-level",
        default=cfg.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.cli:
        from cli import run_cli
        sys.exit(run_cli())
    else:
        from app import run_web
        run_web(host=args.host, port=args.port, open_browser=not args.no_browser)


if __name__ == "__main__":
    main()
