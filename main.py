#!/usr/bin/env python3
"""
Main application launcher for the Slack Deploy Bot

Development runs over Socket Mode; production serves Slack's HTTP requests.
"""

import asyncio
import logging
import sys

from aiohttp import web
from slack_bolt.adapter.socket_mode.async_handler import AsyncSocketModeHandler

from shared.config import get_settings, validate_settings, print_configuration
from slack_bot.app import create_app

logger = logging.getLogger(__name__)


def configure_logging():
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def check_configuration() -> bool:
    """Validate settings and log every problem found"""
    is_valid, errors = validate_settings()
    if not is_valid:
        logger.error("❌ Configuration validation failed:")
        for error in errors:
            logger.error(f"  - {error}")
    return is_valid


def create_web_app() -> web.Application:
    """
    Request handler for a hosting platform, e.g.
    gunicorn main:create_web_app --worker-class aiohttp.GunicornWebWorker
    """
    configure_logging()
    settings = get_settings()
    app = create_app(settings)
    logger.info("⚡️ Bolt app ready in HTTP mode")
    return app.web_app(path=settings.events_path)


async def run_socket_mode():
    """Connect to Slack over a persistent Socket Mode connection"""
    settings = get_settings()
    app = create_app(settings)
    handler = AsyncSocketModeHandler(app, settings.slack_app_token)

    logger.info("🔌 Connecting to Slack in Socket Mode...")
    try:
        await handler.start_async()
    finally:
        await handler.close_async()


def run_http_mode():
    """Serve Slack events over HTTP with Bolt's built-in aiohttp server"""
    settings = get_settings()
    app = create_app(settings)

    logger.info(f"⚡️ Bolt app listening on {settings.host}:{settings.port}{settings.events_path}")
    app.start(port=settings.port, path=settings.events_path, host=settings.host)


def main(argv=None) -> int:
    import argparse

    parser = argparse.ArgumentParser(description="Slack Deploy Bot")
    parser.add_argument(
        "--mode",
        choices=["socket", "http"],
        default=None,
        help="Connection mode (default: socket unless ENVIRONMENT=production)"
    )
    parser.add_argument(
        "--check-config",
        action="store_true",
        help="Validate configuration and exit"
    )
    args = parser.parse_args(argv)

    configure_logging()
    settings = get_settings()

    if not check_configuration():
        return 1

    if args.check_config:
        print_configuration()
        return 0

    mode = args.mode or ("socket" if settings.use_socket_mode() else "http")

    try:
        if mode == "socket":
            asyncio.run(run_socket_mode())
        else:
            run_http_mode()
    except KeyboardInterrupt:
        logger.info("👋 Shutting down gracefully...")

    return 0


if __name__ == "__main__":
    sys.exit(main())
