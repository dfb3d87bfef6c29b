"""Application startup and configuration.

Entry point that orchestrates configuration parsing, logging setup,
collaborator wiring and command dispatch.
"""
from __future__ import annotations

import sys
from typing import List, Optional

from loguru import logger

from app.application import Application
from app.cli import build_parser, dispatch
from config.service import ConfigurationService, ConfigurationServiceFactory
from core.exceptions import ConfigurationError, WorkoutLogException


def configure_logging(config_service: ConfigurationService) -> None:
    """Route loguru output to stderr at the configured level."""
    level = "DEBUG" if config_service.debug else config_service.log_level
    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )


def run_application(argv: Optional[List[str]] = None) -> int:
    """Main application entry point.

    Orchestrates the startup sequence:
    1. Parse the command line
    2. Load configuration from all sources (defaults, file, env, CLI)
    3. Configure logging
    4. Initialize application infrastructure
    5. Run the requested command and clean up

    Returns:
        Process exit code
    """
    argv = sys.argv[1:] if argv is None else list(argv)
    args = build_parser().parse_args(argv)

    try:
        config_service, _ = ConfigurationServiceFactory.create_from_args(argv)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    configure_logging(config_service)

    app_instance = Application(config_service)
    app_instance.log_session_info()
    try:
        return dispatch(app_instance, args)
    except WorkoutLogException as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        app_instance.cleanup()
