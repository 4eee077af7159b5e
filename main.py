"""
Echoes AR inspector — entry point: builds the session and starts the CLI.
"""

import asyncio
import logging

from cli import InspectorCLI
from config import CONFIG_FILE, load_config, validate_config
from heading import HeadingTracker
from logging_config import setup_logging
from projection import ProjectionEngine
from recorder import ProjectionRecorder
from revisit import RevisitMonitor
from session import ARSession

log = logging.getLogger("echoes.main")


def build_session(config: dict) -> ARSession:
    errors = validate_config(config)
    if errors:
        raise ValueError("Invalid config: " + "; ".join(errors))

    recorder = ProjectionRecorder(config["log_dir"]) if config["projection_log_enable"] else None
    return ARSession(
        config,
        engine=ProjectionEngine(config),
        tracker=HeadingTracker(config),
        revisit=RevisitMonitor(config),
        recorder=recorder,
        on_revisit=lambda hits: log.info(
            "Back where %d memories were captured: %s",
            len(hits), ", ".join(m.id for m in hits)),
    )


def load_settings(path: str = CONFIG_FILE) -> dict:
    """Load the config with logging already up, then apply its log level."""
    setup_logging()
    config = load_config(path)
    setup_logging(config["log_level"])
    return config


async def main():
    config = load_settings()
    session = build_session(config)
    cli = InspectorCLI(config, session)
    await cli.run()


if __name__ == "__main__":
    asyncio.run(main())
