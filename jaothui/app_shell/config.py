import logging
import os
from pathlib import Path

from jaothui.rules.models import Rules

logger = logging.getLogger(__name__)


class ConfigurationError(RuntimeError):
    """Startup requirements from rules.yaml are not met."""


def validate_ops_rules(rules: Rules, data_dir: Path) -> None:
    """
    Validate operational requirements before startup.

    Raises ConfigurationError when a required environment variable is
    missing or the data directory cannot be written.
    """
    missing = [name for name in rules.ops.required_env if name not in os.environ]
    if missing:
        logger.critical("Missing required environment variables: %s", ", ".join(missing))
        raise ConfigurationError(
            f"Missing required environment variables: {', '.join(missing)}"
        )

    data_dir.mkdir(parents=True, exist_ok=True)
    if not os.access(data_dir, os.W_OK):
        logger.critical("Data directory %s is not writable", data_dir)
        raise ConfigurationError(f"Data directory {data_dir} is not writable")

    if not os.environ.get("JAOTHUI_SECRET_KEY"):
        logger.warning("JAOTHUI_SECRET_KEY is not set; using the development signing key")
    if not os.environ.get("CRON_SECRET"):
        logger.warning("CRON_SECRET is not set; using the development cron secret")

    logger.info("Configuration validated (rules version %s)", rules.project.rules_version)
