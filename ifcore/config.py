import logging
import os

import yaml
from dotenv import load_dotenv
from rich.logging import RichHandler

logger = logging.getLogger(__name__)

CONFIG_PATH = "config.yaml"

DEFAULTS = {
    'story': 'cottage',
    'stories_dir': 'stories/yaml',
    'skip_intro': False,
    'debug_mode': False,
    'log_level': 'WARNING',
}

DEFAULT_YAML = """
# IFCORE CONFIGURATION
# --------------------
# story is a file name (without .yaml) under stories_dir.
# IFCORE_STORY, IFCORE_LOG_LEVEL and IFCORE_SKIP_INTRO in the environment
# (or .env) win over the values here.

story: cottage
stories_dir: stories/yaml
skip_intro: false
debug_mode: false
log_level: WARNING
"""

TRUE_WORDS = ('1', 'true', 'yes', 'on')


def load_config(config_path=CONFIG_PATH):
    """
    Loads config.yaml or creates default if missing, then applies .env and
    environment overrides.
    """
    if not os.path.exists(config_path):
        with open(config_path, "w") as f:
            f.write(DEFAULT_YAML.strip() + "\n")

    with open(config_path, "r") as f:
        loaded = yaml.safe_load(f) or {}

    config = dict(DEFAULTS)
    config.update(loaded)

    load_dotenv()
    if os.getenv("IFCORE_STORY"):
        config['story'] = os.getenv("IFCORE_STORY")
    if os.getenv("IFCORE_LOG_LEVEL"):
        config['log_level'] = os.getenv("IFCORE_LOG_LEVEL")
    if os.getenv("IFCORE_SKIP_INTRO"):
        config['skip_intro'] = os.getenv("IFCORE_SKIP_INTRO").strip().lower() in TRUE_WORDS
    return config


def save_config(config, config_path=CONFIG_PATH):
    with open(config_path, "w") as f:
        yaml.dump(config, f, default_flow_style=False)


def setup_logging(level="WARNING", console=None):
    """Routes library logging through rich."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )
    logger.debug("Logging at %s", logging.getLevelName(level))
