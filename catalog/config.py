"""Logging setup and configuration loading for the catalog service."""
import json
import logging
import os
from typing import Any, Dict

DEFAULT_CONFIG: Dict[str, Any] = {
    'backend': 'memory',
    'database_url': 'sqlite:///catalog.db',
    'log_level': 'INFO',
    'seed_demo': False,
    'host': '127.0.0.1',
    'port': 5000,
}

# Environment variables take precedence over the config file.
ENV_OVERRIDES = {
    'backend': 'CATALOG_BACKEND',
    'database_url': 'DATABASE_URL',
    'log_level': 'CATALOG_LOG_LEVEL',
    'seed_demo': 'CATALOG_SEED_DEMO',
    'host': 'CATALOG_HOST',
    'port': 'CATALOG_PORT',
}

BACKENDS = ('memory', 'sql')


def setup_logging(level: str = 'WARNING') -> logging.Logger:
    """Configure the root catalog logger.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Defaults to WARNING so normal use is quiet.

    Returns:
        Configured logger instance.
    """
    numeric = getattr(logging, str(level).upper(), logging.WARNING)
    logger = logging.getLogger('catalog')
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter('[%(levelname)s] %(name)s: %(message)s'))
        logger.addHandler(handler)
    logger.setLevel(numeric)
    return logger


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ('1', 'true', 'yes', 'on')


def load_config(config_path: str = 'config.json') -> Dict[str, Any]:
    """Load settings from *config_path*, then apply environment overrides.

    A missing file is not an error; a corrupt one is logged and ignored.
    Unknown keys in the file are kept as-is.
    """
    config: Dict[str, Any] = dict(DEFAULT_CONFIG)
    if os.path.exists(config_path):
        try:
            with open(config_path, 'r') as f:
                loaded = json.load(f)
            if isinstance(loaded, dict):
                config.update(loaded)
            else:
                logging.getLogger('catalog.config').warning(
                    "Ignoring %s: top level must be a JSON object", config_path)
        except (OSError, json.JSONDecodeError) as exc:
            logging.getLogger('catalog.config').warning(
                "Could not load %s: %s", config_path, exc)

    for key, env_var in ENV_OVERRIDES.items():
        if os.getenv(env_var):
            config[key] = os.getenv(env_var)

    config['backend'] = str(config['backend']).lower()
    config['seed_demo'] = _as_bool(config['seed_demo'])
    try:
        config['port'] = int(config['port'])
    except (TypeError, ValueError):
        logging.getLogger('catalog.config').warning(
            "Invalid port %r, using %d", config['port'], DEFAULT_CONFIG['port'])
        config['port'] = DEFAULT_CONFIG['port']
    return config
