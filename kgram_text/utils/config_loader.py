"""
Configuration loading for the text generator.

Settings are read from YAML files in the project's ``configs`` directory:
``text_generator_{environment}.yaml`` first, then ``text_generator.yaml``.
Keys missing from the file fall back to ``DEFAULT_CONFIG``.
"""

import os
import logging

import yaml

DEFAULT_CONFIG = {
    "alphabet_size": 128,
    "normalize_text": True,
    "seed": None,
    "log_file": None,
    "console_json": True,
}


def find_config_dir(start_dir=None):
    """
    Find the project's ``configs`` directory.

    Walks up from ``start_dir`` to the project root, the first directory
    holding ``pyproject.toml``, and looks for ``configs`` there only. An
    installed copy outside a project tree therefore finds nothing.

    Args:
        start_dir (str, optional): Directory to start from, this module's
            directory by default

    Returns:
        str or None: Path of the configs directory, None if there is none
    """
    current = os.path.abspath(start_dir or os.path.dirname(__file__))
    while True:
        if os.path.isfile(os.path.join(current, "pyproject.toml")):
            candidate = os.path.join(current, "configs")
            return candidate if os.path.isdir(candidate) else None
        parent = os.path.dirname(current)
        if parent == current:
            return None
        current = parent


def load_generator_config(environment="development", config_dir=None, logger=None):
    """
    Load the text generator configuration.

    Args:
        environment (str): Which environment to use ('development', 'test', ...)
        config_dir (str, optional): Directory holding the YAML files. Looked
            up from the project root when omitted.
        logger (logging.Logger, optional): Logger for config events

    Returns:
        dict: DEFAULT_CONFIG updated with the first configuration file found

    Raises:
        ValueError: If a configuration file is not valid YAML or does not
            hold a mapping
    """
    logger = logger or logging.getLogger(__name__)
    config = dict(DEFAULT_CONFIG)

    config_dir = config_dir or find_config_dir()
    if config_dir is None:
        logger.warning("No configs directory found, using default configuration")
        return config

    env_config_path = os.path.join(config_dir, f"text_generator_{environment}.yaml")
    default_config_path = os.path.join(config_dir, "text_generator.yaml")

    for config_path in (env_config_path, default_config_path):
        if not os.path.exists(config_path):
            continue

        try:
            with open(config_path, "r") as f:
                loaded = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            logger.error(f"Error loading config from {config_path}: {e}", extra={
                "metrics": {"config_path": config_path, "error": str(e)}
            })
            raise ValueError(f"invalid configuration file {config_path}: {e}") from e

        if not isinstance(loaded, dict):
            raise ValueError(f"configuration file {config_path} must hold a mapping")

        unknown = sorted(set(loaded) - set(DEFAULT_CONFIG))
        if unknown:
            logger.warning("Ignoring unknown configuration keys", extra={
                "metrics": {"config_path": config_path, "keys": unknown}
            })

        config.update({key: value for key, value in loaded.items() if key in DEFAULT_CONFIG})
        logger.info("Text generator config loaded", extra={
            "metrics": {"config_path": config_path, "environment": environment}
        })
        return config

    logger.warning("No text generator configuration found, using defaults", extra={
        "metrics": {"config_dir": config_dir, "environment": environment}
    })
    return config
