import copy
import json
import logging
import os

import requests

from .errors import ConfigurationError

log = logging.getLogger(__name__)

# --- Configuration ---
CONFIG_FILE_NAME = 'config.json'
CONFIG_ENDPOINT_ENV = 'GETTEXT_REPLACER_CONFIG_ENDPOINT'

# --- Default configuration if config.json is not found ---
DEFAULT_CONFIG = {
    "callee_names": {
        "gettext": ["gettext", "$gettext", "_", "__", "i18n.gettext", "this.$gettext"],
        "pgettext": ["pgettext", "$pgettext", "i18n.pgettext", "this.$pgettext"],
        "ngettext": ["ngettext", "$ngettext", "i18n.ngettext", "this.$ngettext"],
        "npgettext": ["npgettext", "$npgettext", "i18n.npgettext", "this.$npgettext"],
    },
    "component_extension": ".vue",
    "enable_vue": True,
    "file_extensions": [".js", ".jsx", ".mjs", ".cjs", ".ts", ".tsx", ".mts", ".cts", ".vue"],
    "excluded_directories": [
        "node_modules",
        "dist",
        "build",
        "coverage",
        ".git",
    ],
}

CALLEE_GROUPS = ("gettext", "pgettext", "ngettext", "npgettext")


def load_config(config_path=None, endpoint=None, use_service=True):
    """
    Loads configuration: 1) config service (if an endpoint is known), 2) fallback to default,
    3) user config.json overwrites fields.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    endpoint = (endpoint or os.getenv(CONFIG_ENDPOINT_ENV)) if use_service else None

    # 1. Try the config service
    if endpoint:
        try:
            response = requests.get(endpoint.rstrip('/') + '/config', timeout=3)
            if response.status_code == 200:
                server_config = response.json().get("config", {})
                if server_config:
                    log.info("Loaded configuration from %s", endpoint)
                    config.update(server_config)
                else:
                    log.warning("Config service returned an empty config. Using default config.")
            else:
                log.warning("Config service returned status %s. Using default config.", response.status_code)
        except (requests.RequestException, ValueError) as e:
            log.warning("Could not fetch config from %s: %s. Using default config.", endpoint, e)

    # 2. If user config.json exists, overwrite only specified fields
    config_path = config_path or os.path.join(os.getcwd(), CONFIG_FILE_NAME)
    if os.path.exists(config_path):
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                user_config = json.load(f)
        except json.JSONDecodeError:
            log.warning("Could not parse %s. Using previous config.", config_path)
        else:
            log.info("Loaded user configuration from %s (overwriting fields)", config_path)
            for key, value in user_config.items():
                config[key] = value

    validate_config(config)
    return config


def validate_config(config):
    callee_names = config.get("callee_names")
    if not isinstance(callee_names, dict):
        raise ConfigurationError("'callee_names' must be an object mapping call kinds to name lists")
    for group, names in callee_names.items():
        if group not in CALLEE_GROUPS:
            raise ConfigurationError(
                f"Unknown callee group '{group}', expected one of: {', '.join(CALLEE_GROUPS)}"
            )
        if not isinstance(names, list) or not all(isinstance(name, str) for name in names):
            raise ConfigurationError(f"'callee_names.{group}' must be a list of strings")
    extension = config.get("component_extension")
    if not isinstance(extension, str) or not extension.startswith('.'):
        raise ConfigurationError("'component_extension' must be a file extension such as '.vue'")


def context_plural_callees(config):
    """Plural calls that take a leading context argument."""
    return set(config["callee_names"].get("npgettext", []))
