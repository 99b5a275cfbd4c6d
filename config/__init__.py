"""Configuration: bundled YAML defaults, optional user YAML, MT_* environment overrides."""
import os
import yaml
from pathlib import Path

_config = None
_DEFAULT_CONFIG = Path(__file__).parent / "default_config.yaml"

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _as_bool(raw):
    return raw.strip().lower() in _TRUE_VALUES


# env var -> (section, key, converter)
ENV_OVERRIDES = {
    "MT_API_BASE_URL": ("api", "base_url", str),
    "MT_USE_MOCK": ("api", "use_mock", _as_bool),
    "MT_STORAGE_PATH": ("storage", "path", str),
    "MT_LOG_LEVEL": ("logging", "level", str.upper),
}


def load_config(path=None):
    """Defaults, then the YAML at ``path`` if it exists, then environment overrides."""
    global _config

    with open(_DEFAULT_CONFIG) as f:
        config = yaml.safe_load(f)

    if path and Path(path).exists():
        with open(path) as f:
            config = _deep_merge(config, yaml.safe_load(f) or {})

    _apply_env_overrides(config, os.environ)
    _validate_config(config)
    _config = config
    return config


def get_config():
    """Return cached config, loading defaults if needed."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def _apply_env_overrides(config, environ):
    for env_key, (section, key, convert) in ENV_OVERRIDES.items():
        raw = environ.get(env_key)
        if raw:
            config.setdefault(section, {})[key] = convert(raw)


def _deep_merge(base, override):
    """Recursively merge override into base dict."""
    result = base.copy()
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _validate_config(config):
    for section in ("api", "notifications", "storage", "logging"):
        if not isinstance(config.get(section), dict):
            raise ValueError(f"Missing required config section: {section}")

    base_url = str(config["api"].get("base_url", ""))
    if not base_url.startswith(("http://", "https://")):
        raise ValueError(f"api.base_url must be an http(s) URL, got {base_url!r}")

    notif = config["notifications"]
    if notif["poll_interval"] < 10:
        raise ValueError("notifications.poll_interval must be >= 10 seconds")
    if notif["max_read_ids"] < 1:
        raise ValueError("notifications.max_read_ids must be >= 1")
    if not 1 <= notif["preview_limit"] <= notif["fetch_limit"]:
        raise ValueError("notifications.preview_limit must be between 1 and fetch_limit")
