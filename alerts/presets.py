"""Named presets for alert rule fields and their detection.

Every preset family maps a closed set of names onto exact rule values. Any
value that matches no entry is reported as ``custom``: a raw threshold such
as 437 is still a valid rule, it just has no shortcut button.
"""
import logging
from numbers import Number

from models.enums import PresetFamily

logger = logging.getLogger("mtmonitor.alerts.presets")

CUSTOM = "custom"

# family -> [(preset, operator or None, value)], in display order
PRESET_TABLES = {
    PresetFamily.HTTP_STATUS: [
        ("2xx", "lte", 299),
        ("4xx", "gte", 400),
        ("5xx", "gte", 500),
    ],
    PresetFamily.RESPONSE_TIME: [
        ("1s", "gt", 1000),
        ("3s", "gt", 3000),
        ("5s", "gt", 5000),
        ("10s", "gt", 10000),
    ],
    PresetFamily.RESOURCE_THRESHOLD: [
        ("70%", None, 70),
        ("80%", None, 80),
        ("90%", None, 90),
        ("95%", None, 95),
    ],
    PresetFamily.ENDPOINT_DURATION: [
        ("1x", None, 1),
        ("3x", None, 3),
        ("5x", None, 5),
    ],
    PresetFamily.RESOURCE_DURATION: [
        ("1min", None, 1),
        ("3min", None, 3),
        ("5min", None, 5),
        ("10min", None, 10),
    ],
    PresetFamily.COOLDOWN: [
        ("5min", None, 300),
        ("15min", None, 900),
        ("30min", None, 1800),
        ("1hr", None, 3600),
    ],
}

# Rule field written by each family's value
FAMILY_FIELDS = {
    PresetFamily.HTTP_STATUS: "threshold",
    PresetFamily.RESPONSE_TIME: "threshold",
    PresetFamily.RESOURCE_THRESHOLD: "threshold",
    PresetFamily.ENDPOINT_DURATION: "duration",
    PresetFamily.RESOURCE_DURATION: "duration",
    PresetFamily.COOLDOWN: "cooldown",
}

# Only the HTTP status buckets are told apart by operator
_OPERATOR_KEYED = {PresetFamily.HTTP_STATUS}

CATEGORY_DEFAULTS = {
    "resource": {"metric": "cpu", "operator": "gt", "threshold": 80, "duration": 3},
    "endpoint": {"metric": "http_status", "operator": "gte", "threshold": 400, "duration": 3},
}

ENDPOINT_METRIC_DEFAULTS = {
    "http_status": {"operator": "gte", "threshold": 400},
    "response_time": {"operator": "gt", "threshold": 3000},
}


def _family(family):
    try:
        return PresetFamily(family)
    except ValueError:
        logger.debug(f"Unknown preset family: {family!r}")
        return None


def _is_number(value):
    return isinstance(value, Number) and not isinstance(value, bool)


def family_presets(family):
    """Preset names for a family in display order, without ``custom``."""
    fam = _family(family)
    if fam is None:
        return []
    return [name for name, _, _ in PRESET_TABLES[fam]]


def family_for(category, metric, field):
    """Resolve which preset family governs ``field`` of a rule."""
    if field == "cooldown":
        return PresetFamily.COOLDOWN
    is_endpoint = category == "endpoint"
    if field == "duration":
        return PresetFamily.ENDPOINT_DURATION if is_endpoint else PresetFamily.RESOURCE_DURATION
    if field == "threshold":
        if not is_endpoint:
            return PresetFamily.RESOURCE_THRESHOLD
        if metric == "response_time":
            return PresetFamily.RESPONSE_TIME
        if metric == "http_status":
            return PresetFamily.HTTP_STATUS
    return None


def detect_preset(family, operator, threshold):
    """Return the preset whose canonical value equals ``threshold`` exactly.

    For value-only families (durations, cooldown) ``operator`` is ignored and
    ``threshold`` carries the bare value. Comparison is strict numeric
    equality: 400.0 matches ``4xx``, 400.0000001 does not.
    """
    fam = _family(family)
    if fam is None or not _is_number(threshold):
        return CUSTOM

    for name, op, value in PRESET_TABLES[fam]:
        if fam in _OPERATOR_KEYED and operator != op:
            continue
        if threshold == value:
            return name
    return CUSTOM


def apply_preset(family, preset):
    """Return the partial rule update for selecting ``preset``.

    ``custom`` (and any name the family does not know) yields an empty dict:
    choosing it only switches the view to free entry, the rule keeps its
    current values.
    """
    fam = _family(family)
    if fam is None or preset == CUSTOM:
        return {}

    field = FAMILY_FIELDS[fam]
    for name, op, value in PRESET_TABLES[fam]:
        if name != preset:
            continue
        update = {field: value}
        if op is not None:
            update["operator"] = op
        return update

    logger.debug(f"Unknown preset {preset!r} for family {fam.value}")
    return {}
