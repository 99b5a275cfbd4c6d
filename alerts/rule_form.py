"""Alert rule editing session.

Holds a draft AlertRule plus the preset ("chip") shown for each of its
threshold, duration and cooldown fields. Switching category, or switching
metric inside an endpoint rule, replaces every dependent field with that
branch's defaults. Nothing from the previous branch carries over.
"""
import logging
from dataclasses import replace
from numbers import Number

from alerts.presets import (
    CUSTOM, CATEGORY_DEFAULTS, ENDPOINT_METRIC_DEFAULTS, FAMILY_FIELDS,
    apply_preset, detect_preset, family_for,
)
from models.alerts import AlertRule
from models.enums import CATEGORY_METRICS, Operator, PresetFamily, RuleCategory, Severity
from monitor.api.wire import rule_to_payload
from utils.formatters import format_rule_condition

logger = logging.getLogger("mtmonitor.alerts.form")

PRESET_FIELDS = ("threshold", "duration", "cooldown")
EDITABLE_FIELDS = {"name", "operator", "threshold", "duration", "severity", "cooldown",
                   "service_id", "host_id", "is_enabled"}

DURATION_RANGE = (1, 60)
COOLDOWN_RANGE = (60, 86400)


class RuleValidationError(ValueError):
    """Form values that the API would reject. ``errors`` maps field -> message."""
    def __init__(self, errors):
        self.errors = dict(errors)
        summary = ", ".join(f"{k}: {v}" for k, v in sorted(self.errors.items()))
        super().__init__(f"Invalid alert rule ({summary})")


def new_rule():
    """Draft for a brand-new rule: endpoint, HTTP 4xx, 3 checks, 5min cooldown."""
    defaults = CATEGORY_DEFAULTS["endpoint"]
    return AlertRule(
        category="endpoint",
        metric=defaults["metric"],
        operator=defaults["operator"],
        threshold=defaults["threshold"],
        duration=defaults["duration"],
        severity="warning",
        cooldown=300,
        channel_ids=[],
    )


def _is_number(value):
    return isinstance(value, Number) and not isinstance(value, bool)


class RuleForm:

    def __init__(self, rule=None):
        self.open(rule)

    def open(self, rule=None):
        """Reset every field and chip, from ``rule`` or from the new-rule defaults.

        Completes before returning, so nothing from a previously edited rule
        can be observed afterwards.
        """
        self.original = rule
        if rule is None:
            self.rule = new_rule()
        else:
            self.rule = replace(rule, channel_ids=list(rule.channel_ids))
        self.chips = {field: self._detect(field) for field in PRESET_FIELDS}
        logger.debug(f"Opened rule form ({'edit ' + rule.id if rule else 'new'})")
        return self

    @property
    def is_edit(self):
        return self.original is not None

    def family(self, field):
        return family_for(self.rule.category, self.rule.metric, field)

    def _detect(self, field):
        family = self.family(field)
        if family is None:
            return CUSTOM
        return detect_preset(family, self.rule.operator, getattr(self.rule, field))

    def _redetect(self, *fields):
        for field in fields:
            self.chips[field] = self._detect(field)

    # ── Branch switches ───────────────────────────────

    def change_category(self, category):
        category = RuleCategory(category).value
        defaults = CATEGORY_DEFAULTS[category]
        self.rule = replace(self.rule, category=category, **defaults)
        self._redetect("threshold", "duration")
        return self

    def change_metric(self, metric):
        allowed = [m.value for m in CATEGORY_METRICS[RuleCategory(self.rule.category)]]
        metric = getattr(metric, "value", metric)
        if metric not in allowed:
            raise RuleValidationError({"metric": f"must be one of {allowed} for {self.rule.category} rules"})
        if self.rule.is_endpoint:
            self.rule = replace(self.rule, metric=metric, **ENDPOINT_METRIC_DEFAULTS[metric])
        else:
            self.rule = replace(self.rule, metric=metric)
        self._redetect("threshold")
        return self

    # ── Edits ─────────────────────────────────────────

    def select_preset(self, family, preset):
        """Select a chip. ``custom`` only reveals the raw field and leaves values alone."""
        family = PresetFamily(family)
        field = FAMILY_FIELDS[family]
        if self.family(field) != family:
            raise ValueError(f"Preset family {family.value} does not apply to this rule")

        if preset == CUSTOM:
            self.chips[field] = CUSTOM
            return self

        update = apply_preset(family, preset)
        if not update:
            raise ValueError(f"Unknown preset {preset!r} for {family.value}")
        self.rule = replace(self.rule, **update)
        self.chips[field] = preset
        return self

    def set_field(self, name, value):
        """Raw edit of a single field.

        A chip already in ``custom`` stays there while the user types.
        Otherwise it is re-detected from the new value.
        """
        if name not in EDITABLE_FIELDS:
            raise ValueError(f"Field {name!r} cannot be edited directly")
        self.rule = replace(self.rule, **{name: value})
        for field in PRESET_FIELDS:
            if self.chips.get(field) != CUSTOM:
                self._redetect(field)
        return self

    def toggle_channel(self, channel_id):
        ids = self.rule.channel_ids
        if channel_id in ids:
            ids.remove(channel_id)
        else:
            ids.append(channel_id)
        return self

    # ── Output ────────────────────────────────────────

    def preview(self, service_name=None):
        return format_rule_condition(self.rule, service_name=service_name)

    def errors(self):
        r = self.rule
        errors = {}
        if not str(r.name or "").strip():
            errors["name"] = "required"

        if r.category not in [c.value for c in RuleCategory]:
            errors["category"] = "must be resource or endpoint"
        else:
            allowed = [m.value for m in CATEGORY_METRICS[RuleCategory(r.category)]]
            if r.metric not in allowed:
                errors["metric"] = f"must be one of {allowed}"
            if r.category == "endpoint" and not r.service_id:
                errors["service_id"] = "required"

        if r.operator not in [o.value for o in Operator]:
            errors["operator"] = "unknown operator"
        if r.severity not in [s.value for s in Severity]:
            errors["severity"] = "unknown severity"

        if not _is_number(r.threshold) or r.threshold < 0:
            errors["threshold"] = "must be a number >= 0"

        low, high = DURATION_RANGE
        if not _is_number(r.duration) or not low <= r.duration <= high:
            errors["duration"] = f"must be between {low} and {high}"

        low, high = COOLDOWN_RANGE
        if not _is_number(r.cooldown) or not low <= r.cooldown <= high:
            errors["cooldown"] = f"must be between {low} and {high} seconds"

        if not all(isinstance(c, str) for c in r.channel_ids):
            errors["channel_ids"] = "must be channel id strings"
        return errors

    def validate(self):
        errors = self.errors()
        if errors:
            raise RuleValidationError(errors)
        return self.rule

    def build_rule(self):
        """Validated copy of the draft, ready to save."""
        rule = self.validate()
        if not rule.is_endpoint:
            rule = replace(rule, service_id=None)
        return replace(rule, channel_ids=list(rule.channel_ids))

    def to_payload(self):
        return rule_to_payload(self.build_rule())
