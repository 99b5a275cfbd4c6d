"""Alert rule presets, schedule codec, and rule editing."""
from alerts.presets import CUSTOM, detect_preset, apply_preset, family_presets, family_for
from alerts.schedule import encode_schedule, decode_schedule, describe_schedule, match_schedule
from alerts.rule_form import RuleForm, RuleValidationError
from alerts.rules_manager import RulesManager
