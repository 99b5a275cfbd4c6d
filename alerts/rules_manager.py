"""Alert rules loading and management."""
import logging
from dataclasses import replace

logger = logging.getLogger("mtmonitor.alerts.rules")


class RulesManager:
    """Session-scoped rule store in front of the monitoring API (live or mock)."""

    def __init__(self, api):
        self.api = api
        self.rules = []

    def load(self):
        self.rules = self.api.get_alert_rules()
        logger.info(f"Loaded {len(self.rules)} alert rules")
        return self.rules

    def get_enabled_rules(self):
        return [r for r in self.rules if r.is_enabled]

    def get_rule(self, rule_id):
        for r in self.rules:
            if r.id == rule_id:
                return r
        return None

    def get_all_rules(self):
        return self.rules

    def save(self, form):
        """Persist a RuleForm: update when it was opened on a rule, else create."""
        payload = form.to_payload()
        if form.is_edit:
            saved = self.api.update_alert_rule(form.original.id, payload)
            logger.info(f"Updated alert rule {saved.id} ({saved.name})")
        else:
            saved = self.api.create_alert_rule(payload)
            logger.info(f"Created alert rule {saved.id} ({saved.name})")
        self._replace(saved)
        return saved

    def toggle(self, rule_id):
        enabled = self.api.toggle_alert_rule(rule_id)
        rule = self.get_rule(rule_id)
        if rule is not None:
            self._replace(replace(rule, is_enabled=enabled))
        logger.info(f"Alert rule {rule_id} {'enabled' if enabled else 'disabled'}")
        return enabled

    def delete(self, rule_id):
        self.api.delete_alert_rule(rule_id)
        self.rules = [r for r in self.rules if r.id != rule_id]
        logger.info(f"Deleted alert rule {rule_id}")

    def _replace(self, rule):
        for i, r in enumerate(self.rules):
            if r.id == rule.id:
                self.rules[i] = rule
                return
        self.rules.append(rule)
