"""
Flask JSON backend for the rule editor and schedule editor.

The browser form calls these instead of carrying its own copy of the
preset tables and cron rules:

  GET  /api/presets/<family>                      - preset names and the values they write
  GET  /api/presets/<family>/detect?operator=&value=
  GET  /api/presets/<family>/<preset>             - partial rule update for a preset
  POST /api/rules/preview                         - normalized rule + chips + preview text
  POST /api/schedule/encode                       - {type, hour, minute, weekday} → cron
  GET  /api/schedule/decode?cron=                 - cron → schedule (never fails)
  GET  /api/notifications/unread                  - unread badge count and preview

Started via: wsgi.py (gunicorn) or flask --app wsgi run
"""
import logging

from flask import Flask, jsonify, request

from alerts.presets import CUSTOM, apply_preset, detect_preset, family_presets
from alerts.rule_form import RuleForm, RuleValidationError
from alerts.schedule import decode_schedule, describe_schedule, encode_schedule, match_schedule
from models.enums import PresetFamily
from models.schedule import Schedule, ScheduleError
from monitor.api.wire import rule_from_wire

logger = logging.getLogger("mtmonitor.web.app")


def _number_arg(raw):
    if raw is None:
        return None
    try:
        value = float(raw)
    except ValueError:
        return raw
    return int(value) if value.is_integer() else value


def create_app(config: dict, engines: dict) -> Flask:
    """
    Factory function.

    Args:
        config: Application config dict
        engines: dict of initialized objects (api, bell)
    """
    app = Flask(__name__)

    def _known_family(family):
        try:
            return PresetFamily(family)
        except ValueError:
            return None

    @app.route("/api/presets/<family>")
    def presets(family):
        fam = _known_family(family)
        if fam is None:
            return jsonify({"error": f"Unknown preset family: {family}"}), 404
        return jsonify({
            "family": fam.value,
            "presets": [{"name": p, "update": apply_preset(fam, p)} for p in family_presets(fam)],
            "custom": CUSTOM,
        })

    @app.route("/api/presets/<family>/detect")
    def presets_detect(family):
        # Unknown families and junk values are "custom", never an error
        value = _number_arg(request.args.get("value"))
        return jsonify({"preset": detect_preset(family, request.args.get("operator"), value)})

    @app.route("/api/presets/<family>/<preset>")
    def presets_apply(family, preset):
        if _known_family(family) is None:
            return jsonify({"error": f"Unknown preset family: {family}"}), 404
        return jsonify({"update": apply_preset(family, preset)})

    @app.route("/api/rules/preview", methods=["POST"])
    def rules_preview():
        body = request.get_json(silent=True) or {}
        try:
            form = RuleForm(rule_from_wire(body.get("rule") or {}))
        except ValueError as e:
            return jsonify({"error": str(e)}), 400

        try:
            if body.get("category"):
                form.change_category(body["category"])
            if body.get("metric"):
                form.change_metric(body["metric"])
            for family, preset in (body.get("presets") or {}).items():
                form.select_preset(family, preset)
        except RuleValidationError as e:
            return jsonify({"error": str(e), "errors": e.errors}), 400
        except ValueError as e:
            return jsonify({"error": str(e)}), 400

        r = form.rule
        return jsonify({
            "rule": {
                "category": r.category, "metric": r.metric, "operator": r.operator,
                "threshold": r.threshold, "duration": r.duration, "cooldown": r.cooldown,
            },
            "chips": form.chips,
            "preview": form.preview(body.get("serviceName")),
            "errors": form.errors(),
        })

    @app.route("/api/schedule/encode", methods=["POST"])
    def schedule_encode():
        body = request.get_json(silent=True) or {}
        try:
            schedule = Schedule.from_dict(body).validate()
        except ScheduleError as e:
            return jsonify({"error": str(e)}), 400
        return jsonify({"cron": encode_schedule(schedule), "description": describe_schedule(schedule)})

    @app.route("/api/schedule/decode")
    def schedule_decode():
        cron = request.args.get("cron", "")
        schedule = decode_schedule(cron)
        return jsonify({
            "schedule": schedule.to_dict(),
            "description": describe_schedule(schedule),
            "recognized": match_schedule(cron) is not None,
        })

    @app.route("/api/notifications/unread")
    def notifications_unread():
        bell = engines.get("bell")
        if bell is None:
            return jsonify({"error": "Notifications not available"}), 404
        if not bell.items:
            bell.refresh()
        return jsonify({
            "unread": bell.unread_count,
            "preview": [
                {"id": n.id, "message": n.message, "status": n.status,
                 "createdAt": n.created_at, "read": bell.read_state.is_read(n.id)}
                for n in bell.preview_items
            ],
        })

    @app.route("/api/health")
    def health():
        return jsonify({"status": "ok", "mock": bool(config.get("api", {}).get("use_mock"))})

    return app
