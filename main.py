#!/usr/bin/env python3
"""MT Monitor - alert rule and health-check schedule client, CLI entry point."""
import sys
import logging
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from __version__ import __version__

console = Console()
logger = logging.getLogger("mtmonitor.cli")


def _init_components(config_path=None, verbose=False):
    """Lazy initialization of all components."""
    from utils.logger import setup_logging
    from utils.storage import KeyValueStore
    from config import load_config
    from monitor.api import create_api
    from alerts.rules_manager import RulesManager
    from notifications.read_state import ReadStateTracker
    from notifications.bell import NotificationBell

    config = load_config(config_path)
    log_cfg = config["logging"]
    setup_logging("DEBUG" if verbose else log_cfg.get("level", "INFO"), log_cfg.get("file"))

    api = create_api(config)
    store = KeyValueStore(config["storage"]["path"])
    notif_cfg = config["notifications"]
    read_state = ReadStateTracker(store, capacity=notif_cfg["max_read_ids"])
    bell = NotificationBell(
        api, read_state,
        fetch_limit=notif_cfg["fetch_limit"],
        preview_limit=notif_cfg["preview_limit"],
        poll_interval=notif_cfg["poll_interval"],
    )

    return {
        "config": config,
        "api": api,
        "rules": RulesManager(api),
        "store": store,
        "read_state": read_state,
        "bell": bell,
    }


@click.group()
@click.option("--config", "config_path", default=None, help="Path to config YAML")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.version_option(__version__, prog_name="mtmonitor")
@click.pass_context
def cli(ctx, config_path, verbose):
    """MT Monitor - alert rules, presets, check schedules & notifications."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose


def _get_components(ctx):
    if "_components" not in ctx.obj:
        ctx.obj["_components"] = _init_components(ctx.obj.get("config_path"), ctx.obj.get("verbose"))
    return ctx.obj["_components"]


def _fail(message):
    console.print(f"[red]✗ {escape(message)}[/red]")
    sys.exit(1)


def _parse_number(raw, integer=False):
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise click.BadParameter(f"{raw!r} is neither a preset nor a number")
    if integer or value.is_integer():
        return int(value)
    return value


def _apply_value(form, field, raw):
    """Accept either a preset name for the field's family or a raw number."""
    from alerts.presets import family_presets

    family = form.family(field)
    if family is not None and raw in family_presets(family):
        form.select_preset(family, raw)
    else:
        form.set_field(field, _parse_number(raw, integer=(field != "threshold")))


# ──────────────────────────────────────────────────────
# RULES
# ──────────────────────────────────────────────────────
@cli.group()
def rules():
    """List, create, edit, toggle and delete alert rules."""
    pass


@rules.command("list")
@click.option("--enabled-only", is_flag=True, help="Hide disabled rules")
@click.pass_context
def rules_list(ctx, enabled_only):
    """List all alert rules."""
    from utils.http_client import APIError
    from utils.formatters import format_rule_condition, format_cooldown

    c = _get_components(ctx)
    try:
        c["rules"].load()
    except APIError as e:
        _fail(f"Could not load rules: {e}")

    items = c["rules"].get_enabled_rules() if enabled_only else c["rules"].get_all_rules()
    table = Table(title="Alert Rules", show_header=True)
    table.add_column("ID", style="dim")
    table.add_column("Name")
    table.add_column("Condition")
    table.add_column("Severity")
    table.add_column("Cooldown", justify="right")
    table.add_column("Channels")
    table.add_column("Enabled")
    for r in items:
        table.add_row(
            r.id, escape(r.name), escape(format_rule_condition(r)), r.severity, format_cooldown(r.cooldown),
            "all" if r.notifies_all_channels else ", ".join(r.channel_ids),
            "[green]✓[/green]" if r.is_enabled else "[red]✗[/red]",
        )
    console.print(table)


@rules.command("show")
@click.argument("rule_id")
@click.pass_context
def rules_show(ctx, rule_id):
    """Show one rule with its detected presets."""
    from alerts.rule_form import RuleForm
    from utils.http_client import APIError
    from utils.formatters import format_cooldown, format_timestamp

    c = _get_components(ctx)
    try:
        rule = c["api"].get_alert_rule(rule_id)
    except APIError as e:
        _fail(f"Could not load rule {rule_id}: {e}")

    form = RuleForm(rule)
    console.print(f"[bold]{escape(rule.name)}[/bold] [dim]({rule.id})[/dim]")
    console.print(f"  Condition: {escape(form.preview())}")
    console.print(f"  Category:  {rule.category} / {rule.metric}")
    console.print(f"  Severity:  {rule.severity}")
    console.print(f"  Cooldown:  {format_cooldown(rule.cooldown)}")
    console.print(f"  Channels:  {'all' if rule.notifies_all_channels else ', '.join(rule.channel_ids)}")
    console.print(f"  Enabled:   {'yes' if rule.is_enabled else 'no'}")
    console.print(f"  Updated:   {format_timestamp(rule.updated_at)}")
    console.print("  Presets:   " + ", ".join(f"{k}={v}" for k, v in form.chips.items()))


def _rule_options(func):
    options = [
        click.option("--name", default=None, help="Rule name"),
        click.option("--category", type=click.Choice(["resource", "endpoint"]), default=None,
                     help="Switching category resets metric, operator, threshold and duration"),
        click.option("--metric", type=click.Choice(["cpu", "memory", "disk", "http_status", "response_time"]),
                     default=None),
        click.option("--service", "service_id", default=None, help="Service id (endpoint rules)"),
        click.option("--host", "host_id", default=None, help="Host id (resource rules)"),
        click.option("--operator", type=click.Choice(["gt", "gte", "lt", "lte", "eq"]), default=None),
        click.option("--threshold", default=None, help="Preset (2xx, 4xx, 3s, 80%...) or number"),
        click.option("--duration", default=None, help="Preset (3x, 5min...) or number"),
        click.option("--cooldown", default=None, help="Preset (5min, 1hr...) or seconds"),
        click.option("--severity", type=click.Choice(["critical", "warning", "info"]), default=None),
        click.option("--channel", "channels", multiple=True, help="Toggle a channel id (repeatable)"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _fill_form(form, opts):
    if opts["category"]:
        form.change_category(opts["category"])
    if opts["metric"]:
        form.change_metric(opts["metric"])
    for field in ("name", "service_id", "host_id", "operator", "severity"):
        if opts[field] is not None:
            form.set_field(field, opts[field])
    for field in ("threshold", "duration", "cooldown"):
        if opts[field] is not None:
            _apply_value(form, field, opts[field])
    for channel_id in opts["channels"]:
        form.toggle_channel(channel_id)


@rules.command("create")
@_rule_options
@click.pass_context
def rules_create(ctx, **opts):
    """Create a rule. Starts from HTTP 4xx, 3 checks, 5min cooldown."""
    from alerts.rule_form import RuleForm, RuleValidationError
    from utils.http_client import APIError

    c = _get_components(ctx)
    form = RuleForm()
    try:
        _fill_form(form, opts)
        saved = c["rules"].save(form)
    except RuleValidationError as e:
        _fail("; ".join(f"{k}: {v}" for k, v in e.errors.items()))
    except (APIError, ValueError) as e:
        _fail(str(e))
    console.print(f"[green]✓[/green] Created rule {saved.id}: {escape(form.preview())}")


@rules.command("edit")
@click.argument("rule_id")
@_rule_options
@click.pass_context
def rules_edit(ctx, rule_id, **opts):
    """Edit an existing rule."""
    from alerts.rule_form import RuleForm, RuleValidationError
    from utils.http_client import APIError

    c = _get_components(ctx)
    try:
        form = RuleForm(c["api"].get_alert_rule(rule_id))
        _fill_form(form, opts)
        saved = c["rules"].save(form)
    except RuleValidationError as e:
        _fail("; ".join(f"{k}: {v}" for k, v in e.errors.items()))
    except (APIError, ValueError) as e:
        _fail(str(e))
    console.print(f"[green]✓[/green] Updated rule {saved.id}: {escape(form.preview())}")


@rules.command("toggle")
@click.argument("rule_id")
@click.pass_context
def rules_toggle(ctx, rule_id):
    """Enable or disable a rule without touching its other fields."""
    from utils.http_client import APIError

    c = _get_components(ctx)
    try:
        enabled = c["rules"].toggle(rule_id)
    except APIError as e:
        _fail(str(e))
    console.print(f"Rule {rule_id} is now {'[green]enabled[/green]' if enabled else '[red]disabled[/red]'}")


@rules.command("delete")
@click.argument("rule_id")
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def rules_delete(ctx, rule_id, yes):
    """Delete a rule."""
    from utils.http_client import APIError

    if not yes:
        click.confirm(f"Delete rule {rule_id}?", abort=True)
    c = _get_components(ctx)
    try:
        c["rules"].delete(rule_id)
    except APIError as e:
        _fail(str(e))
    console.print(f"[green]✓[/green] Deleted rule {rule_id}")


# ──────────────────────────────────────────────────────
# PRESETS
# ──────────────────────────────────────────────────────
@cli.group()
def presets():
    """Inspect preset families."""
    pass


_FAMILIES = ["http_status", "response_time", "resource_threshold",
             "endpoint_duration", "resource_duration", "cooldown"]


@presets.command("list")
@click.argument("family", required=False, type=click.Choice(_FAMILIES))
def presets_list(family):
    """Show preset names and the values they write."""
    from alerts.presets import family_presets, apply_preset

    table = Table(title="Presets", show_header=True)
    table.add_column("Family")
    table.add_column("Preset")
    table.add_column("Writes")
    for fam in [family] if family else _FAMILIES:
        for name in family_presets(fam):
            update = apply_preset(fam, name)
            table.add_row(fam, name, ", ".join(f"{k}={v}" for k, v in update.items()))
    console.print(table)


@presets.command("detect")
@click.argument("family", type=click.Choice(_FAMILIES))
@click.argument("value")
@click.option("--operator", default=None, type=click.Choice(["gt", "gte", "lt", "lte", "eq"]))
def presets_detect(family, value, operator):
    """Which preset (or 'custom') a raw value corresponds to."""
    from alerts.presets import detect_preset

    console.print(detect_preset(family, operator, _parse_number(value)))


# ──────────────────────────────────────────────────────
# SCHEDULES
# ──────────────────────────────────────────────────────
@cli.group()
def schedule():
    """Convert health-check schedules to and from cron."""
    pass


@schedule.command("encode")
@click.option("--type", "schedule_type", type=click.Choice(["daily", "weekly"]), default="daily")
@click.option("--hour", type=click.IntRange(0, 23), default=9)
@click.option("--minute", type=click.IntRange(0, 59), default=0)
@click.option("--weekday", type=click.IntRange(0, 6), default=1, help="0=Sunday … 6=Saturday")
def schedule_encode(schedule_type, hour, minute, weekday):
    """Print the cron expression for a schedule."""
    from models.schedule import Schedule
    from alerts.schedule import encode_schedule, describe_schedule

    s = Schedule(schedule_type, hour, minute, weekday)
    console.print(encode_schedule(s))
    console.print(f"[dim]{describe_schedule(s)}[/dim]")


@schedule.command("decode")
@click.argument("cron")
def schedule_decode(cron):
    """Decode a cron expression. Unknown shapes fall back to daily 09:00."""
    from alerts.schedule import decode_schedule, encode_schedule, describe_schedule, match_schedule

    s = decode_schedule(cron)
    console.print(describe_schedule(s))
    if match_schedule(cron) is None:
        console.print(f"[yellow]Not a daily/weekly expression; editing would save {encode_schedule(s)!r}[/yellow]")


# ──────────────────────────────────────────────────────
# SERVICES
# ──────────────────────────────────────────────────────
@cli.group()
def services():
    """Monitored services and their check schedules."""
    pass


@services.command("list")
@click.pass_context
def services_list(ctx):
    """List services with their check schedule."""
    from utils.http_client import APIError
    from alerts.schedule import decode_schedule, describe_schedule

    c = _get_components(ctx)
    try:
        items = c["api"].get_services()
    except APIError as e:
        _fail(f"Could not load services: {e}")

    table = Table(title="Services", show_header=True)
    table.add_column("ID", style="dim")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Schedule")
    table.add_column("Status")
    for s in items:
        if s.schedule_type == "cron":
            when = f"{describe_schedule(decode_schedule(s.cron_expression))} ({s.cron_expression})"
        else:
            when = f"every {s.interval}s"
        table.add_row(s.id, s.name, s.type, when, s.status)
    console.print(table)


@services.command("schedule")
@click.argument("service_id")
@click.option("--type", "schedule_type", type=click.Choice(["daily", "weekly"]), default=None)
@click.option("--hour", type=click.IntRange(0, 23), default=None)
@click.option("--minute", type=click.IntRange(0, 59), default=None)
@click.option("--weekday", type=click.IntRange(0, 6), default=None)
@click.pass_context
def services_schedule(ctx, service_id, schedule_type, hour, minute, weekday):
    """Switch a service to a daily/weekly scheduled check."""
    from dataclasses import replace
    from utils.http_client import APIError
    from models.schedule import Schedule
    from alerts.schedule import decode_schedule, encode_schedule, describe_schedule

    c = _get_components(ctx)
    try:
        service = c["api"].get_service(service_id)
        current = decode_schedule(service.cron_expression) if service.schedule_type == "cron" else Schedule()
        s = Schedule(
            schedule_type or current.type,
            current.hour if hour is None else hour,
            current.minute if minute is None else minute,
            current.weekday if weekday is None else weekday,
        )
        updated = replace(service, schedule_type="cron", cron_expression=encode_schedule(s))
        c["api"].update_service(service_id, updated)
    except APIError as e:
        _fail(str(e))
    console.print(f"[green]✓[/green] {service.name}: {describe_schedule(s)} ({encode_schedule(s)})")


# ──────────────────────────────────────────────────────
# NOTIFICATIONS
# ──────────────────────────────────────────────────────
@cli.group()
def notifications():
    """Notification history and read state."""
    pass


def _print_notifications(bell, items):
    from utils.formatters import time_ago

    table = Table(title=f"Notifications ({bell.unread_count} unread)", show_header=True)
    table.add_column("", width=1)
    table.add_column("ID", style="dim")
    table.add_column("When")
    table.add_column("Channel")
    table.add_column("Status")
    table.add_column("Message")
    for n in items:
        table.add_row(
            "" if bell.read_state.is_read(n.id) else "[bold blue]●[/bold blue]",
            str(n.id), time_ago(n.created_at), n.channel_name,
            "[red]failed[/red]" if n.status == "failed" else n.status, escape(n.message),
        )
    console.print(table)


@notifications.command("list")
@click.option("--all", "show_all", is_flag=True, help="Show every fetched item, not only the preview")
@click.pass_context
def notifications_list(ctx, show_all):
    """Latest notifications with unread markers."""
    c = _get_components(ctx)
    bell = c["bell"]
    if not bell.refresh():
        _fail("Could not fetch notification history")
    _print_notifications(bell, bell.items if show_all else bell.preview_items)


@notifications.command("read")
@click.argument("ids", nargs=-1, type=int)
@click.option("--all", "read_all", is_flag=True, help="Mark every fetched notification as read")
@click.pass_context
def notifications_read(ctx, ids, read_all):
    """Mark notifications as read."""
    c = _get_components(ctx)
    bell = c["bell"]
    added = 0
    if read_all:
        bell.refresh()
        added += bell.mark_all_as_read()
    for nid in ids:
        added += bell.mark_as_read(nid)
    console.print(f"[green]✓[/green] {added} notifications marked read")


@notifications.command("stats")
@click.option("--days", default=7, type=int)
@click.pass_context
def notifications_stats(ctx, days):
    """Delivery statistics."""
    from utils.http_client import APIError

    c = _get_components(ctx)
    try:
        stats = c["api"].get_notification_stats(days)
    except APIError as e:
        _fail(str(e))
    console.print(f"Sent: {stats.get('totalSent', 0)}  Failed: {stats.get('totalFailed', 0)}  "
                  f"Success rate: {stats.get('successRate', 0):.1f}%")


@notifications.command("watch")
@click.pass_context
def notifications_watch(ctx):
    """Poll notifications in the background and print the unread count until Ctrl+C."""
    import time

    c = _get_components(ctx)
    bell = c["bell"]
    bell.start_polling()
    console.print(f"Watching notifications every {bell.poll_interval}s (Ctrl+C to stop)")
    last = None
    try:
        while True:
            count = bell.unread_count
            if count != last:
                console.print(f"{count} unread")
                last = count
            time.sleep(1)
    except KeyboardInterrupt:
        pass
    finally:
        bell.stop_polling()


if __name__ == "__main__":
    cli()
