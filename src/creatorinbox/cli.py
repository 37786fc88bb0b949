"""Summary: Command-line interface for CreatorInbox.

Importance: Provides a local-first entry point for capacity and draft workflows.
Alternatives: Build a web UI or desktop client first.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from datetime import date

from creatorinbox.app import AppServices, build_services
from creatorinbox.capacity import InvalidArgumentError, calculate_time_commitment, suggest_capacity
from creatorinbox.clock import utc_now
from creatorinbox.config import AppConfig
from creatorinbox.draft_analytics import PERIODS
from creatorinbox.models import DigestDay, DraftEditEvent


def build_parser() -> argparse.ArgumentParser:
    """Summary: Build the CLI argument parser.

    Importance: Defines supported commands for local operation.
    Alternatives: Use a CLI framework like Typer or Click.
    """

    parser = argparse.ArgumentParser(description="CreatorInbox CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    suggest = subparsers.add_parser("suggest-capacity", help="Suggest a daily capacity")
    suggest.add_argument("average_daily_messages", type=float)

    time_commitment = subparsers.add_parser("time-commitment", help="Minutes needed per day")
    time_commitment.add_argument("capacity", type=int)

    preview = subparsers.add_parser("preview", help="Preview the daily distribution")
    preview.add_argument("total_messages", type=int)
    preview.add_argument("--capacity", type=int, default=None)
    preview.add_argument("--faq-rate", type=float, default=None)

    record_digest = subparsers.add_parser("record-digest", help="Record a daily digest")
    record_digest.add_argument("deep", type=int)
    record_digest.add_argument("faq", type=int)
    record_digest.add_argument("archived", type=int)
    record_digest.add_argument("--day", type=str, default=None)

    weekly_report = subparsers.add_parser("weekly-report", help="Build this week's capacity report")
    weekly_report.add_argument("--capacity", type=int, default=None)

    draft_save = subparsers.add_parser("draft-save", help="Save a reply draft")
    draft_save.add_argument("conversation_id", type=str)
    draft_save.add_argument("message_id", type=str)
    draft_save.add_argument("text", type=str)
    draft_save.add_argument("--confidence", type=float, default=0.0)
    draft_save.add_argument("--version", type=int, default=None)

    for name, help_text in (
        ("draft-restore", "Show the active draft"),
        ("draft-history", "List draft versions"),
        ("draft-clear", "Delete all drafts for a message"),
    ):
        command = subparsers.add_parser(name, help=help_text)
        command.add_argument("conversation_id", type=str)
        command.add_argument("message_id", type=str)

    draft_purge = subparsers.add_parser("draft-purge", help="Delete expired drafts in a conversation")
    draft_purge.add_argument("conversation_id", type=str)

    track_edit = subparsers.add_parser("track-edit", help="Record how a sent draft was edited")
    track_edit.add_argument("conversation_id", type=str)
    track_edit.add_argument("message_id", type=str)
    track_edit.add_argument("--edit-count", type=int, default=0)
    track_edit.add_argument("--time-to-edit-ms", type=int, default=0)
    track_edit.add_argument("--requires-editing", action="store_true")
    track_edit.add_argument("--override", action="store_true")
    track_edit.add_argument("--confidence", type=float, default=0.0)
    track_edit.add_argument("--version", type=int, default=1)

    edit_metrics = subparsers.add_parser("edit-metrics", help="Show draft edit-rate metrics")
    edit_metrics.add_argument("--period", choices=PERIODS, default="weekly")

    return parser


def run_cli(argv: list[str] | None = None) -> None:
    """Summary: Execute CLI commands based on arguments.

    Importance: Drives the workflows without a UI.
    Alternatives: Invoke services via an HTTP API.
    """

    parser = build_parser()
    args = parser.parse_args(argv)
    config = AppConfig.from_env()
    logging.basicConfig(level=config.log_level, format="%(levelname)s %(name)s: %(message)s")

    try:
        _run(args, config)
    except InvalidArgumentError as exc:
        parser.error(str(exc))


def _run(args: argparse.Namespace, config: AppConfig) -> None:
    if args.command == "suggest-capacity":
        capacity = suggest_capacity(args.average_daily_messages)
        print(f"Suggested capacity: {capacity} ({calculate_time_commitment(capacity)} min/day)")
        return

    if args.command == "time-commitment":
        print(f"{calculate_time_commitment(args.capacity)} minutes")
        return

    services = build_services(config)

    if args.command == "preview":
        distribution = services.planner.preview(args.total_messages, args.capacity, args.faq_rate)
        print(
            f"deep: {distribution.deep} faq: {distribution.faq} "
            f"archived: {distribution.archived}"
        )
        return

    asyncio.run(_run_async(args, services, config))


async def _run_async(args: argparse.Namespace, services: AppServices, config: AppConfig) -> None:
    if args.command == "record-digest":
        day = date.fromisoformat(args.day) if args.day else utc_now().date()
        digest = DigestDay(day=day, deep=args.deep, faq=args.faq, archived=args.archived)
        await services.reports.record_digest(services.user_id, digest)
        print(f"Recorded digest for {day.isoformat()}.")
        return

    if args.command == "weekly-report":
        capacity = args.capacity if args.capacity is not None else config.daily_limit
        report = await services.reports.build_weekly_report(services.user_id, capacity)
        metrics = report.metrics
        print(
            f"Week {report.week_start.date()} - {report.week_end.date()}: "
            f"avg {metrics.avg_daily_usage}/day, usage {round(metrics.usage_rate * 100)}%"
        )
        for suggestion in report.suggestions:
            print(f"[{suggestion.priority}] {suggestion.reason}")
        return

    drafts = services.drafts

    if args.command == "draft-save":
        version = args.version
        if version is None:
            history = await drafts.get_draft_history(args.conversation_id, args.message_id)
            version = max((draft.version for draft in history.drafts), default=0) + 1
        await drafts.save_draft(
            args.conversation_id, args.message_id, args.text, args.confidence, version, debounce_ms=0
        )
        await drafts.flush()
        restored = await drafts.restore_draft(args.conversation_id, args.message_id)
        if not restored.success or not restored.draft or restored.draft.version != version:
            print(f"Draft not saved: {restored.error or 'unknown error'}")
            return
        print(f"Saved draft {restored.draft.id} (v{restored.draft.version}).")
        return

    if args.command == "draft-restore":
        restored = await drafts.restore_draft(args.conversation_id, args.message_id)
        if not restored.success:
            print(f"Restore failed: {restored.error}")
        elif restored.draft is None:
            print("No active draft.")
        else:
            print(f"v{restored.draft.version}: {restored.draft.draft_text}")
        return

    if args.command == "draft-history":
        history = await drafts.get_draft_history(args.conversation_id, args.message_id)
        for draft in history.drafts:
            marker = "*" if draft.is_active else " "
            print(f"{marker} v{draft.version} {draft.id} ({draft.created_at.isoformat()})")
        return

    if args.command == "draft-clear":
        cleared = await drafts.clear_drafts(args.conversation_id, args.message_id)
        print("Drafts cleared." if cleared.success else f"Clear failed: {cleared.error}")
        return

    if args.command == "draft-purge":
        purged = await drafts.purge_expired_drafts(args.conversation_id)
        print(f"Purged {purged.purged} drafts." if purged.success else f"Purge failed: {purged.error}")
        return

    if args.command == "track-edit":
        event = DraftEditEvent(
            message_id=args.message_id,
            conversation_id=args.conversation_id,
            was_edited=args.edit_count > 0,
            edit_count=args.edit_count,
            time_to_edit_ms=args.time_to_edit_ms,
            requires_editing=args.requires_editing,
            override_applied=args.override,
            confidence=args.confidence,
            draft_version=args.version,
        )
        tracked = await services.analytics.track_edit_event(services.user_id, event)
        print("Edit tracked." if tracked.success else f"Tracking failed: {tracked.error}")
        return

    if args.command == "edit-metrics":
        metrics = await services.analytics.calculate_edit_rate_metrics(services.user_id, args.period)
        print(
            f"{metrics.period}: {metrics.total_drafts} drafts, "
            f"edit rate {round(metrics.edit_rate * 100)}%, "
            f"avg edits {metrics.average_edit_count:.1f}, "
            f"override rate {round(metrics.override_rate * 100)}%"
        )
        return


if __name__ == "__main__":
    run_cli()
