"""Command line entry point for the ghost commit scheduler."""

import argparse
import asyncio
import sys
from datetime import datetime
from typing import List, Optional

from dotenv import load_dotenv
from loguru import logger

from ghostcommits.commands import ForceCommit, Start
from ghostcommits.models.config import (
    DEFAULT_COMMITS_PER_DAY,
    MAX_COMMITS_PER_DAY,
    MIN_COMMITS_PER_DAY,
    MODE_FIXED,
    MODE_RANDOM,
    ScheduleConfig,
)
from ghostcommits.errors import GhostCommitError
from ghostcommits.service import GhostCommitService
from ghostcommits.settings import load_settings


async def run_daemon(service: GhostCommitService) -> None:
    """Keep the alarm running until interrupted."""
    await service.handle(Start())
    info = service.alarm_info()
    logger.info(f"Scheduler running, first tick at {info.scheduled_time:%H:%M:%S}")
    try:
        await asyncio.Event().wait()
    finally:
        await service.alarms.clear_all()


async def show_status(service: GhostCommitService) -> int:
    config = await service.storage.load_config()
    if not config:
        logger.error("Not configured, run `ghost-commits configure` first")
        return 1

    state = await service.storage.read_daily_state(datetime.now())
    last_commit = await service.storage.get_last_commit()
    errors = await service.storage.get_error_log()

    print(f"Status:      {'active' if config.enabled else 'paused'}")
    print(f"Mode:        {config.schedule_mode}")
    if config.schedule_mode == MODE_FIXED:
        print(f"Slots:       {', '.join(config.fixed_times) or '-'}")
        print(f"Today:       {state.count} commits, fired {', '.join(sorted(state.fired_slots)) or '-'}")
    else:
        print(f"Today:       {state.count} / {config.commits_per_day} commits")
    print(f"Last commit: {f'{last_commit.sha[:7]} - {last_commit.date}' if last_commit else '-'}")
    if config.html_url:
        print(f"Repository:  {config.html_url}")
    for entry in errors[:5]:
        print(f"Error:       {entry.time} {entry.message}")
    return 0


async def configure(service: GhostCommitService, args: argparse.Namespace) -> int:
    config = await service.storage.load_config() or ScheduleConfig(enabled=True)

    if args.repo_path is not None:
        config.repo_path = args.repo_path
    if args.email is not None:
        config.email = args.email
    if args.author_name is not None:
        config.author_name = args.author_name
    if args.commits_per_day is not None:
        config.commits_per_day = args.commits_per_day
    if args.mode is not None:
        config.schedule_mode = args.mode
    if args.fixed_times is not None:
        config.fixed_times = [t for t in args.fixed_times.split(",") if t.strip()]
    if args.push is not None:
        config.push = args.push
    for name in ("owner", "repo", "remote", "branch"):
        value = getattr(args, name)
        if value is not None:
            setattr(config, name, value)

    # Re-run validation on the edited fields
    config = ScheduleConfig.from_dict(config.to_dict())
    await service.storage.save_config(config)
    logger.info(f"Configuration saved to {service.settings.state_file}")
    return 0


async def set_enabled(service: GhostCommitService, enabled: bool) -> int:
    config = await service.storage.load_config()
    if not config:
        logger.error("Not configured, run `ghost-commits configure` first")
        return 1
    config.enabled = enabled
    await service.storage.save_config(config)
    logger.info("Ghost commits resumed" if enabled else "Ghost commits paused")
    return 0


async def disconnect(service: GhostCommitService) -> int:
    await service.disconnect()
    logger.info(f"Removed configuration and history from {service.settings.state_file}")
    return 0


async def force(service: GhostCommitService) -> int:
    result = (await service.handle(ForceCommit())).force
    if result.ok:
        logger.info(f"Committed {result.sha}")
        return 0
    if result.cooldown:
        logger.warning(f"Cooling down, try again in {result.cooldown}s")
    else:
        logger.error(f"Force commit failed: {result.error}")
    return 1


async def tick(service: GhostCommitService) -> int:
    result = await service.dispatcher.tick()
    logger.info(f"Committed {result.sha}" if result else "No commit this tick")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Keep your contribution graph green with scheduled commits")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("run", help="Run the scheduler until interrupted")
    subparsers.add_parser("tick", help="Run a single scheduling tick now")
    subparsers.add_parser("force", help="Commit now, ignoring the schedule")
    subparsers.add_parser("status", help="Show today's progress and recent errors")
    subparsers.add_parser("enable", help="Resume scheduled commits")
    subparsers.add_parser("disable", help="Pause scheduled commits")
    subparsers.add_parser("disconnect", help="Stop and forget the configuration and history")

    configure_parser = subparsers.add_parser("configure", help="Create or update the configuration")
    configure_parser.add_argument("--repo-path", type=str, help="Local clone to commit into")
    configure_parser.add_argument("--email", type=str, help="Commit author email")
    configure_parser.add_argument("--author-name", type=str, help="Commit author name")
    configure_parser.add_argument(
        "--commits-per-day",
        type=int,
        help=f"Daily target in random mode ({MIN_COMMITS_PER_DAY}-{MAX_COMMITS_PER_DAY}, "
        f"default {DEFAULT_COMMITS_PER_DAY})",
    )
    configure_parser.add_argument("--mode", choices=[MODE_RANDOM, MODE_FIXED], help="Scheduling mode")
    configure_parser.add_argument("--fixed-times", type=str, help="Comma separated HH:MM slots for fixed mode")
    configure_parser.add_argument("--owner", type=str, help="Remote repository owner")
    configure_parser.add_argument("--repo", type=str, help="Remote repository name")
    configure_parser.add_argument("--remote", type=str, help="Git remote to push to")
    configure_parser.add_argument("--branch", type=str, help="Branch to push")
    configure_parser.add_argument("--push", action=argparse.BooleanOptionalAction, default=None, help="Push commits")
    return parser


async def dispatch(service: GhostCommitService, args: argparse.Namespace) -> int:
    if args.command == "run":
        await run_daemon(service)
        return 0
    if args.command == "tick":
        return await tick(service)
    if args.command == "force":
        return await force(service)
    if args.command == "status":
        return await show_status(service)
    if args.command == "configure":
        return await configure(service, args)
    if args.command == "enable":
        return await set_enabled(service, True)
    if args.command == "disable":
        return await set_enabled(service, False)
    if args.command == "disconnect":
        return await disconnect(service)
    raise ValueError(f"Unknown command {args.command}")


def main(argv: Optional[List[str]] = None):
    args = build_parser().parse_args(argv)

    load_dotenv()
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if args.verbose else "INFO")

    try:
        settings = load_settings()
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)

    async def _main() -> int:
        service = GhostCommitService(settings)
        return await dispatch(service, args)

    try:
        exit_code = asyncio.run(_main())
    except KeyboardInterrupt:
        logger.info("Scheduler stopped")
        exit_code = 0
    except GhostCommitError as e:
        logger.error(str(e))
        exit_code = 1
    except ValueError as e:
        logger.error(f"Unreadable state file {settings.state_file}: {str(e)}")
        exit_code = 1
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
