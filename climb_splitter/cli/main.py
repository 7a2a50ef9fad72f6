"""
CLI entry point for climb-splitter.

Usage
─────
  # Attach to the game (waits for it) and run the splitter
  climb-splitter run
  climb-splitter run --profile credits-245 --tick-rate 30

  # Use a profile captured for another build
  climb-splitter run --profile-file ./my_build.json

  # One-shot diagnostics: which candidate validated, current snapshot
  climb-splitter --debug probe

  # List built-in profiles / dump one as a JSON template
  climb-splitter profiles
  climb-splitter profiles --export default > my_build.json

Subcommands are implemented as standalone functions (cmd_run, cmd_probe,
cmd_profiles) so they can be unit-tested without invoking argparse.
"""

import argparse
import json
import logging
import sys
import time
from typing import Callable, Optional

from climb_splitter.config import SplitterConfig
from climb_splitter.exceptions import SplitterBaseError
from climb_splitter.memory.process import ProcessHandle, open_process
from climb_splitter.profiles.loader import get_profile, list_profiles, profile_to_dict
from climb_splitter.runtime.poll_loop import AttachSession, PollLoop
from climb_splitter.timer.local_timer import LocalTimer

__all__ = ["build_parser", "cmd_run", "cmd_probe", "cmd_profiles", "main"]

logger = logging.getLogger(__name__)


# ── Argument parser ────────────────────────────────────────────────────────────


def _add_profile_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--profile",
        default="default",
        metavar="NAME",
        help="Built-in profile to use (default: default)",
    )
    parser.add_argument(
        "--profile-file",
        default=None,
        dest="profile_file",
        metavar="PATH",
        help="JSON profile file; overrides --profile",
    )
    parser.add_argument(
        "--process",
        default=None,
        metavar="NAME",
        help="Override the profile's process name",
    )


def build_parser() -> argparse.ArgumentParser:
    """
    Build and return the top-level argument parser.

    Subcommands: run | probe | profiles
    """
    parser = argparse.ArgumentParser(
        prog="climb-splitter",
        description="Autosplitter for A Difficult Game About Climbing",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Enable verbose debug logging (per-tick snapshots)",
    )

    sub = parser.add_subparsers(dest="subcommand")

    # ── run ───────────────────────────────────────────────────────────────
    run = sub.add_parser("run", help="Wait for the game and drive the timer")
    _add_profile_args(run)
    run.add_argument(
        "--tick-rate",
        type=float,
        default=60.0,
        dest="tick_rate",
        metavar="HZ",
        help="Polling rate in ticks per second (default: 60)",
    )
    run.add_argument(
        "--attach-interval",
        type=float,
        default=1.0,
        dest="attach_interval",
        metavar="SECONDS",
        help="Delay between attach attempts (default: 1.0)",
    )
    run.add_argument(
        "--flag-reset",
        action="store_true",
        default=False,
        dest="flag_reset",
        help="Also reset when the input-listening flag drops (profile must sample it)",
    )

    # ── probe ─────────────────────────────────────────────────────────────
    probe = sub.add_parser("probe", help="Resolve objects once and print a snapshot")
    _add_profile_args(probe)

    # ── profiles ──────────────────────────────────────────────────────────
    prof = sub.add_parser("profiles", help="List built-in profiles")
    prof.add_argument(
        "--export",
        default=None,
        metavar="NAME",
        help="Print the named profile as JSON (a template for --profile-file)",
    )

    return parser


def _config_from_args(ns: argparse.Namespace) -> SplitterConfig:
    return SplitterConfig(
        profile=ns.profile,
        profile_file=ns.profile_file,
        process_name=ns.process,
        tick_rate=getattr(ns, "tick_rate", 60.0),
        attach_poll_interval=getattr(ns, "attach_interval", 1.0),
        flag_reset=getattr(ns, "flag_reset", False),
        debug=ns.debug,
    )


# ── Command implementations ───────────────────────────────────────────────────


def cmd_run(
    config: SplitterConfig,
    attach: Optional[Callable[[], Optional[ProcessHandle]]] = None,
    sleep: Callable[[float], None] = time.sleep,
    max_sessions: Optional[int] = None,
) -> int:
    """
    Run the splitter until interrupted.

    Returns the number of attach sessions that were run.
    """
    profile = config.resolve_profile()
    timer = LocalTimer(segment_names=profile.zone_names)
    loop = PollLoop(
        profile,
        timer,
        attach=attach,
        sleep=sleep,
        tick_interval=config.tick_interval,
        attach_poll_interval=config.attach_poll_interval,
    )
    logger.info("Profile %s: %d zones", profile.name, len(profile.zones))
    try:
        return loop.run(max_sessions=max_sessions)
    except KeyboardInterrupt:
        loop.stop()
        logger.info("Interrupted")
        return 0


def cmd_probe(
    config: SplitterConfig,
    open_handle: Callable[[str], ProcessHandle] = open_process,
) -> bool:
    """
    Attach once, report which candidate validated per object, print one
    snapshot. Returns True iff every object resolved.
    """
    profile = config.resolve_profile()
    handle = open_handle(profile.process_name)
    try:
        session = AttachSession(handle, profile)
        print(f"Attached: {handle}")
        ok = True
        for table in profile.objects:
            obj = session.resolver.resolve(table)
            if obj is None:
                ok = False
                print(f"  {table.name:<22} not found ({len(table)} candidates tried)")
            else:
                print(f"  {table.name:<22} candidate #{obj.index} at 0x{obj.address:X}")

        objects = session.resolve_objects()
        if objects is not None:
            snapshot = session.sampler.sample(objects)
            print(f"  snapshot               {session.machine.describe(snapshot)}")
        return ok
    finally:
        handle.close()


def cmd_profiles(export: Optional[str] = None) -> None:
    """Print built-in profiles, or one profile as JSON."""
    if export:
        print(json.dumps(profile_to_dict(get_profile(export)), indent=2))
        return
    for profile in list_profiles():
        print(f"{profile.name:<14} {len(profile.zones):>2} zones  {profile.description}")


# ── Entry point ───────────────────────────────────────────────────────────────


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point. Returns exit code."""
    parser = build_parser()
    ns = parser.parse_args(argv)

    level = logging.DEBUG if ns.debug else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")

    if ns.subcommand is None:
        parser.print_help()
        return 0

    try:
        if ns.subcommand == "profiles":
            cmd_profiles(export=ns.export)
            return 0

        if ns.subcommand == "probe":
            return 0 if cmd_probe(_config_from_args(ns)) else 1

        if ns.subcommand == "run":
            cmd_run(_config_from_args(ns))
            return 0
    except SplitterBaseError as exc:
        logger.debug("%s failed", ns.subcommand, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
