#!/usr/bin/env python3
"""Command line entry point.

Usage:
    python -m fossil_scm.main timeline <file>
    python -m fossil_scm.main info <file>
    python -m fossil_scm.main feed <file>
    python -m fossil_scm.main diff <old> <new> [--workspace DIR] [--config PATH] [--changelog PATH]
    python -m fossil_scm.main poll <baseline> [--config PATH]
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from .changelog_types import RevisionState
from .client import FossilClient
from .config import AppConfig, load_scm_config
from .exceptions import FossilScmError
from .info_parser import parse_info
from .polling import poll
from .range_diff import diff_range, write_changelog
from .rss_parser import parse_rss
from .timeline_parser import TimelineParser

logger = logging.getLogger(__name__)


def _read_text(path: str) -> str:
  if path == "-":
    return sys.stdin.read()
  return Path(path).read_text(encoding="utf-8", errors="replace")


def cmd_timeline(args) -> int:
  changelog = TimelineParser().parse_text(_read_text(args.file))
  print(json.dumps(changelog.to_dict(), indent=2))
  return 0


def cmd_info(args) -> int:
  print(json.dumps(parse_info(_read_text(args.file)), indent=2))
  return 0


def cmd_feed(args) -> int:
  print(parse_rss(_read_text(args.file)).rev_id)
  return 0


def cmd_diff(args) -> int:
  if args.config:
    client = FossilClient.from_config(load_scm_config(args.config), workspace=args.workspace)
  else:
    client = FossilClient(workspace=args.workspace)
  if args.fossil:
    client.executable = args.fossil
  old, new = RevisionState(args.old), RevisionState(args.new)

  if args.changelog:
    written = write_changelog(args.changelog, old, new, client.timeline_before)
    print(f"Wrote {written} bytes to {args.changelog}")
  else:
    sys.stdout.write(diff_range(old, new, client.timeline_before).decode("utf-8", errors="replace"))
  return 0


def cmd_poll(args) -> int:
  config = load_scm_config(args.config)
  result = poll(config, RevisionState(args.baseline))
  print(result.value)
  return 0


parser = argparse.ArgumentParser(description="Fossil changelog extraction")
parser.add_argument("--log-level", default=AppConfig.LOG_LEVEL, help="Logging level")
subparsers = parser.add_subparsers(dest="command", required=True)

timeline_cmd = subparsers.add_parser("timeline", help="Parse a timeline dump to JSON")
timeline_cmd.add_argument("file", help="Timeline text file, '-' for stdin")
timeline_cmd.set_defaults(func=cmd_timeline)

info_cmd = subparsers.add_parser("info", help="Parse a `fossil info` block to JSON")
info_cmd.add_argument("file", help="Info text file, '-' for stdin")
info_cmd.set_defaults(func=cmd_info)

feed_cmd = subparsers.add_parser("feed", help="Print the tip revision of a saved RSS feed")
feed_cmd.add_argument("file", help="RSS file, '-' for stdin")
feed_cmd.set_defaults(func=cmd_feed)

diff_cmd = subparsers.add_parser("diff", help="Timeline between two revisions")
diff_cmd.add_argument("old", help="Revision of the previous build")
diff_cmd.add_argument("new", help="Revision being built")
diff_cmd.add_argument("--workspace", default=".", help="Directory with the open checkout")
diff_cmd.add_argument("--fossil", help="fossil executable, overrides the config file")
diff_cmd.add_argument("--config", help="YAML config file for the repository")
diff_cmd.add_argument("--changelog", help="Write the delta to this file instead of stdout")
diff_cmd.set_defaults(func=cmd_diff)

poll_cmd = subparsers.add_parser("poll", help="Compare a baseline with the server tip")
poll_cmd.add_argument("baseline", help="Revision of the last build")
poll_cmd.add_argument("--config", help="YAML config file (default: user config dir)")
poll_cmd.set_defaults(func=cmd_poll)


def main(argv=None) -> int:
  args = parser.parse_args(argv)
  logging.basicConfig(
    level=args.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
  )

  try:
    return args.func(args)
  except FossilScmError as e:
    logger.error(f"{e.name}: {e.description}")
    print(json.dumps(e.to_response().model_dump(), indent=2), file=sys.stderr)
    return 1


if __name__ == "__main__":
  sys.exit(main())
