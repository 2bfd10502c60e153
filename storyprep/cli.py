"""Thin CLI router — dispatches to commands."""
from __future__ import annotations

import logging
import os
import sys
import warnings

from storyprep.errors import ArgTypeDefaultValueDeprecation

USAGE = """\
storyprep — prepare UI component stories for rendering and testing

Usage:
  storyprep load <file> [--preview DIR]           Load and validate a story file, list its stories
  storyprep run <file> <story> [--preview DIR]    Prepare one story, run loaders, render and play it
  storyprep help                                  Show this message

The global preview is read from DIR (default: ./.storyprep), which may hold
preview.yaml (parameters, args, arg_types, globals) and preview.py (decorators,
loaders, enhancers, render).

Environment:
  STORYPREP_LOG_LEVEL    Logging level (default: WARNING)
"""

DEFAULT_PREVIEW_DIR = ".storyprep"


def _pop_option(args: list[str], name: str) -> str | None:
    if name not in args:
        return None
    idx = args.index(name)
    if idx + 1 >= len(args):
        print(f"Missing value for {name}", file=sys.stderr)
        sys.exit(1)
    value = args[idx + 1]
    del args[idx:idx + 2]
    return value


def main():
    logging.basicConfig(
        level=os.environ.get("STORYPREP_LOG_LEVEL", "WARNING").upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )
    # deprecation notices go to stderr through the py.warnings logger
    warnings.simplefilter("default", ArgTypeDefaultValueDeprecation)
    logging.captureWarnings(True)
    args = sys.argv[1:]
    cwd = os.getcwd()
    preview_dir = _pop_option(args, "--preview") or os.path.join(cwd, DEFAULT_PREVIEW_DIR)
    command = args[0] if args else None

    if command == "load":
        if len(args) < 2:
            print("Usage: storyprep load <file>", file=sys.stderr)
            sys.exit(1)
        from storyprep.commands.load import cmd_load
        cmd_load(args[1], preview_dir)

    elif command == "run":
        if len(args) < 3:
            print("Usage: storyprep run <file> <story>", file=sys.stderr)
            sys.exit(1)
        from storyprep.commands.run import cmd_run
        cmd_run(args[1], args[2], preview_dir)

    elif command in ("help", "--help", "-h", None):
        print(USAGE)

    else:
        print(f"Unknown command: {command}", file=sys.stderr)
        print(USAGE)
        sys.exit(1)


if __name__ == "__main__":
    main()
