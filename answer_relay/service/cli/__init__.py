"""Answer relay CLI (package entrypoint).

This package wires argument parsing to action handlers kept in small, focused
modules. It performs no backend logic directly.

Public API re-exports:
- ``main``: CLI entrypoint callable
"""

from __future__ import annotations

import sys
from typing import Optional

from ...base.logging import configure_logger
from .cli_actions import handle_solve, handle_verify
from .cli_parser import build_parser
from .cli_utils import parse_verbosity


def main(argv: Optional[list[str]] = None) -> int:
	"""CLI entrypoint.

	Parameters
	----------
	argv: Optional[list[str]]
		Argument vector; when ``None`` uses ``sys.argv[1:]``.

	Returns
	-------
	int
		Process exit code (0 success, non-zero on error).
	"""
	p = build_parser()
	argv_list = list(sys.argv[1:] if argv is None else argv)
	args = p.parse_args(argv_list)
	if args.log_level:
		level = parse_verbosity(args.log_level)
		if level is None:
			p.error(f"unknown log level {args.log_level!r}")
		configure_logger(level=level)
	if args.cmd == "verify":
		return handle_verify(args)
	if args.cmd == "solve":
		return handle_solve(args)
	p.print_help()
	return 2


if __name__ == "__main__":  # pragma: no cover
	raise SystemExit(main())
