"""CLI parser construction for answer-relay.

This module wires subparsers but contains no execution logic. Subcommand
handlers live in ``cli_actions`` to keep files small and testable.
"""

from __future__ import annotations

import argparse

from ...base.kinds import Mode, ProviderKind


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level CLI parser and subcommands.

    Returns
    -------
    argparse.ArgumentParser
        Configured parser with ``solve`` and ``verify`` subcommands.
    """
    p = argparse.ArgumentParser(prog="answer-relay", description="Ask an AI backend to answer a question")
    p.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ERROR (or verbose/quiet)")
    sub = p.add_subparsers(dest="cmd")

    providers = [k.value for k in ProviderKind]

    # solve
    p_solve = sub.add_parser("solve", help="Answer a question (default)")
    p_solve.add_argument("--question", required=True)
    p_solve.add_argument("--prompt", default="", help="Instructions prepended to the question")
    p_solve.add_argument("--mode", choices=[m.value for m in Mode], default=Mode.QA.value)
    p_solve.add_argument("--provider", choices=providers, default=None)
    p_solve.add_argument("--key", default=None, help="API key or custom endpoint URL (else from env)")
    p_solve.add_argument("--question-image", default=None)
    p_solve.add_argument(
        "--option-image",
        action="append",
        default=[],
        metavar="LABEL=URL",
        help="Option image reference; repeatable",
    )
    p_solve.add_argument("--json", action="store_true")

    # verify
    p_verify = sub.add_parser("verify", help="Check that a key or endpoint answers")
    p_verify.add_argument("--provider", choices=providers, default=None)
    p_verify.add_argument("--key", default=None)

    return p
