"""Argument parser shared by every tool.

Grammar: `<command> <subcommand> [--flag value]... [--boolean-flag]`.
"""

from __future__ import annotations

from typing import Sequence

from core.domain.models import ParsedArguments


def parse_args(tokens: Sequence[str]) -> ParsedArguments:
    """Turn argv (without the program name) into `ParsedArguments`.

    A `--name` token takes the next token as its value unless that token is
    missing or itself starts with `--`, in which case the flag is `True`.
    Everything else is a positional. Never raises.
    """

    flags: dict[str, str | bool] = {}
    positionals: list[str] = []

    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token.startswith("--"):
            name = token[2:]
            nxt = tokens[i + 1] if i + 1 < len(tokens) else None
            if nxt is not None and not nxt.startswith("--"):
                flags[name] = nxt
                i += 2
                continue
            flags[name] = True
        else:
            positionals.append(token)
        i += 1

    return ParsedArguments(flags=flags, positionals=tuple(positionals))
