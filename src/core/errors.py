"""Error taxonomy shared by every tool.

- `MissingCredentialError` is fatal: the program exits 1 before parsing args.
- `UsageError` (and subclasses) become an ordinary `{"error": ...}` output.
- `TokenFetchError` becomes an ordinary `{"error": ...}` output as well.

Anything else (transport failures, bugs) travels up to the program boundary.
"""

from __future__ import annotations


class CliError(Exception):
    """Base class for errors raised by the shared tool runtime."""


class MissingCredentialError(CliError):
    def __init__(self, names: list[str]) -> None:
        self.names = list(names)
        super().__init__(_missing_message(self.names))


class UsageError(CliError):
    """A command was invoked with input it cannot turn into a request."""


class MissingFlagError(UsageError):
    def __init__(self, flag: str, hint: str | None = None) -> None:
        self.flag = flag
        message = f"--{flag} required"
        if hint:
            message = f"{message} ({hint})"
        super().__init__(message)


class FlagValueError(UsageError):
    def __init__(self, flag: str, problem: str) -> None:
        self.flag = flag
        super().__init__(f"--{flag} {problem}")


class TokenFetchError(CliError):
    """The OAuth token endpoint did not hand out an `access_token`."""


def _missing_message(names: list[str]) -> str:
    if len(names) == 1:
        return f"{names[0]} environment variable required"
    joined = ", ".join(names[:-1]) + f" and {names[-1]}"
    return f"{joined} environment variables required"
