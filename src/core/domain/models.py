"""Domain models (Pydantic v2).

Everything here is request-scoped: built once per process and discarded when
the program exits.

- `ParsedArguments`: flags + positionals parsed from argv.
- `RequestDescriptor`: one planned HTTP call, never carrying a secret.
- `CredentialSpec` / `CredentialSet`: env var names a tool needs and the values found.
"""

from __future__ import annotations

import json
import math
import re
from typing import Any

from pydantic import BaseModel, Field, SecretStr
from pydantic.config import ConfigDict

from core.errors import FlagValueError, MissingFlagError, UsageError

DRY_RUN_MASK = "***"

_INT_RE = re.compile(r"[+-]?\d+")


class ParsedArguments(BaseModel):
    """Flag map plus ordered positionals.

    Flag values are either the raw string that followed the flag or `True`
    when the flag stood alone. No coercion happens at parse time; handlers
    use the typed accessors below.
    """

    model_config = ConfigDict(frozen=True)

    flags: dict[str, str | bool] = Field(
        default_factory=dict,
        description="Flag name (without leading dashes) -> string value or True.",
    )
    positionals: tuple[str, ...] = Field(
        default=(),
        description="Non-flag tokens in the order they appeared.",
    )

    @property
    def command(self) -> str | None:
        return self.positionals[0] if self.positionals else None

    @property
    def subcommand(self) -> str | None:
        return self.positionals[1] if len(self.positionals) > 1 else None

    @property
    def rest(self) -> tuple[str, ...]:
        return self.positionals[2:]

    def argument(self, label: str, index: int = 0) -> str:
        """Positional after the subcommand, e.g. `campaigns get <id>`."""

        if index < len(self.rest) and self.rest[index]:
            return self.rest[index]
        raise UsageError(f"<{label}> argument required")

    def is_set(self, name: str) -> bool:
        return name in self.flags

    def value(self, name: str, default: str | None = None) -> str | None:
        """String value of a flag; `default` when absent or given bare."""

        raw = self.flags.get(name)
        if isinstance(raw, str) and raw:
            return raw
        return default

    def require(self, name: str, hint: str | None = None) -> str:
        raw = self.value(name)
        if raw is None:
            raise MissingFlagError(name, hint)
        return raw

    def integer(self, name: str, default: int | None = None) -> int | None:
        raw = self.value(name)
        if raw is None:
            return default
        number = _coerce_number(name, raw)
        if isinstance(number, float):
            if not number.is_integer():
                raise FlagValueError(name, "must be an integer")
            return int(number)
        return number

    def number(self, name: str, default: int | float | None = None) -> int | float | None:
        raw = self.value(name)
        if raw is None:
            return default
        return _coerce_number(name, raw)

    def csv(self, name: str, *, strip: bool = False) -> list[str] | None:
        """Comma-split a flag value, keeping the original order."""

        raw = self.value(name)
        if raw is None:
            return None
        parts = raw.split(",")
        if strip:
            parts = [p.strip() for p in parts]
        return parts

    def csv_numbers(self, name: str) -> list[int | float] | None:
        parts = self.csv(name, strip=True)
        if parts is None:
            return None
        return [_coerce_number(name, p) for p in parts]

    def json_value(self, name: str) -> Any:
        raw = self.value(name)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise FlagValueError(name, f"must be valid JSON: {exc.msg} (position {exc.pos})") from exc


def _coerce_number(name: str, raw: str) -> int | float:
    text = raw.strip()
    if _INT_RE.fullmatch(text):
        return int(text)
    if "_" in text:
        raise FlagValueError(name, "must be a number")
    try:
        number = float(text)
    except ValueError as exc:
        raise FlagValueError(name, "must be a number") from exc
    if not math.isfinite(number):
        raise FlagValueError(name, "must be a number")
    return number


class RequestDescriptor(BaseModel):
    """A planned HTTP call.

    `headers` only holds non-secret headers. Credential-bearing material is
    referenced by `auth` (the name of one of the tool's auth schemes) and is
    applied by the executor at send time.
    """

    model_config = ConfigDict(frozen=True)

    method: str = Field(..., min_length=3, max_length=7)
    url: str = Field(..., min_length=8)
    headers: dict[str, str] = Field(default_factory=dict)
    body: Any = Field(default=None, description="JSON-serializable payload or None.")
    auth: str | None = Field(default="default", description="Auth scheme name, None for unauthenticated calls.")


class CredentialSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Environment variable name.")
    required: bool = True


class CredentialSet(BaseModel):
    """Values read from the environment, wrapped so they never render."""

    model_config = ConfigDict(frozen=True)

    values: dict[str, SecretStr] = Field(default_factory=dict)

    def get(self, name: str) -> str | None:
        secret = self.values.get(name)
        return secret.get_secret_value() if secret is not None else None
