"""Credential gate.

Runs first in every program: either all required variables are present or
nothing else happens.
"""

from __future__ import annotations

import os
from typing import Iterable, Mapping

from pydantic import SecretStr

from core.domain.models import CredentialSet, CredentialSpec
from core.errors import MissingCredentialError


def read_credentials(
    specs: Iterable[CredentialSpec],
    environ: Mapping[str, str] | None = None,
) -> CredentialSet:
    """Collect credential values, raising if any required one is unset or empty."""

    env = os.environ if environ is None else environ
    values: dict[str, SecretStr] = {}
    missing: list[str] = []

    for spec in specs:
        raw = env.get(spec.name) or ""
        if raw:
            values[spec.name] = SecretStr(raw)
        elif spec.required:
            missing.append(spec.name)

    if missing:
        raise MissingCredentialError(missing)
    return CredentialSet(values=values)
