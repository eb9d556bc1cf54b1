"""Semrush Analytics API (domain, keyword and backlink reports).

Every report is a GET on the API root with `type=<report>`; responses are
`;`-separated CSV and are decoded into a list of row objects.
"""

from __future__ import annotations

import csv
import io
from typing import Any

from adapters.auth import QueryAuth
from core.dispatch import CommandContext, CommandTable
from core.domain.models import CredentialSpec, RequestDescriptor
from core.tool import ApiTool

API_KEY = "SEMRUSH_API_KEY"

commands = CommandTable(
    usage={
        "domain": (
            "domain [overview --domain <domain> | organic --domain <domain> [--database <db>] [--limit <n>] "
            "| competitors --domain <domain> [--database <db>] [--limit <n>]]"
        ),
        "keywords": (
            "keywords [overview --phrase <phrase> [--database <db>] "
            "| related --phrase <phrase> [--database <db>] [--limit <n>] "
            "| difficulty --phrase <phrase> [--database <db>]]"
        ),
        "backlinks": "backlinks [overview --target <domain> | list --target <domain> [--limit <n>]]",
    },
    notes={"databases": "us (default), uk, de, fr, ca, au, etc."},
)


def decode_report(status: int, text: str) -> Any:
    """CSV report -> list of dicts; API errors come back as `{"error": ...}`."""

    if not 200 <= status < 300:
        return {"error": text.strip(), "status": status}
    if text.startswith("ERROR"):
        return {"error": text.strip()}

    lines = [line for line in text.strip().split("\n") if line.strip()]
    if len(lines) < 2:
        return []
    reader = csv.reader(lines, delimiter=";")
    headers = next(reader)
    return [{name: (values[i] if i < len(values) else "") for i, name in enumerate(headers)} for values in reader]


def _report(ctx: CommandContext, report: str, **params: Any) -> RequestDescriptor:
    query = {"type": report, **params, "export_escape": 1}
    return ctx.request("GET", "", params=query)


def _database(ctx: CommandContext) -> str:
    return ctx.args.value("database", "us")


@commands.command("domain", "overview")
def domain_overview(ctx: CommandContext) -> RequestDescriptor:
    return _report(ctx, "domain_ranks", export_columns="Db,Dn,Rk,Or,Ot,Oc,Ad,At,Ac", domain=ctx.args.require("domain"))


@commands.command("domain", "organic")
def domain_organic(ctx: CommandContext) -> RequestDescriptor:
    return _report(
        ctx,
        "domain_organic",
        export_columns="Ph,Po,Pp,Pd,Nq,Cp,Ur,Tr,Tc,Co,Nr",
        domain=ctx.args.require("domain"),
        database=_database(ctx),
        display_limit=ctx.args.value("limit"),
    )


@commands.command("domain", "competitors")
def domain_competitors(ctx: CommandContext) -> RequestDescriptor:
    return _report(
        ctx,
        "domain_organic_organic",
        export_columns="Dn,Cr,Np,Or,Ot,Oc,Ad",
        domain=ctx.args.require("domain"),
        database=_database(ctx),
        display_limit=ctx.args.value("limit"),
    )


@commands.command("keywords", "overview")
def keywords_overview(ctx: CommandContext) -> RequestDescriptor:
    return _report(
        ctx, "phrase_all", export_columns="Ph,Nq,Cp,Co,Nr", phrase=ctx.args.require("phrase"), database=_database(ctx)
    )


@commands.command("keywords", "related")
def keywords_related(ctx: CommandContext) -> RequestDescriptor:
    return _report(
        ctx,
        "phrase_related",
        export_columns="Ph,Nq,Cp,Co,Nr,Td",
        phrase=ctx.args.require("phrase"),
        database=_database(ctx),
        display_limit=ctx.args.value("limit"),
    )


@commands.command("keywords", "difficulty")
def keywords_difficulty(ctx: CommandContext) -> RequestDescriptor:
    return _report(ctx, "phrase_kdi", export_columns="Ph,Kd", phrase=ctx.args.require("phrase"), database=_database(ctx))


@commands.command("backlinks", "overview")
def backlinks_overview(ctx: CommandContext) -> RequestDescriptor:
    return _report(ctx, "backlinks_overview", target=ctx.args.require("target"), target_type="root_domain")


@commands.command("backlinks", "list")
def backlinks_list(ctx: CommandContext) -> RequestDescriptor:
    return _report(
        ctx,
        "backlinks",
        target=ctx.args.require("target"),
        target_type="root_domain",
        export_columns="source_url,source_title,target_url,anchor",
        display_limit=ctx.args.value("limit"),
    )


TOOL = ApiTool(
    name="semrush",
    description="Semrush SEO analytics API",
    base_url="https://api.semrush.com/",
    credentials=(CredentialSpec(name=API_KEY),),
    auth={"default": QueryAuth("key", API_KEY)},
    commands=commands,
    headers={},
    decode=decode_report,
)
