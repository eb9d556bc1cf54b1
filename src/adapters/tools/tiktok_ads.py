"""TikTok Marketing API v1.3 (campaigns, ad groups, reports, audiences)."""

from __future__ import annotations

import json

from adapters.auth import HeaderAuth
from core.dispatch import CommandContext, CommandTable
from core.domain.models import CredentialSpec, RequestDescriptor
from core.errors import UsageError
from core.tool import ApiTool

ACCESS_TOKEN = "TIKTOK_ACCESS_TOKEN"
ADVERTISER_ID = "TIKTOK_ADVERTISER_ID"

commands = CommandTable(
    usage={
        "advertiser": "advertiser [info]",
        "campaigns": (
            "campaigns [list|create|update-status] [--name <name>] [--objective <obj>] "
            "[--budget-mode BUDGET_MODE_DAY] [--budget <amount>] [--ids <id1,id2>] [--status ENABLE|DISABLE]"
        ),
        "adgroups": "adgroups [list] [--campaign-id <id>]",
        "reports": (
            "reports [get] --start-date YYYY-MM-DD --end-date YYYY-MM-DD [--dimensions campaign_id] "
            "[--metrics spend,impressions,clicks,conversion] [--data-level AUCTION_CAMPAIGN]"
        ),
        "audiences": "audiences [list]",
    },
)


def _advertiser(ctx: CommandContext) -> str:
    advertiser_id = ctx.args.value("advertiser-id") or ctx.credentials.get(ADVERTISER_ID)
    if not advertiser_id:
        raise UsageError(f"{ADVERTISER_ID} env or --advertiser-id required")
    return advertiser_id


def _json_list(*items: str) -> str:
    return json.dumps(list(items), separators=(",", ":"))


@commands.command("advertiser", "info")
def advertiser_info(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", "/advertiser/info/", params={"advertiser_ids": _json_list(_advertiser(ctx))})


@commands.command("campaigns", "list")
def campaigns_list(ctx: CommandContext) -> RequestDescriptor:
    params = {"advertiser_id": _advertiser(ctx), "page": 1, "page_size": 20}
    return ctx.request("GET", "/campaign/get/", params=params)


@commands.command("campaigns", "create")
def campaigns_create(ctx: CommandContext) -> RequestDescriptor:
    a = ctx.args
    advertiser_id = _advertiser(ctx)
    if not a.value("name") or not a.value("objective"):
        raise UsageError("--name and --objective required")
    body: dict[str, object] = {
        "advertiser_id": advertiser_id,
        "campaign_name": a.value("name"),
        "objective_type": a.value("objective"),
        "budget_mode": a.value("budget-mode", "BUDGET_MODE_DAY"),
    }
    budget = a.number("budget")
    if budget is not None:
        body["budget"] = float(budget)
    return ctx.request("POST", "/campaign/create/", body=body)


@commands.command("campaigns", "update-status")
def campaigns_update_status(ctx: CommandContext) -> RequestDescriptor:
    a = ctx.args
    advertiser_id = _advertiser(ctx)
    if not a.value("ids") or not a.value("status"):
        raise UsageError("--ids and --status required")
    body = {"advertiser_id": advertiser_id, "campaign_ids": a.csv("ids"), "opt_status": a.value("status")}
    return ctx.request("POST", "/campaign/status/update/", body=body)


@commands.command("adgroups", "list")
def adgroups_list(ctx: CommandContext) -> RequestDescriptor:
    campaign_id = ctx.args.value("campaign-id")
    params = {
        "advertiser_id": _advertiser(ctx),
        "campaign_ids": _json_list(campaign_id) if campaign_id else None,
    }
    return ctx.request("GET", "/adgroup/get/", params=params)


@commands.command("reports", "get")
def reports_get(ctx: CommandContext) -> RequestDescriptor:
    a = ctx.args
    advertiser_id = _advertiser(ctx)
    if not a.value("start-date") or not a.value("end-date"):
        raise UsageError("--start-date and --end-date required (YYYY-MM-DD)")
    body = {
        "advertiser_id": advertiser_id,
        "report_type": "BASIC",
        "dimensions": a.csv("dimensions") or ["campaign_id"],
        "metrics": a.csv("metrics") or ["spend", "impressions", "clicks", "conversion"],
        "data_level": a.value("data-level", "AUCTION_CAMPAIGN"),
        "start_date": a.value("start-date"),
        "end_date": a.value("end-date"),
    }
    return ctx.request("POST", "/report/integrated/get/", body=body)


@commands.command("audiences", "list")
def audiences_list(ctx: CommandContext) -> RequestDescriptor:
    return ctx.request("GET", "/dmp/custom_audience/list/", params={"advertiser_id": _advertiser(ctx)})


TOOL = ApiTool(
    name="tiktok-ads",
    description="TikTok Marketing API",
    base_url="https://business-api.tiktok.com/open_api/v1.3",
    credentials=(CredentialSpec(name=ACCESS_TOKEN), CredentialSpec(name=ADVERTISER_ID, required=False)),
    auth={"default": HeaderAuth("Access-Token", ACCESS_TOKEN)},
    commands=commands,
    headers={"Content-Type": "application/json"},
)
