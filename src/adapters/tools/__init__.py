"""Tool adapters, one module per third-party API.

Each module exposes a module-level `TOOL` (`core.tool.ApiTool`).
"""

from __future__ import annotations

from adapters.tools import (
    brevo,
    calendly,
    hotjar,
    klaviyo,
    mailchimp,
    paddle,
    partnerstack,
    postmark,
    semrush,
    sendgrid,
    tiktok_ads,
    trustpilot,
    wistia,
)
from core.tool import ApiTool

TOOLS: dict[str, ApiTool] = {
    module.TOOL.name: module.TOOL
    for module in (
        brevo,
        calendly,
        hotjar,
        klaviyo,
        mailchimp,
        paddle,
        partnerstack,
        postmark,
        semrush,
        sendgrid,
        tiktok_ads,
        trustpilot,
        wistia,
    )
}


def get_tool(name: str) -> ApiTool:
    try:
        return TOOLS[name]
    except KeyError:
        raise KeyError(f"unknown tool {name!r}; available: {', '.join(sorted(TOOLS))}") from None


__all__ = ["TOOLS", "get_tool"]
