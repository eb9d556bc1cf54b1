"""Console-script entry points, one per tool.

Each behaves like a standalone program: `calendly events list --user <uri>`.
"""

from __future__ import annotations

import sys
from typing import Callable

from adapters.tools import get_tool
from cli.program import run_program


def _entry(name: str) -> Callable[[], None]:
    def main() -> None:
        sys.exit(run_program(get_tool(name), sys.argv[1:]))

    main.__name__ = name.replace("-", "_")
    main.__doc__ = f"Run the {name} tool."
    return main


brevo = _entry("brevo")
calendly = _entry("calendly")
hotjar = _entry("hotjar")
klaviyo = _entry("klaviyo")
mailchimp = _entry("mailchimp")
paddle = _entry("paddle")
partnerstack = _entry("partnerstack")
postmark = _entry("postmark")
semrush = _entry("semrush")
sendgrid = _entry("sendgrid")
tiktok_ads = _entry("tiktok-ads")
trustpilot = _entry("trustpilot")
wistia = _entry("wistia")
