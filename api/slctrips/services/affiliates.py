"""
Affiliate link builders for the partner programs we link out to
"""
from urllib.parse import quote

from slctrips.config import settings

AMAZON_BASE_URL = "https://www.amazon.com/dp/"
NETWORKS = ("amazon", "awin", "viator")
URI_COMPONENT_SAFE = "!~*'()"  # same set encodeURIComponent leaves alone


def amazon_link(asin: str, base_url: str = AMAZON_BASE_URL) -> str:
    return f"{base_url}{asin}?tag={settings.AMAZON_TAG}"


def awin_link(mid: str, target: str, ref: str = "slctrips") -> str:
    return (
        f"https://www.awin1.com/cread.php?awinmid={mid}&awinaffid={settings.AWIN_PID}"
        f"&clickref={ref}&ued={quote(target, safe=URI_COMPONENT_SAFE)}"
    )


def viator_link(target: str) -> str:
    return (
        f"https://www.viator.com/?pid={settings.VIATOR_PID}&mcid={settings.VIATOR_MCID}"
        f"&url={quote(target, safe=URI_COMPONENT_SAFE)}"
    )
