"""
Simulated publishing to ad platforms.

There is no platform integration: publishing validates the request, waits a
short configurable delay and returns a receipt.
"""

from __future__ import annotations

import logging
import time
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from .config import get_app_config
from .errors import PublishError
from .schemas import Asset

logger = logging.getLogger(__name__)

PLATFORMS: List[Dict[str, str]] = [
    {"id": "google-ads", "name": "Google Ads"},
    {"id": "meta-ads", "name": "Meta Ads"},
    {"id": "tiktok-ads", "name": "TikTok Ads"},
    {"id": "linkedin-ads", "name": "LinkedIn Ads"},
]
_PLATFORMS_BY_ID = {p["id"]: p for p in PLATFORMS}


@dataclass(frozen=True)
class PublishReceipt:
    asset_id: str
    content_sn_id: str
    asset_name: Optional[str]
    platform_id: str
    platform_name: str
    published_at: str
    message: str

    def to_dict(self) -> Dict[str, Optional[str]]:
        return asdict(self)


def get_platform(platform: str) -> Optional[Dict[str, str]]:
    """Resolve a platform by id or display name."""
    if platform in _PLATFORMS_BY_ID:
        return _PLATFORMS_BY_ID[platform]
    for entry in PLATFORMS:
        if entry["name"].lower() == platform.lower():
            return entry
    return None


def publish_asset(
    asset: Optional[Asset],
    platform: Optional[str],
    delay_seconds: Optional[float] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> PublishReceipt:
    """
    Pretend to push an asset to an ad platform.

    Raises PublishError when the asset or platform is missing or the platform
    is not one of PLATFORMS.
    """
    if asset is None or not platform:
        raise PublishError("Missing Information: please select both an asset and a platform.")
    entry = get_platform(platform)
    if entry is None:
        raise PublishError(f"Unknown platform '{platform}'.")

    if delay_seconds is None:
        delay_seconds = get_app_config().publish_delay_seconds
    logger.info("Publishing %s to %s", asset.content_sn_id, entry["name"])
    if delay_seconds > 0:
        sleep(delay_seconds)

    display_name = asset.name or asset.content_sn_id
    receipt = PublishReceipt(
        asset_id=asset.id,
        content_sn_id=asset.content_sn_id,
        asset_name=asset.name,
        platform_id=entry["id"],
        platform_name=entry["name"],
        published_at=datetime.now(timezone.utc).isoformat(),
        message=f'Successfully published "{display_name}" to {entry["name"]}.',
    )
    logger.info(receipt.message)
    return receipt


__all__ = ["PLATFORMS", "PublishReceipt", "get_platform", "publish_asset"]
