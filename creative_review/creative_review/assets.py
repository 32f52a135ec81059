"""
Session-local asset library: seed set, filtering, lookup and AI-analyzed uploads.

Nothing here persists. A library lives in one viewer's session (Streamlit
session state or a single API process) and starts again from the seed set.
"""

from __future__ import annotations

import logging
import random
import string
import time
from datetime import date
from typing import Callable, Iterable, List, Optional, Sequence

from .analysis import analyze_combined
from .errors import UploadInProgressError
from .media import encode_data_uri, guess_mime_type, media_format_for_mime
from .schemas import Asset, CombinedAnalysisInput, CombinedAnalysisOutput
from .seed_data import seed_assets

logger = logging.getLogger(__name__)

Analyzer = Callable[[CombinedAnalysisInput], CombinedAnalysisOutput]


def filter_assets(
    assets: Sequence[Asset],
    search_term: str = "",
    statuses: Iterable[str] = (),
    content_types: Iterable[str] = (),
) -> List[Asset]:
    """
    Return assets matching every active criterion, in their original order.

    - search_term: case-insensitive substring of name or contentSnId
    - statuses / content_types: membership; empty means "any"
    """
    needle = (search_term or "").lower()
    status_set = set(statuses)
    content_type_set = set(content_types)

    def matches(asset: Asset) -> bool:
        if needle and needle not in (asset.name or "").lower() and needle not in asset.content_sn_id.lower():
            return False
        if status_set and asset.status not in status_set:
            return False
        if content_type_set and asset.content_type not in content_type_set:
            return False
        return True

    return [asset for asset in assets if matches(asset)]


def score_band(score: Optional[int]) -> str:
    """Bucket a content score for display: high (>75), medium (>=50), low, unknown."""
    if score is None:
        return "unknown"
    if score > 75:
        return "high"
    if score >= 50:
        return "medium"
    return "low"


def status_variant(status: Optional[str]) -> str:
    """Badge style for a workflow status."""
    if status == "Picked Up":
        return "default"
    if status in ("Approved", "Ready for Publisher"):
        return "secondary"
    if status == "Rejected":
        return "destructive"
    return "outline"


def _new_content_sn_id() -> str:
    suffix = "".join(random.choices(string.ascii_uppercase + string.digits, k=6))
    return f"NEW-ASSET-{suffix}"


def asset_from_analysis(
    filename: str,
    mime_type: str,
    result: CombinedAnalysisOutput,
    thumbnail: Optional[str] = None,
) -> Asset:
    """Build the library entry for a freshly analyzed upload."""
    return Asset(
        id=f"new-{int(time.time() * 1000)}",
        content_sn_id=_new_content_sn_id(),
        name=filename,
        creator="N/A",
        type=media_format_for_mime(mime_type),
        length="N/A",
        tags="AI Analyzed",
        campaign="New Campaign",
        creation_date=date.today().isoformat(),
        daypart="N/A",
        spot_length="N/A",
        status="New",
        content_type="Branded",
        thumbnail=thumbnail,
        parent_company=result.parent_company,
        brand=result.brand,
        product=result.product,
        brand_safety=result.brand_safety,
        analysis=result.analysis,
        ml_ready_features=result.ml_ready_features,
    )


class AssetLibrary:
    """In-memory asset collection for one session."""

    def __init__(self, assets: Optional[Sequence[Asset]] = None):
        self._assets: List[Asset] = list(assets) if assets is not None else seed_assets()
        self.busy = False

    @property
    def assets(self) -> List[Asset]:
        return list(self._assets)

    def __len__(self) -> int:
        return len(self._assets)

    def filter(
        self,
        search_term: str = "",
        statuses: Iterable[str] = (),
        content_types: Iterable[str] = (),
    ) -> List[Asset]:
        return filter_assets(self._assets, search_term, statuses, content_types)

    def get(self, asset_id: str) -> Optional[Asset]:
        """Look up by ``id``; returns None when absent."""
        for asset in self._assets:
            if asset.id == asset_id:
                return asset
        return None

    def get_by_content_sn_id(self, content_sn_id: str) -> Optional[Asset]:
        for asset in self._assets:
            if asset.content_sn_id == content_sn_id:
                return asset
        return None

    def upload(
        self,
        filename: str,
        data: bytes,
        mime_type: Optional[str] = None,
        analyzer: Optional[Analyzer] = None,
        thumbnail: Optional[str] = None,
    ) -> Asset:
        """
        Analyze an uploaded file and prepend it to the library.

        At most one analysis runs at a time; a second call while busy raises
        UploadInProgressError. When the analyzer fails nothing is added and the
        error propagates to the caller.
        """
        if self.busy:
            raise UploadInProgressError("An asset is already being analyzed.")

        resolved_mime = mime_type or guess_mime_type(filename, data)
        run_analysis = analyzer or analyze_combined
        self.busy = True
        try:
            data_uri = encode_data_uri(data, resolved_mime)
            if thumbnail is None and media_format_for_mime(resolved_mime) == "Image":
                thumbnail = data_uri
            logger.info("Analyzing upload %s (%s, %d bytes)", filename, resolved_mime, len(data))
            result = run_analysis(CombinedAnalysisInput(media=data_uri))
            asset = asset_from_analysis(filename, resolved_mime, result, thumbnail=thumbnail)
            self._assets.insert(0, asset)
            logger.info("Added %s as %s (%s)", filename, asset.content_sn_id, asset.id)
            return asset
        except Exception:
            logger.exception("Error analyzing asset %s", filename)
            raise
        finally:
            self.busy = False


__all__ = [
    "AssetLibrary",
    "asset_from_analysis",
    "filter_assets",
    "score_band",
    "status_variant",
]
