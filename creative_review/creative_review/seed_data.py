"""
Fixed seed set for the asset library.

Every session starts from these assets; uploads are prepended on top of a copy.
Seed ML-ready vectors are derived with the same mapping as live analyses.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .features import NOT_APPLICABLE, derive_ml_features
from .schemas import Asset


def _det(value: Any, reasoning: str) -> Dict[str, Any]:
    return {"determination": value, "reasoning": reasoning}


def _analysis(
    media_format: str,
    *,
    single_focus: bool,
    complexity: str,
    right_brain: bool,
    music: bool,
    storytelling: bool,
    humor: bool,
    pacing: str,
    emotion_driven: bool,
    emotion: str,
    positive: bool,
    intro: bool,
    novelty: str,
    brand_fit: int,
    audience: int,
    cta: str,
    notes: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    notes = notes or {}

    def why(field: str, fallback: str) -> str:
        return notes.get(field, fallback)

    return {
        "mediaFormat": media_format,
        "messageStrategy": {
            "hasSingleMessageFocus": _det(single_focus, why("hasSingleMessageFocus", "One product benefit carries the whole piece." if single_focus else "Several competing claims share the frame.")),
            "messageComplexity": _det(complexity, why("messageComplexity", f"Message reads as {complexity.lower()} on first exposure.")),
            "usesRightBrainElements": _det(right_brain, why("usesRightBrainElements", "Relies on mood and character rather than feature lists." if right_brain else "Mostly rational product claims.")),
        },
        "execution": {
            "musicProminentlyFeatured": _det(music, why("musicProminentlyFeatured", "Music drives the edit." if music else "No prominent music.")),
            "isEmotionalStorytelling": _det(storytelling, why("isEmotionalStorytelling", "Follows a character through a small arc." if storytelling else "No narrative arc.")),
            "usesHumor": _det(humor, why("usesHumor", "Light comedic beat in the middle." if humor else "Played straight.")),
            "pacing": _det(pacing, why("pacing", "Static image; pacing does not apply." if pacing == NOT_APPLICABLE else f"Edit rhythm feels {pacing.lower()}.")),
        },
        "emotionalImpact": {
            "isEmotionDriven": _det(emotion_driven, why("isEmotionDriven", "Built around a feeling, not a spec sheet." if emotion_driven else "Information-led.")),
            "primaryEmotion": _det(emotion, why("primaryEmotion", f"Dominant register is {emotion.lower()}.")),
            "hasPositiveTone": _det(positive, why("hasPositiveTone", "Upbeat overall." if positive else "Tone is tense or negative.")),
        },
        "performance": {
            "hasAttentionGrabbingIntro": _det(intro, why("hasAttentionGrabbingIntro", "Strong first-second hook." if intro else "Slow open.")),
            "creativeNovelty": _det(novelty, why("creativeNovelty", f"Execution is {novelty.lower()} for the category.")),
            "brandFitScore": _det(brand_fit, why("brandFitScore", "Brand codes are visible throughout.")),
            "targetAudienceAlignmentScore": _det(audience, why("targetAudienceAlignmentScore", "Casting and setting match the stated audience.")),
            "hasClearCallToAction": _det(cta, why("hasClearCallToAction", f"Call to action is {cta.lower()}.")),
        },
    }


def _asset(base: Dict[str, Any], analysis: Optional[Dict[str, Any]] = None, **identification: Any) -> Asset:
    record = dict(base)
    if analysis is not None:
        record.update(identification)
        record["analysis"] = analysis
        record["mlReadyFeatures"] = derive_ml_features(analysis)
    return Asset.model_validate(record)


_SAFE = {"isSafe": True, "flags": [], "reasoning": "No brand safety concerns detected."}

DUMMY_ASSETS: List[Asset] = [
    _asset(
        {
            "id": "a1f3c9d2-4b7e-4f1a-9c2d-1e5b7a9c3f01",
            "contentSnId": "SN-2024-0001",
            "name": "Summer Refresh 30s",
            "creator": "Harbor & Lane",
            "type": "Video",
            "length": "0:30",
            "tags": "summer, beverage, outdoor",
            "campaign": "Summer Refresh",
            "creationDate": "2024-05-14",
            "daypart": "Prime",
            "spotLength": ":30",
            "status": "Approved",
            "contentType": "Branded",
            "thumbnail": "https://placehold.co/80x60.png",
            "contentScore": 82,
            "roas": 3.4,
        },
        _analysis(
            "Video",
            single_focus=True, complexity="Simple", right_brain=True,
            music=True, storytelling=True, humor=False, pacing="Appropriate",
            emotion_driven=True, emotion="Happiness", positive=True,
            intro=True, novelty="Original", brand_fit=5, audience=4, cta="Clear",
        ),
        parentCompany="Northfield Beverages",
        brand="Brightwave",
        product="Brightwave Sparkling Water",
        brandSafety=_SAFE,
    ),
    _asset(
        {
            "id": "b7d2e8f1-0c3a-4d5e-8b6f-2a4c6e8f0b12",
            "contentSnId": "SN-2024-0002",
            "name": "Glow Serum Static",
            "creator": "In-house Studio",
            "type": "Image",
            "tags": "beauty, skincare",
            "campaign": "Glow Launch",
            "creationDate": "2024-06-02",
            "status": "In Review",
            "contentType": "Branded",
            "thumbnail": "https://placehold.co/80x60.png",
            "contentScore": 64,
            "roas": 2.1,
        },
        _analysis(
            "Image",
            single_focus=True, complexity="Simple", right_brain=False,
            music=False, storytelling=False, humor=False, pacing=NOT_APPLICABLE,
            emotion_driven=False, emotion="Trust", positive=True,
            intro=True, novelty="Formulaic", brand_fit=4, audience=4, cta="Vague",
            notes={"musicProminentlyFeatured": "Static image has no audio track."},
        ),
        parentCompany="Lumen Beauty Group",
        brand="Lumen",
        product="Glow Vitamin C Serum",
        brandSafety=_SAFE,
    ),
    _asset(
        {
            "id": "c4e6a8b0-1d2f-4a3b-9c5d-3e7f9a1b5c23",
            "contentSnId": "SN-2024-0003",
            "name": "Morning Drive Radio Spot",
            "creator": "Soundfront Audio",
            "type": "Audio",
            "length": "0:15",
            "tags": "radio, insurance",
            "campaign": "Drive Safe",
            "creationDate": "2024-04-21",
            "daypart": "Morning Drive",
            "spotLength": ":15",
            "status": "New",
            "contentType": "Endorsed",
            "thumbnail": "https://placehold.co/80x60.png",
            "contentScore": 47,
            "roas": 1.2,
        },
        _analysis(
            "Audio",
            single_focus=False, complexity="Moderate", right_brain=False,
            music=True, storytelling=False, humor=True, pacing="Rushed",
            emotion_driven=False, emotion="Urgency", positive=True,
            intro=False, novelty="Formulaic", brand_fit=3, audience=3, cta="Clear",
            notes={"pacing": "Legal read at the end is compressed into three seconds."},
        ),
        parentCompany="Keystone Mutual",
        brand="Keystone Auto",
        product="Keystone Auto Insurance",
        brandSafety=_SAFE,
    ),
    _asset(
        {
            "id": "d9b1c3e5-2f4a-4b6c-8d0e-4f8a0b2c6d34",
            "contentSnId": "SN-2024-0004",
            "name": "Trail Runner UGC Clip",
            "creator": "@ridgeline.runs",
            "type": "Video",
            "length": "0:22",
            "tags": "ugc, running, footwear",
            "campaign": "Run Wild",
            "creationDate": "2024-07-09",
            "daypart": "N/A",
            "spotLength": ":22",
            "status": "Ready for Publisher",
            "contentType": "UGC",
            "thumbnail": "https://placehold.co/80x60.png",
            "contentScore": 77,
            "roas": 4.0,
        },
        _analysis(
            "Video",
            single_focus=True, complexity="Simple", right_brain=True,
            music=True, storytelling=True, humor=False, pacing="Appropriate",
            emotion_driven=True, emotion="Surprise", positive=True,
            intro=True, novelty="Highly Novel", brand_fit=4, audience=5, cta="Vague",
        ),
        parentCompany="Ascent Outdoor Co.",
        brand="Ridgeline",
        product="Ridgeline TR-3 Trail Shoe",
        brandSafety=_SAFE,
    ),
    _asset(
        {
            "id": "e2c4d6f8-3a5b-4c7d-9e1f-5a9b1c3d7e45",
            "contentSnId": "SN-2024-0005",
            "name": "Midnight Burger Promo",
            "creator": "Blackbox Creative",
            "type": "Video",
            "length": "0:15",
            "tags": "qsr, late night",
            "campaign": "Late Night Cravings",
            "creationDate": "2024-03-30",
            "daypart": "Late Fringe",
            "spotLength": ":15",
            "status": "Rejected",
            "contentType": "Mixed",
            "thumbnail": "https://placehold.co/80x60.png",
            "contentScore": 38,
            "roas": 0.9,
        },
        _analysis(
            "Video",
            single_focus=False, complexity="Complex", right_brain=True,
            music=True, storytelling=False, humor=True, pacing="Rushed",
            emotion_driven=True, emotion="Anger", positive=False,
            intro=True, novelty="Original", brand_fit=2, audience=3, cta="None",
        ),
        parentCompany="Grillhouse Holdings",
        brand="Midnight Burger",
        product="Double Stack Burger",
        brandSafety={
            "isSafe": False,
            "flags": ["Violence", "Profanity"],
            "reasoning": "Bar fight staged for comic effect and bleeped profanity in the closing line.",
        },
    ),
    _asset(
        {
            "id": "f5a7b9c1-4b6d-4e8f-a0b2-6c0d2e4f8a56",
            "contentSnId": "SN-2024-0006",
            "name": "Fintech App Launch",
            "creator": "Parallel Agency",
            "type": "Video",
            "length": "0:45",
            "tags": "finance, app, launch",
            "campaign": "Pocket Launch",
            "creationDate": "2024-08-18",
            "daypart": "Daytime",
            "spotLength": ":45",
            "status": "Picked Up",
            "contentType": "Endorsed",
            "thumbnail": "https://placehold.co/80x60.png",
            "contentScore": 58,
            "roas": 1.8,
        },
        _analysis(
            "Video",
            single_focus=False, complexity="Moderate", right_brain=False,
            music=False, storytelling=False, humor=False, pacing="Slow",
            emotion_driven=False, emotion="Trust", positive=True,
            intro=False, novelty="Formulaic", brand_fit=3, audience=4, cta="Clear",
        ),
        parentCompany="Pocket Financial Inc.",
        brand="Pocket",
        product="Pocket Budgeting App",
        brandSafety=_SAFE,
    ),
    _asset(
        {
            "id": "0a2b4c6d-5e7f-4a9b-b1c3-7d1e3f5a9b67",
            "contentSnId": "SN-2024-0007",
            "name": "Holiday Banner 300x250",
            "creator": "In-house Studio",
            "type": "Image",
            "tags": "display, holiday",
            "campaign": "Holiday Gifting",
            "creationDate": "2024-11-01",
            "status": "New",
            "contentType": "Mixed",
            "thumbnail": "https://placehold.co/80x60.png",
            "contentScore": 71,
        },
        _analysis(
            "Image",
            single_focus=True, complexity="Simple", right_brain=True,
            music=False, storytelling=False, humor=False, pacing=NOT_APPLICABLE,
            emotion_driven=True, emotion="Nostalgia", positive=True,
            intro=True, novelty="Original", brand_fit=4, audience=3, cta="Clear",
        ),
        parentCompany="Evergreen Retail",
        brand="Evergreen",
        product="Gift Cards",
        brandSafety=_SAFE,
    ),
    _asset(
        {
            "id": "1b3c5d7e-6f8a-4b0c-c2d4-8e2f4a6b0c78",
            "contentSnId": "SN-2023-0142",
            "name": "Legacy Catalog Spot",
            "creator": "Archive",
            "type": "Video",
            "length": "1:00",
            "tags": "archive",
            "campaign": "Catalog",
            "creationDate": "2023-09-12",
            "daypart": "Overnight",
            "spotLength": ":60",
            "status": "In Review",
            "contentType": "N/A",
            "thumbnail": "https://placehold.co/80x60.png",
        },
    ),
]


def seed_assets() -> List[Asset]:
    """Return a deep copy of the seed set so a session can mutate freely."""
    return [asset.model_copy(deep=True) for asset in DUMMY_ASSETS]


__all__ = ["DUMMY_ASSETS", "seed_assets"]
