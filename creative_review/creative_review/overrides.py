"""
Reviewer override form for a single asset.

Holds a pristine copy of the asset's camelCase record and a working copy the
reviewer edits field by field. ``save`` only promotes the working copy to the
new pristine state (clearing the modified flag); nothing is written anywhere.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .errors import OverrideError
from .features import ORDINAL_MAPS, RUBRIC, SCORE_MAX, SCORE_MIN, derive_ml_features, feature_names
from .schemas import Asset

logger = logging.getLogger(__name__)

_RUBRIC_LABELS = {
    "hasSingleMessageFocus": "Single Message Focus",
    "messageComplexity": "Message Complexity",
    "usesRightBrainElements": "Uses 'Right Brain' Elements",
    "musicProminentlyFeatured": "Music Prominently Featured",
    "isEmotionalStorytelling": "Is Emotional Storytelling",
    "usesHumor": "Uses Humor",
    "pacing": "Pacing",
    "isEmotionDriven": "Is Emotion-Driven",
    "primaryEmotion": "Primary Emotion",
    "hasPositiveTone": "Has Positive Tone",
    "hasAttentionGrabbingIntro": "Attention-Grabbing Intro",
    "creativeNovelty": "Creative Novelty",
    "brandFitScore": "Brand Fit Score (1-5)",
    "targetAudienceAlignmentScore": "Target Audience Alignment (1-5)",
    "hasClearCallToAction": "Has Clear Call To Action",
}

CATEGORY_LABELS = {
    "messageStrategy": "Message Strategy",
    "execution": "Execution",
    "emotionalImpact": "Emotional Impact",
    "performance": "Performance Potential",
}


@dataclass(frozen=True)
class FormField:
    path: str
    label: str
    kind: str
    choices: Tuple[Any, ...] = ()
    section: str = ""


def _build_catalogue() -> List[FormField]:
    fields = [
        FormField("parentCompany", "Parent Company", "text", section="Product Identification"),
        FormField("brand", "Brand", "text", section="Product Identification"),
        FormField("product", "Product", "text", section="Product Identification"),
        FormField("brandSafety.isSafe", "Safety Status", "boolean", section="Brand Safety"),
        FormField("brandSafety.flags", "Flags", "tags", section="Brand Safety"),
        FormField("brandSafety.reasoning", "Reasoning", "textarea", section="Brand Safety"),
    ]
    kind_to_control = {"boolean": "boolean", "enum": "select", "score": "slider"}
    for category, rubric_fields in RUBRIC.items():
        for field, kind in rubric_fields:
            choices: Tuple[Any, ...] = ()
            if kind == "enum":
                choices = tuple(ORDINAL_MAPS[field])
            elif kind == "score":
                choices = tuple(range(SCORE_MIN, SCORE_MAX + 1))
            fields.append(
                FormField(
                    f"analysis.{category}.{field}.determination",
                    _RUBRIC_LABELS[field],
                    kind_to_control[kind],
                    choices,
                    section=CATEGORY_LABELS[category],
                )
            )
    return fields


FORM_FIELDS: List[FormField] = _build_catalogue()
_FIELDS_BY_PATH = {f.path: f for f in FORM_FIELDS}

_MISSING = object()


def _lookup(record: Dict[str, Any], path: str) -> Any:
    node: Any = record
    for part in path.split("."):
        if not isinstance(node, dict) or part not in node:
            return _MISSING
        node = node[part]
    return node


def _coerce(field: FormField, value: Any) -> Any:
    if field.kind in ("text", "textarea"):
        if not isinstance(value, str):
            raise OverrideError(field.path, f"expected text, got {type(value).__name__}")
        return value
    if field.kind == "boolean":
        if not isinstance(value, bool):
            raise OverrideError(field.path, f"expected true/false, got {value!r}")
        return value
    if field.kind == "select":
        if value not in field.choices:
            raise OverrideError(field.path, f"{value!r} is not one of {list(field.choices)}")
        return value
    if field.kind == "slider":
        if isinstance(value, bool) or not isinstance(value, int) or value not in field.choices:
            raise OverrideError(field.path, f"expected an integer {SCORE_MIN}-{SCORE_MAX}, got {value!r}")
        return value
    if field.kind == "tags":
        if isinstance(value, str):
            value = value.split(",")
        if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
            raise OverrideError(field.path, "expected a list of tags or a comma-separated string")
        return [v.strip() for v in value if v.strip()]
    raise OverrideError(field.path, f"unsupported field kind '{field.kind}'")


class AssetReviewForm:
    """Editable override state for one asset."""

    def __init__(self, asset: Asset):
        self.asset_id = asset.id
        self._pristine: Dict[str, Any] = asset.model_dump(by_alias=True)
        self._working: Dict[str, Any] = copy.deepcopy(self._pristine)

    @property
    def is_dirty(self) -> bool:
        return self._working != self._pristine

    @property
    def values(self) -> Dict[str, Any]:
        return copy.deepcopy(self._working)

    @property
    def ml_ready_features(self) -> Optional[Dict[str, int]]:
        """Feature vector of the working copy in rubric order, tracking overridden determinations."""
        features = self._working.get("mlReadyFeatures")
        if features is None:
            return None
        return {name: features[name] for name in feature_names()}

    def fields(self) -> List[FormField]:
        """Overridable fields present on this asset, in display order."""
        return [f for f in FORM_FIELDS if _lookup(self._working, f.path) is not _MISSING]

    def get_value(self, path: str) -> Any:
        value = _lookup(self._working, path)
        if value is _MISSING:
            raise OverrideError(path, "field is not present on this asset")
        return value

    def ai_reasoning(self, path: str) -> Optional[str]:
        """Model reasoning recorded next to a rubric determination, if any."""
        if not path.endswith(".determination"):
            return None
        value = _lookup(self._pristine, path[: -len(".determination")] + ".reasoning")
        return None if value is _MISSING else value

    def set_value(self, path: str, value: Any) -> None:
        field = _FIELDS_BY_PATH.get(path)
        if field is None:
            raise OverrideError(path, "not an overridable field")
        if _lookup(self._working, path) is _MISSING:
            raise OverrideError(path, "field is not present on this asset")
        coerced = _coerce(field, value)

        parts = path.split(".")
        node = self._working
        for part in parts[:-1]:
            node = node[part]
        node[parts[-1]] = coerced

        if parts[0] == "analysis" and self._working.get("mlReadyFeatures") is not None:
            self._working["mlReadyFeatures"] = derive_ml_features(self._working["analysis"])

    def changes(self) -> Dict[str, Tuple[Any, Any]]:
        """Map of path -> (original, overridden) for every modified field."""
        diff = {}
        for f in self.fields():
            before = _lookup(self._pristine, f.path)
            after = _lookup(self._working, f.path)
            if before != after:
                diff[f.path] = (before, after)
        return diff

    def save(self) -> Dict[str, Tuple[Any, Any]]:
        """Accept the current overrides and clear the modified flag."""
        saved = self.changes()
        logger.info("Saving overrides for %s: %s", self.asset_id, sorted(saved))
        self._pristine = copy.deepcopy(self._working)
        return saved

    def reset(self) -> None:
        """Discard unsaved overrides."""
        self._working = copy.deepcopy(self._pristine)


__all__ = ["AssetReviewForm", "CATEGORY_LABELS", "FORM_FIELDS", "FormField"]
