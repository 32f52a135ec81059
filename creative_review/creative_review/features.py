"""
Qualitative rubric catalogue and the ML-ready feature derivation.

The ordinal tables here are the single source for both the prompt text sent to
the model and the numeric vector we derive from its determinations, so the two
cannot drift apart.
"""

from __future__ import annotations

from typing import Any, Dict, FrozenSet, List, Mapping, Tuple

NOT_APPLICABLE = "Not Applicable"
NOT_APPLICABLE_CODE = -1

MEDIA_FORMATS = ("Video", "Image", "Audio")

# category -> ordered (field, kind); kind is "boolean", "enum" or "score"
RUBRIC: Dict[str, Tuple[Tuple[str, str], ...]] = {
    "messageStrategy": (
        ("hasSingleMessageFocus", "boolean"),
        ("messageComplexity", "enum"),
        ("usesRightBrainElements", "boolean"),
    ),
    "execution": (
        ("musicProminentlyFeatured", "boolean"),
        ("isEmotionalStorytelling", "boolean"),
        ("usesHumor", "boolean"),
        ("pacing", "enum"),
    ),
    "emotionalImpact": (
        ("isEmotionDriven", "boolean"),
        ("primaryEmotion", "enum"),
        ("hasPositiveTone", "boolean"),
    ),
    "performance": (
        ("hasAttentionGrabbingIntro", "boolean"),
        ("creativeNovelty", "enum"),
        ("brandFitScore", "score"),
        ("targetAudienceAlignmentScore", "score"),
        ("hasClearCallToAction", "enum"),
    ),
}

ORDINAL_MAPS: Dict[str, Dict[str, int]] = {
    "messageComplexity": {"Simple": 0, "Moderate": 1, "Complex": 2},
    "pacing": {"Slow": 0, "Appropriate": 1, "Rushed": 2, NOT_APPLICABLE: NOT_APPLICABLE_CODE},
    "primaryEmotion": {
        "Happiness": 0,
        "Trust": 1,
        "Urgency": 2,
        "Nostalgia": 3,
        "Surprise": 4,
        "Fear": 5,
        "Anger": 6,
        "Sadness": 7,
        "Neutral": 8,
    },
    "creativeNovelty": {"Formulaic": 0, "Original": 1, "Highly Novel": 2},
    "hasClearCallToAction": {"None": 0, "Vague": 1, "Clear": 2},
}

SCORE_MIN = 1
SCORE_MAX = 5

# Fields that carry no meaning for a given media format.
FORMAT_INAPPLICABLE_FIELDS: Dict[str, FrozenSet[str]] = {
    "Image": frozenset({"execution.pacing"}),
    "Video": frozenset(),
    "Audio": frozenset(),
}


def iter_rubric_fields() -> List[Tuple[str, str, str]]:
    """Return (category, field, kind) for every qualitative field, in rubric order."""
    return [
        (category, field, kind)
        for category, fields in RUBRIC.items()
        for field, kind in fields
    ]


def feature_names() -> List[str]:
    """Names of the ML-ready features; one per qualitative field."""
    return [field for _, field, _ in iter_rubric_fields()]


def encode_determination(field: str, kind: str, value: Any) -> int:
    """Map a single determination to its numeric feature value."""
    if kind == "boolean":
        if not isinstance(value, bool):
            raise ValueError(f"{field} expects a boolean determination, got {value!r}.")
        return 1 if value else 0
    if kind == "enum":
        mapping = ORDINAL_MAPS[field]
        if value not in mapping:
            raise ValueError(
                f"{field} determination {value!r} is not one of {sorted(mapping)}."
            )
        return mapping[value]
    if kind == "score":
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"{field} expects an integer score, got {value!r}.")
        if not SCORE_MIN <= value <= SCORE_MAX:
            raise ValueError(f"{field} score {value} is outside {SCORE_MIN}-{SCORE_MAX}.")
        return value
    raise ValueError(f"Unknown rubric field kind '{kind}' for {field}.")


def derive_ml_features(analysis: Mapping[str, Any]) -> Dict[str, int]:
    """
    Flatten qualitative determinations into the numeric ML-ready vector.

    ``analysis`` is the camelCase ``analysis`` block of a result, where every
    field is ``{"determination": ..., "reasoning": ...}``. The output is a pure
    function of the determinations; reasoning text is ignored.
    """
    features: Dict[str, int] = {}
    for category, field, kind in iter_rubric_fields():
        block = analysis.get(category) or {}
        entry = block.get(field)
        if not isinstance(entry, Mapping) or "determination" not in entry:
            raise ValueError(f"analysis.{category}.{field} is missing a determination.")
        features[field] = encode_determination(field, kind, entry["determination"])
    return features


def inapplicable_fields(media_format: str) -> FrozenSet[str]:
    """Dotted ``category.field`` paths that must be Not Applicable for a format."""
    return FORMAT_INAPPLICABLE_FIELDS.get(media_format, frozenset())


def inapplicable_violations(analysis: Mapping[str, Any], media_format: str) -> List[str]:
    """List fields that should be Not Applicable for ``media_format`` but are not."""
    violations = []
    for path in sorted(inapplicable_fields(media_format)):
        category, field = path.split(".")
        entry = (analysis.get(category) or {}).get(field) or {}
        value = entry.get("determination")
        if value != NOT_APPLICABLE:
            violations.append(
                f"analysis.{path} must be '{NOT_APPLICABLE}' for {media_format} assets, got {value!r}"
            )
    return violations


def feature_mismatches(reported: Mapping[str, Any], derived: Mapping[str, int]) -> List[str]:
    """Compare a model-reported vector with the derived one, feature by feature."""
    mismatches = []
    for name, expected in derived.items():
        actual = reported.get(name)
        if actual != expected:
            mismatches.append(f"{name}: reported={actual!r} derived={expected}")
    return mismatches


def describe_feature_mapping() -> str:
    """Render the mapping table as prompt documentation."""
    lines = [
        "- Boolean determinations: true -> 1, false -> 0.",
        f"- Integer scores ({SCORE_MIN}-{SCORE_MAX}) pass through unchanged.",
    ]
    for field, mapping in ORDINAL_MAPS.items():
        pairs = ", ".join(f"{label}={code}" for label, code in mapping.items())
        lines.append(f"- {field}: {pairs}")
    return "\n".join(lines)


def describe_applicability() -> str:
    """Render the per-format Not Applicable rules as prompt documentation."""
    lines = []
    for media_format in MEDIA_FORMATS:
        fields = sorted(inapplicable_fields(media_format))
        if fields:
            lines.append(f"- {media_format}: {', '.join(fields)} MUST be '{NOT_APPLICABLE}'.")
        else:
            lines.append(f"- {media_format}: every field applies.")
    return "\n".join(lines)


__all__ = [
    "NOT_APPLICABLE",
    "NOT_APPLICABLE_CODE",
    "MEDIA_FORMATS",
    "RUBRIC",
    "ORDINAL_MAPS",
    "FORMAT_INAPPLICABLE_FIELDS",
    "iter_rubric_fields",
    "feature_names",
    "encode_determination",
    "derive_ml_features",
    "inapplicable_fields",
    "inapplicable_violations",
    "feature_mismatches",
    "describe_feature_mapping",
    "describe_applicability",
]
