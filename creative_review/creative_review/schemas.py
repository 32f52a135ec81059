"""
Pydantic models for the combined analysis exchange and the asset library.

Python attributes are snake_case; the wire format (model prompt, JSON output,
HTTP API) is camelCase via the alias generator. Always dump with
``by_alias=True`` when handing data to anything outside this package.
"""

from __future__ import annotations

from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, model_validator
from pydantic.alias_generators import to_camel

from .features import NOT_APPLICABLE, SCORE_MAX, SCORE_MIN, inapplicable_violations

# ---------------------------------------------------------------------------
# Closed value sets
# ---------------------------------------------------------------------------

MediaFormat = Literal["Video", "Image", "Audio"]
MessageComplexity = Literal["Simple", "Moderate", "Complex"]
Pacing = Literal["Slow", "Appropriate", "Rushed", "Not Applicable"]
PrimaryEmotion = Literal[
    "Happiness", "Trust", "Urgency", "Nostalgia", "Surprise", "Fear", "Anger", "Sadness", "Neutral"
]
CreativeNovelty = Literal["Formulaic", "Original", "Highly Novel"]
CallToAction = Literal["Clear", "Vague", "None"]

AssetStatus = Literal["New", "In Review", "Approved", "Rejected", "Ready for Publisher", "Picked Up"]
AssetContentType = Literal["Branded", "Endorsed", "UGC", "Mixed", "N/A"]
AssetType = Literal["Video", "Image", "Audio"]

ALL_STATUSES: List[str] = ["New", "In Review", "Approved", "Rejected", "Ready for Publisher", "Picked Up"]
ALL_CONTENT_TYPES: List[str] = ["Branded", "Endorsed", "UGC", "Mixed", "N/A"]

Score = Annotated[int, Field(ge=SCORE_MIN, le=SCORE_MAX, strict=True)]
Flag = Annotated[int, Field(ge=0, le=1)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Analysis input
# ---------------------------------------------------------------------------

class ManualData(CamelModel):
    """Campaign metadata a reviewer may supply alongside the upload."""

    campaign_name: Optional[str] = None
    creative_agency_name: Optional[str] = None
    platform_aired: List[str] = Field(default_factory=list)
    endorsement_type: Optional[str] = None
    narrator_type: Optional[str] = None


class QuantitativeData(CamelModel):
    """Machine-extracted signals (transcript, shot count, detected objects)."""

    transcript: Optional[str] = None
    shot_count: Optional[int] = None
    detected_objects: List[str] = Field(default_factory=list)


class CombinedAnalysisInput(CamelModel):
    media: str = Field(
        description=(
            "A media file (image, video or audio) as a data URI that must include a MIME type "
            "and use Base64 encoding. Expected format: 'data:<mimetype>;base64,<encoded_data>'."
        )
    )
    manual_data: ManualData = Field(default_factory=ManualData)
    quantitative_data: QuantitativeData = Field(default_factory=QuantitativeData)


# ---------------------------------------------------------------------------
# Analysis output
# ---------------------------------------------------------------------------

class BrandSafety(CamelModel):
    is_safe: StrictBool
    flags: List[str] = Field(default_factory=list)
    reasoning: str

    @model_validator(mode="after")
    def _check_flags_match_verdict(self) -> "BrandSafety":
        cleaned = [flag.strip() for flag in self.flags if flag and flag.strip()]
        if not self.is_safe:
            if not cleaned:
                raise ValueError("brandSafety.flags must be non-empty when isSafe is false")
            if not self.reasoning.strip():
                raise ValueError("brandSafety.reasoning is required when isSafe is false")
        elif cleaned:
            raise ValueError("brandSafety.flags must be empty when isSafe is true")
        self.flags = cleaned
        return self


class BooleanDetermination(CamelModel):
    determination: StrictBool
    reasoning: str


class ScoreDetermination(CamelModel):
    determination: Score
    reasoning: str


class MessageComplexityDetermination(CamelModel):
    determination: MessageComplexity
    reasoning: str


class PacingDetermination(CamelModel):
    determination: Pacing
    reasoning: str


class PrimaryEmotionDetermination(CamelModel):
    determination: PrimaryEmotion
    reasoning: str


class CreativeNoveltyDetermination(CamelModel):
    determination: CreativeNovelty
    reasoning: str


class CallToActionDetermination(CamelModel):
    determination: CallToAction
    reasoning: str


class MessageStrategy(CamelModel):
    has_single_message_focus: BooleanDetermination = Field(
        description="Does the creative communicate one clear, single-minded message?"
    )
    message_complexity: MessageComplexityDetermination = Field(
        description="How complex is the core message? Simple, Moderate or Complex."
    )
    uses_right_brain_elements: BooleanDetermination = Field(
        description="Does it lean on emotive 'right brain' devices (story, characters, music, metaphor)?"
    )


class Execution(CamelModel):
    music_prominently_featured: BooleanDetermination
    is_emotional_storytelling: BooleanDetermination
    uses_humor: BooleanDetermination
    pacing: PacingDetermination = Field(
        description=f"Slow, Appropriate or Rushed. '{NOT_APPLICABLE}' for static images."
    )


class EmotionalImpact(CamelModel):
    is_emotion_driven: BooleanDetermination
    primary_emotion: PrimaryEmotionDetermination
    has_positive_tone: BooleanDetermination


class Performance(CamelModel):
    has_attention_grabbing_intro: BooleanDetermination
    creative_novelty: CreativeNoveltyDetermination
    brand_fit_score: ScoreDetermination = Field(description="Brand fit, integer 1-5.")
    target_audience_alignment_score: ScoreDetermination = Field(
        description="Target audience alignment, integer 1-5."
    )
    has_clear_call_to_action: CallToActionDetermination


class QualitativeAnalysis(CamelModel):
    media_format: MediaFormat = Field(description="Detected format of the asset.")
    message_strategy: MessageStrategy
    execution: Execution
    emotional_impact: EmotionalImpact
    performance: Performance


class MlReadyFeatures(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    has_single_message_focus: Flag
    message_complexity: Annotated[int, Field(ge=0, le=2)]
    uses_right_brain_elements: Flag
    music_prominently_featured: Flag
    is_emotional_storytelling: Flag
    uses_humor: Flag
    pacing: Annotated[int, Field(ge=-1, le=2)]
    is_emotion_driven: Flag
    primary_emotion: Annotated[int, Field(ge=0, le=8)]
    has_positive_tone: Flag
    has_attention_grabbing_intro: Flag
    creative_novelty: Annotated[int, Field(ge=0, le=2)]
    brand_fit_score: Annotated[int, Field(ge=SCORE_MIN, le=SCORE_MAX)]
    target_audience_alignment_score: Annotated[int, Field(ge=SCORE_MIN, le=SCORE_MAX)]
    has_clear_call_to_action: Annotated[int, Field(ge=0, le=2)]


class CombinedAnalysisOutput(CamelModel):
    parent_company: str
    brand: str
    product: str
    brand_safety: BrandSafety
    analysis: QualitativeAnalysis
    ml_ready_features: MlReadyFeatures

    @model_validator(mode="after")
    def _check_format_applicability(self) -> "CombinedAnalysisOutput":
        analysis = self.analysis.model_dump(by_alias=True)
        violations = inapplicable_violations(analysis, self.analysis.media_format)
        if violations:
            raise ValueError("; ".join(violations))
        return self


# ---------------------------------------------------------------------------
# Asset library
# ---------------------------------------------------------------------------

class Asset(CamelModel):
    id: str
    content_sn_id: str
    name: str
    creator: str = "N/A"
    type: AssetType
    length: str = "N/A"
    tags: str = ""
    campaign: str = ""
    creation_date: str
    daypart: str = "N/A"
    spot_length: str = "N/A"
    status: Optional[AssetStatus] = None
    content_type: Optional[AssetContentType] = None
    thumbnail: Optional[str] = None
    content_score: Optional[int] = None
    roas: Optional[float] = None
    parent_company: Optional[str] = None
    brand: Optional[str] = None
    product: Optional[str] = None
    brand_safety: Optional[BrandSafety] = None
    analysis: Optional[QualitativeAnalysis] = None
    ml_ready_features: Optional[MlReadyFeatures] = None


__all__ = [
    "ALL_CONTENT_TYPES",
    "ALL_STATUSES",
    "Asset",
    "AssetContentType",
    "AssetStatus",
    "BrandSafety",
    "CombinedAnalysisInput",
    "CombinedAnalysisOutput",
    "ManualData",
    "MlReadyFeatures",
    "QualitativeAnalysis",
    "QuantitativeData",
]
