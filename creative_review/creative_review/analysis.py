"""
Combined creative analysis: one hosted-model call per asset.

Builds a flat context string from optional campaign / quantitative metadata,
sends it with the encoded media to the configured provider (Gemini by default,
or any OpenAI-compatible endpoint), and validates the JSON answer against
``CombinedAnalysisOutput``. Model failures and schema failures raise distinct
exceptions; there are no retries and no partial results.
"""

from __future__ import annotations

import base64
import json
import logging
from functools import lru_cache
from typing import Any, Callable, Dict, List, Optional

from google import genai
from google.genai import types
from openai import OpenAI
from pydantic import ValidationError

from .config import AnalyzerConfig, get_analyzer_config
from .errors import AnalysisModelError, AnalysisValidationError, InvalidMediaError
from .features import derive_ml_features, feature_mismatches
from .media import MediaPayload, encode_data_uri, image_file_to_data_uri, media_format_for_mime, parse_data_uri
from .prompts import COMBINED_ANALYSIS_SYSTEM_PROMPT, render_user_prompt
from .schemas import CombinedAnalysisInput, CombinedAnalysisOutput, ManualData, MlReadyFeatures

logger = logging.getLogger(__name__)

NO_CONTEXT_SENTINEL = "No additional context provided."

# OpenAI chat completions accept these audio containers as input_audio
_OPENAI_AUDIO_FORMATS = {"audio/wav": "wav", "audio/x-wav": "wav", "audio/mpeg": "mp3", "audio/mp3": "mp3"}

# (system_prompt, user_prompt, payload) -> raw model text
ModelCaller = Callable[[str, str, MediaPayload], str]


# ---------------------------------------------------------------------------
# Context string
# ---------------------------------------------------------------------------

def build_context_string(analysis_input: CombinedAnalysisInput) -> str:
    """
    Flatten optional metadata into one line per provided field.

    Order is fixed: campaign, agency, platforms, endorsement, narrator,
    transcript, shot count, detected objects. Empty values are omitted.
    """
    manual = analysis_input.manual_data
    quant = analysis_input.quantitative_data
    parts: List[str] = []

    if manual.campaign_name:
        parts.append(f"Campaign Name: {manual.campaign_name}")
    if manual.creative_agency_name:
        parts.append(f"Agency: {manual.creative_agency_name}")
    if manual.platform_aired:
        parts.append(f"Platforms Aired: {', '.join(manual.platform_aired)}")
    if manual.endorsement_type:
        parts.append(f"Endorsement: {manual.endorsement_type}")
    if manual.narrator_type:
        parts.append(f"Narrator: {manual.narrator_type}")

    if quant.transcript:
        parts.append(f"Transcript: {quant.transcript}")
    if quant.shot_count:
        parts.append(f"Shot Count: {quant.shot_count}")
    if quant.detected_objects:
        parts.append(f"Detected Objects: {', '.join(quant.detected_objects)}")

    return "\n".join(parts) if parts else NO_CONTEXT_SENTINEL


# ---------------------------------------------------------------------------
# Providers
# ---------------------------------------------------------------------------

@lru_cache(maxsize=4)
def _get_gemini_client(api_key: str, timeout_seconds: Optional[float]) -> genai.Client:
    http_options = None
    if timeout_seconds:
        # google-genai expects milliseconds
        http_options = types.HttpOptions(timeout=int(timeout_seconds * 1000))
    return genai.Client(api_key=api_key, http_options=http_options)


@lru_cache(maxsize=4)
def _get_openai_client(api_key: str, api_base: Optional[str], timeout_seconds: Optional[float]) -> OpenAI:
    kwargs: Dict[str, Any] = {"api_key": api_key, "base_url": api_base}
    if timeout_seconds:
        kwargs["timeout"] = timeout_seconds
    return OpenAI(**kwargs)


def _call_gemini(cfg: AnalyzerConfig, system_prompt: str, user_prompt: str, payload: MediaPayload) -> str:
    client = _get_gemini_client(cfg.api_key, cfg.timeout_seconds)
    response = client.models.generate_content(
        model=cfg.model_name,
        contents=[
            types.Part.from_bytes(data=payload.data, mime_type=payload.mime_type),
            types.Part.from_text(text=user_prompt),
        ],
        config=types.GenerateContentConfig(
            system_instruction=system_prompt,
            temperature=cfg.temperature,
            response_mime_type="application/json",
        ),
    )

    feedback = getattr(response, "prompt_feedback", None)
    block_reason = getattr(feedback, "block_reason", None) if feedback else None
    if block_reason:
        raise AnalysisModelError(f"Prompt blocked by Gemini: {block_reason}", provider="google")

    candidates = getattr(response, "candidates", None) or []
    if candidates:
        finish_reason = str(getattr(candidates[0], "finish_reason", "") or "").upper()
        if "SAFETY" in finish_reason or "BLOCKED" in finish_reason or "PROHIBITED" in finish_reason:
            logger.warning("Gemini analysis blocked by safety filter: %s", finish_reason)
            raise AnalysisModelError(
                f"Content blocked by Gemini safety filter: {finish_reason}", provider="google"
            )

    return getattr(response, "text", None) or ""


def _openai_media_part(payload: MediaPayload) -> Dict[str, Any]:
    if payload.mime_type.startswith("image/"):
        return {"type": "image_url", "image_url": {"url": encode_data_uri(payload.data, payload.mime_type)}}
    audio_format = _OPENAI_AUDIO_FORMATS.get(payload.mime_type)
    if audio_format:
        return {
            "type": "input_audio",
            "input_audio": {"data": base64.b64encode(payload.data).decode("ascii"), "format": audio_format},
        }
    raise InvalidMediaError(
        f"The openai analyzer provider cannot accept {payload.mime_type}; "
        "use ANALYZER_PROVIDER=google for video and other audio formats."
    )


def _call_openai(cfg: AnalyzerConfig, system_prompt: str, user_prompt: str, payload: MediaPayload) -> str:
    media_part = _openai_media_part(payload)
    client = _get_openai_client(cfg.api_key, cfg.api_base, cfg.timeout_seconds)
    response = client.chat.completions.create(
        model=cfg.model_name,
        temperature=cfg.temperature,
        response_format={"type": "json_object"},
        messages=[
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": [{"type": "text", "text": user_prompt}, media_part]},
        ],
    )
    choice = response.choices[0]
    if getattr(choice, "finish_reason", None) == "content_filter":
        raise AnalysisModelError("Response blocked by the OpenAI content filter.", provider="openai")
    return choice.message.content or ""


_PROVIDERS = {
    "google": _call_gemini,
    "openai": _call_openai,
}


def _call_analysis_model(system_prompt: str, user_prompt: str, payload: MediaPayload) -> str:
    """Call the configured provider once; wrap every transport failure."""
    try:
        cfg = get_analyzer_config()
    except (RuntimeError, ValueError) as exc:
        raise AnalysisModelError(f"Analyzer is not configured: {exc}", cause=exc) from exc
    provider_call = _PROVIDERS[cfg.provider]
    logger.info(
        "Calling %s/%s for combined analysis (%s, %d bytes)",
        cfg.provider, cfg.model_name, payload.mime_type, payload.size_bytes,
    )
    try:
        return provider_call(cfg, system_prompt, user_prompt, payload)
    except (AnalysisModelError, InvalidMediaError):
        raise
    except Exception as exc:
        raise AnalysisModelError(
            f"{cfg.provider} analysis call failed: {exc}", provider=cfg.provider, cause=exc
        ) from exc


# ---------------------------------------------------------------------------
# Parsing & validation
# ---------------------------------------------------------------------------

def _strip_markdown_fences(text: str) -> str:
    """Remove markdown code fences if present."""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        first_newline = cleaned.find("\n")
        if first_newline != -1:
            cleaned = cleaned[first_newline + 1:]
        if cleaned.rstrip().endswith("```"):
            cleaned = cleaned.rstrip()[:-3].rstrip()
    return cleaned


def _parse_json(raw_output: str) -> Dict[str, Any]:
    cleaned = _strip_markdown_fences(raw_output)
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError:
        parsed = None
        if "{" in cleaned and "}" in cleaned:
            extracted = cleaned[cleaned.find("{"): cleaned.rfind("}") + 1]
            try:
                parsed = json.loads(extracted)
            except json.JSONDecodeError:
                parsed = None
            else:
                logger.warning("Analysis JSON parsed after extracting object from wrapped response")
    if parsed is None:
        raise AnalysisValidationError(
            "Model output was not valid JSON.", errors=["output is not JSON"], raw_output=raw_output
        )
    if not isinstance(parsed, dict):
        raise AnalysisValidationError(
            "Model output must be a JSON object.",
            errors=[f"expected object, got {type(parsed).__name__}"],
            raw_output=raw_output,
        )
    return parsed


def _format_validation_errors(exc: ValidationError) -> List[str]:
    messages = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ())) or "<root>"
        messages.append(f"{location}: {err.get('msg')}")
    return messages


def parse_analysis_output(raw_output: str) -> CombinedAnalysisOutput:
    """
    Validate raw model text and return the typed result.

    The ML-ready vector is re-derived from the determinations; a model-reported
    vector that disagrees is replaced (and logged) so consumers always see the
    fixed mapping.
    """
    if not raw_output or not raw_output.strip():
        raise AnalysisModelError("Model returned an empty response.")

    parsed = _parse_json(raw_output)
    try:
        result = CombinedAnalysisOutput.model_validate(parsed)
    except ValidationError as exc:
        errors = _format_validation_errors(exc)
        logger.error("Analysis output failed schema validation: %s", "; ".join(errors[:5]))
        raise AnalysisValidationError(
            f"Model output did not match the analysis schema ({len(errors)} error(s)).",
            errors=errors,
            raw_output=raw_output,
        ) from exc

    derived = derive_ml_features(result.analysis.model_dump(by_alias=True))
    reported = result.ml_ready_features.model_dump(by_alias=True)
    mismatches = feature_mismatches(reported, derived)
    if mismatches:
        logger.warning(
            "mlReadyFeatures disagreed with determinations; using derived values: %s",
            ", ".join(mismatches),
        )
        result.ml_ready_features = MlReadyFeatures.model_validate(derived)
    return result


def check_declared_format(result: CombinedAnalysisOutput, mime_type: str) -> None:
    """
    Reject a result whose ``mediaFormat`` contradicts the MIME type that was sent.

    Only image/, video/ and audio/ payloads have a known format; anything else
    is left to the model.
    """
    if mime_type.split("/", 1)[0] not in ("image", "video", "audio"):
        return
    expected = media_format_for_mime(mime_type)
    declared = result.analysis.media_format
    if declared != expected:
        message = f"analysis.mediaFormat is '{declared}' but the payload is {mime_type} ({expected})"
        logger.error("Analysis output failed format check: %s", message)
        raise AnalysisValidationError(
            "Model output declared the wrong media format.", errors=[message]
        )


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------

def analyze_combined(
    analysis_input: CombinedAnalysisInput,
    call_model: Optional[ModelCaller] = None,
) -> CombinedAnalysisOutput:
    """
    Run the combined brand-safety + qualitative analysis for one asset.

    Raises:
        InvalidMediaError: ``media`` is not a base64 data URI (no call is made)
        AnalysisModelError: the model call failed, was blocked or returned nothing
        AnalysisValidationError: the answer did not match the schema or declared
            a media format that contradicts the payload MIME type
    """
    payload = parse_data_uri(analysis_input.media)
    context_string = build_context_string(analysis_input)
    user_prompt = render_user_prompt(context_string, payload.mime_type)

    caller = call_model or _call_analysis_model
    raw_output = caller(COMBINED_ANALYSIS_SYSTEM_PROMPT, user_prompt, payload)
    result = parse_analysis_output(raw_output)
    check_declared_format(result, payload.mime_type)

    logger.info(
        "Combined analysis complete: brand=%s, parent=%s, format=%s, safe=%s, flags=%d",
        result.brand,
        result.parent_company,
        result.analysis.media_format,
        result.brand_safety.is_safe,
        len(result.brand_safety.flags),
    )
    return result


def run_test_analysis(
    image_path: str,
    call_model: Optional[ModelCaller] = None,
) -> CombinedAnalysisOutput:
    """Analyze a local test image with a placeholder campaign name."""
    data_uri = image_file_to_data_uri(image_path)
    logger.info("Running analysis on test asset %s", image_path)
    return analyze_combined(
        CombinedAnalysisInput(media=data_uri, manual_data=ManualData(campaign_name="Test Campaign")),
        call_model=call_model,
    )


__all__ = [
    "NO_CONTEXT_SENTINEL",
    "ModelCaller",
    "analyze_combined",
    "build_context_string",
    "check_declared_format",
    "parse_analysis_output",
    "run_test_analysis",
]
