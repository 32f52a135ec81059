import pytest
from pydantic import ValidationError

from creative_review.schemas import Asset, BrandSafety, CombinedAnalysisInput, CombinedAnalysisOutput

from conftest import build_output


def test_combined_output_accepts_valid_payload(analysis_output):
    result = CombinedAnalysisOutput.model_validate(analysis_output)
    assert result.brand == "Acme"
    assert result.analysis.media_format == "Video"
    assert result.analysis.performance.brand_fit_score.determination == 4
    assert result.model_dump(by_alias=True)["mlReadyFeatures"]["primaryEmotion"] == 3


def test_combined_output_rejects_out_of_set_enum(analysis_output):
    analysis_output["analysis"]["emotionalImpact"]["primaryEmotion"]["determination"] = "Joy"
    with pytest.raises(ValidationError):
        CombinedAnalysisOutput.model_validate(analysis_output)


@pytest.mark.parametrize("score", [0, 6, "4", 3.5])
def test_combined_output_rejects_bad_scores(analysis_output, score):
    analysis_output["analysis"]["performance"]["brandFitScore"]["determination"] = score
    with pytest.raises(ValidationError):
        CombinedAnalysisOutput.model_validate(analysis_output)


def test_combined_output_rejects_missing_reasoning(analysis_output):
    del analysis_output["analysis"]["execution"]["usesHumor"]["reasoning"]
    with pytest.raises(ValidationError):
        CombinedAnalysisOutput.model_validate(analysis_output)


def test_combined_output_rejects_missing_category(analysis_output):
    del analysis_output["analysis"]["performance"]
    with pytest.raises(ValidationError):
        CombinedAnalysisOutput.model_validate(analysis_output)


def test_ml_features_reject_unknown_keys(analysis_output):
    analysis_output["mlReadyFeatures"]["bogus"] = 1
    with pytest.raises(ValidationError, match="bogus"):
        CombinedAnalysisOutput.model_validate(analysis_output)


def test_boolean_determination_is_strict(analysis_output):
    analysis_output["analysis"]["execution"]["usesHumor"]["determination"] = "false"
    with pytest.raises(ValidationError):
        CombinedAnalysisOutput.model_validate(analysis_output)


def test_image_requires_not_applicable_pacing():
    payload = build_output(media_format="Image", pacing="Slow")
    with pytest.raises(ValidationError, match="Not Applicable"):
        CombinedAnalysisOutput.model_validate(payload)

    ok = build_output(media_format="Image", pacing="Not Applicable")
    assert CombinedAnalysisOutput.model_validate(ok).analysis.execution.pacing.determination == "Not Applicable"


def test_brand_safety_unsafe_requires_flags():
    with pytest.raises(ValidationError):
        BrandSafety.model_validate({"isSafe": False, "flags": [], "reasoning": "Violent imagery."})
    with pytest.raises(ValidationError):
        BrandSafety.model_validate({"isSafe": False, "flags": ["  "], "reasoning": "Violent imagery."})


def test_brand_safety_safe_must_not_carry_flags():
    with pytest.raises(ValidationError):
        BrandSafety.model_validate({"isSafe": True, "flags": ["Alcohol"], "reasoning": "Fine."})


def test_brand_safety_strips_flag_whitespace():
    safety = BrandSafety.model_validate({"isSafe": False, "flags": [" Violence ", ""], "reasoning": "Fight scene."})
    assert safety.flags == ["Violence"]


def test_combined_input_defaults_and_aliases():
    parsed = CombinedAnalysisInput.model_validate(
        {"media": "data:image/png;base64,AAAA", "manualData": {"campaignName": "Launch"}}
    )
    assert parsed.manual_data.campaign_name == "Launch"
    assert parsed.manual_data.platform_aired == []
    assert parsed.quantitative_data.transcript is None


def test_asset_rejects_unknown_status():
    with pytest.raises(ValidationError):
        Asset.model_validate(
            {
                "id": "x",
                "contentSnId": "SN-1",
                "name": "Spot",
                "type": "Video",
                "creationDate": "2024-01-01",
                "status": "Archived",
            }
        )
