import copy
import json

import pytest

from creative_review import config
from creative_review.features import derive_ml_features

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def _det(value, reasoning="Because."):
    return {"determination": value, "reasoning": reasoning}


def build_analysis(media_format="Video", pacing="Appropriate"):
    return {
        "mediaFormat": media_format,
        "messageStrategy": {
            "hasSingleMessageFocus": _det(True),
            "messageComplexity": _det("Simple"),
            "usesRightBrainElements": _det(True),
        },
        "execution": {
            "musicProminentlyFeatured": _det(False),
            "isEmotionalStorytelling": _det(True),
            "usesHumor": _det(False),
            "pacing": _det(pacing),
        },
        "emotionalImpact": {
            "isEmotionDriven": _det(True),
            "primaryEmotion": _det("Nostalgia"),
            "hasPositiveTone": _det(True),
        },
        "performance": {
            "hasAttentionGrabbingIntro": _det(False),
            "creativeNovelty": _det("Original"),
            "brandFitScore": _det(4),
            "targetAudienceAlignmentScore": _det(3),
            "hasClearCallToAction": _det("Vague"),
        },
    }


def build_output(media_format="Video", pacing="Appropriate"):
    analysis = build_analysis(media_format, pacing)
    return {
        "parentCompany": "Acme Holdings",
        "brand": "Acme",
        "product": "Acme Cola",
        "brandSafety": {"isSafe": True, "flags": [], "reasoning": "Nothing concerning."},
        "analysis": analysis,
        "mlReadyFeatures": derive_ml_features(analysis),
    }


@pytest.fixture(autouse=True)
def _reset_config_caches():
    config.clear_config_caches()
    yield
    config.clear_config_caches()


@pytest.fixture
def analysis_output():
    """Valid camelCase analysis result for a video asset."""
    return build_output()


@pytest.fixture
def image_output():
    return build_output(media_format="Image", pacing="Not Applicable")


@pytest.fixture
def png_bytes():
    return PNG_BYTES


class FakeModel:
    """Stands in for the hosted model call; records every prompt it receives."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def __call__(self, system_prompt, user_prompt, payload):
        self.calls.append({"system": system_prompt, "user": user_prompt, "payload": payload})
        if self.error is not None:
            raise self.error
        if isinstance(self.response, str):
            return self.response
        return json.dumps(self.response)


@pytest.fixture
def fake_model():
    def _make(response=None, error=None):
        return FakeModel(copy.deepcopy(response), error)

    return _make
