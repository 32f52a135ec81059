import re
from datetime import date

import pytest

from creative_review.analysis import analyze_combined
from creative_review.assets import AssetLibrary, filter_assets, score_band, status_variant
from creative_review.errors import AnalysisModelError, AnalysisValidationError, UploadInProgressError
from creative_review.media import encode_data_uri
from creative_review.schemas import CombinedAnalysisOutput
from creative_review.seed_data import DUMMY_ASSETS, seed_assets


def test_seed_set_is_valid_and_unique():
    ids = [a.id for a in DUMMY_ASSETS]
    sn_ids = [a.content_sn_id for a in DUMMY_ASSETS]
    assert len(set(ids)) == len(ids)
    assert len(set(sn_ids)) == len(sn_ids)
    unsafe = [a for a in DUMMY_ASSETS if a.brand_safety and not a.brand_safety.is_safe]
    assert unsafe and all(a.brand_safety.flags for a in unsafe)


def test_seed_assets_returns_independent_copies():
    first = seed_assets()
    first[0].name = "Changed"
    assert seed_assets()[0].name != "Changed"


class TestFilterAssets:
    def test_empty_filters_return_everything_in_order(self):
        assets = seed_assets()
        assert filter_assets(assets) == assets

    def test_search_matches_name_case_insensitively(self):
        result = filter_assets(seed_assets(), search_term="summer")
        assert [a.content_sn_id for a in result] == ["SN-2024-0001"]

    def test_search_matches_content_sn_id(self):
        result = filter_assets(seed_assets(), search_term="sn-2023")
        assert [a.name for a in result] == ["Legacy Catalog Spot"]

    def test_filters_compose_with_and(self):
        result = filter_assets(seed_assets(), search_term="", statuses=["New"], content_types=["Mixed"])
        assert [a.content_sn_id for a in result] == ["SN-2024-0007"]

    def test_status_filter_is_membership(self):
        result = filter_assets(seed_assets(), statuses=["Approved", "Rejected"])
        assert {a.status for a in result} == {"Approved", "Rejected"}

    def test_filtering_is_idempotent(self):
        once = filter_assets(seed_assets(), search_term="spot", statuses=["In Review", "New"])
        twice = filter_assets(once, search_term="spot", statuses=["In Review", "New"])
        assert once == twice

    def test_no_match_returns_empty(self):
        assert filter_assets(seed_assets(), search_term="does-not-exist") == []


@pytest.mark.parametrize(
    "score,band",
    [(82, "high"), (76, "high"), (75, "medium"), (50, "medium"), (49, "low"), (None, "unknown")],
)
def test_score_band(score, band):
    assert score_band(score) == band


def test_status_variant():
    assert status_variant("Picked Up") == "default"
    assert status_variant("Approved") == "secondary"
    assert status_variant("Rejected") == "destructive"
    assert status_variant("New") == "outline"


class TestAssetLibrary:
    def test_get_returns_none_for_unknown_id(self):
        library = AssetLibrary()
        assert library.get("missing") is None
        assert library.get_by_content_sn_id("SN-2024-0005").name == "Midnight Burger Promo"

    def test_upload_prepends_analyzed_asset(self, png_bytes, image_output):
        calls = []

        def analyzer(analysis_input):
            calls.append(analysis_input)
            return CombinedAnalysisOutput.model_validate(image_output)

        library = AssetLibrary()
        before = len(library)
        asset = library.upload("banner.png", png_bytes, analyzer=analyzer)

        assert len(calls) == 1
        assert calls[0].media.startswith("data:image/png;base64,")
        assert calls[0].manual_data.campaign_name is None
        assert calls[0].quantitative_data.detected_objects == []

        assert len(library) == before + 1
        assert library.assets[0] is asset
        assert asset.id.startswith("new-")
        assert re.fullmatch(r"NEW-ASSET-[A-Z0-9]{6}", asset.content_sn_id)
        assert asset.status == "New"
        assert asset.content_type == "Branded"
        assert asset.type == "Image"
        assert asset.tags == "AI Analyzed"
        assert asset.campaign == "New Campaign"
        assert asset.creation_date == date.today().isoformat()
        assert asset.brand == "Acme"
        assert library.busy is False

    def test_upload_type_follows_mime_prefix(self, analysis_output):
        library = AssetLibrary(assets=[])
        asset = library.upload(
            "spot.bin",
            b"\x00\x00\x00\x18ftypisom",
            mime_type="video/mp4",
            analyzer=lambda _: CombinedAnalysisOutput.model_validate(analysis_output),
        )
        assert asset.type == "Video"

    def test_image_upload_gets_data_uri_thumbnail(self, png_bytes, image_output):
        library = AssetLibrary(assets=[])
        asset = library.upload(
            "banner.png", png_bytes, analyzer=lambda _: CombinedAnalysisOutput.model_validate(image_output)
        )
        assert asset.thumbnail == encode_data_uri(png_bytes, "image/png")

    def test_video_upload_has_no_thumbnail(self, analysis_output):
        library = AssetLibrary(assets=[])
        asset = library.upload(
            "spot.mp4",
            b"\x00\x00\x00\x18ftypisom",
            mime_type="video/mp4",
            analyzer=lambda _: CombinedAnalysisOutput.model_validate(analysis_output),
        )
        assert asset.thumbnail is None

    def test_upload_rejects_format_contradicting_mime(self, png_bytes, analysis_output, fake_model, monkeypatch):
        model = fake_model(analysis_output)
        monkeypatch.setattr(
            "creative_review.assets.analyze_combined",
            lambda analysis_input: analyze_combined(analysis_input, call_model=model),
        )
        library = AssetLibrary()
        before = library.assets
        with pytest.raises(AnalysisValidationError):
            library.upload("banner.png", png_bytes)
        assert library.assets == before
        assert library.busy is False

    def test_failed_upload_adds_nothing_and_clears_busy(self, png_bytes):
        def analyzer(analysis_input):
            raise AnalysisModelError("model unavailable")

        library = AssetLibrary()
        before = library.assets
        with pytest.raises(AnalysisModelError):
            library.upload("banner.png", png_bytes, analyzer=analyzer)
        assert library.assets == before
        assert library.busy is False

    def test_upload_while_busy_is_rejected(self, png_bytes, image_output):
        library = AssetLibrary()
        nested_errors = []

        def analyzer(analysis_input):
            try:
                library.upload("second.png", png_bytes, analyzer=analyzer)
            except UploadInProgressError as exc:
                nested_errors.append(exc)
            return CombinedAnalysisOutput.model_validate(image_output)

        library.upload("first.png", png_bytes, analyzer=analyzer)
        assert len(nested_errors) == 1
        assert library.assets[0].name == "first.png"
        assert library.assets[1].name != "second.png"
