import pytest
from fastapi.testclient import TestClient

from backend import main
from creative_review.errors import AnalysisModelError, AnalysisValidationError
from creative_review.media import encode_data_uri
from creative_review.schemas import CombinedAnalysisOutput


@pytest.fixture
def client():
    return TestClient(main.app)


def test_status(client, monkeypatch):
    monkeypatch.setenv("GOOGLE_API_KEY", "g-test")
    monkeypatch.delenv("ANALYZER_PROVIDER", raising=False)

    body = client.get("/api/status").json()
    assert body["status"] == "online"
    assert body["version"] == main.API_VERSION
    assert body["analyzer"]["configured"] is True


def test_list_assets_with_filters(client):
    everything = client.get("/api/assets").json()
    assert len(everything) == len(main.library)
    assert "contentSnId" in everything[0]

    filtered = client.get(
        "/api/assets", params=[("status", "Approved"), ("status", "Rejected"), ("content_type", "Branded")]
    ).json()
    assert [a["contentSnId"] for a in filtered] == ["SN-2024-0001"]

    searched = client.get("/api/assets", params={"search": "burger"}).json()
    assert [a["name"] for a in searched] == ["Midnight Burger Promo"]


def test_get_asset(client):
    asset = main.library.assets[0]
    response = client.get(f"/api/assets/{asset.id}")
    assert response.status_code == 200
    assert response.json()["contentSnId"] == asset.content_sn_id


def test_get_asset_not_found(client):
    response = client.get("/api/assets/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"error": "Asset not found"}


class TestCombinedAnalysis:
    def _body(self, png_bytes):
        return {"media": encode_data_uri(png_bytes, "image/png"), "manualData": {"campaignName": "Launch"}}

    def test_success(self, client, monkeypatch, png_bytes, image_output):
        seen = []

        def fake_analyze(analysis_input):
            seen.append(analysis_input)
            return CombinedAnalysisOutput.model_validate(image_output)

        monkeypatch.setattr(main, "analyze_combined", fake_analyze)
        response = client.post("/api/flows/combined-analysis", json=self._body(png_bytes))

        assert response.status_code == 200
        assert response.json()["analysis"]["mediaFormat"] == "Image"
        assert seen[0].manual_data.campaign_name == "Launch"

    def test_invalid_media_is_400(self, client):
        response = client.post("/api/flows/combined-analysis", json={"media": "https://example.com/ad.png"})
        assert response.status_code == 400
        assert response.json()["error"] == "invalid_media"

    def test_missing_media_is_rejected(self, client):
        response = client.post("/api/flows/combined-analysis", json={})
        assert response.status_code == 422

    def test_model_failure_is_502(self, client, monkeypatch, png_bytes):
        def fake_analyze(analysis_input):
            raise AnalysisModelError("quota exceeded", provider="google")

        monkeypatch.setattr(main, "analyze_combined", fake_analyze)
        response = client.post("/api/flows/combined-analysis", json=self._body(png_bytes))

        assert response.status_code == 502
        assert response.json() == {"error": "model_call_failed", "details": "quota exceeded"}

    def test_schema_failure_is_422(self, client, monkeypatch, png_bytes):
        def fake_analyze(analysis_input):
            raise AnalysisValidationError("Model output did not match the analysis schema (1 error(s)).")

        monkeypatch.setattr(main, "analyze_combined", fake_analyze)
        response = client.post("/api/flows/combined-analysis", json=self._body(png_bytes))

        assert response.status_code == 422
        assert response.json()["error"] == "schema_validation_failed"


    def test_oversized_media_is_400_before_analysis(self, client, monkeypatch):
        monkeypatch.setenv("MAX_UPLOAD_MB", "1")
        called = []
        monkeypatch.setattr(main, "analyze_combined", lambda analysis_input: called.append(analysis_input))
        big = encode_data_uri(b"\x00" * (1024 * 1024 + 1), "video/mp4")

        response = client.post("/api/flows/combined-analysis", json={"media": big})

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_media"
        assert "limit is 1 MB" in response.json()["details"]
        assert called == []


def test_test_analysis_failure_is_500(client, monkeypatch, tmp_path):
    monkeypatch.setenv("TEST_ASSET_PATH", str(tmp_path / "missing.png"))

    response = client.get("/api/test-analysis")

    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "Failed to run test analysis."
    assert "missing.png" in body["details"]


def test_test_analysis_success(client, monkeypatch, image_output):
    monkeypatch.setattr(
        main, "run_test_analysis", lambda path: CombinedAnalysisOutput.model_validate(image_output)
    )
    response = client.get("/api/test-analysis")
    assert response.status_code == 200
    assert response.json()["brand"] == "Acme"


def test_platforms(client):
    names = [p["name"] for p in client.get("/api/platforms").json()]
    assert names == ["Google Ads", "Meta Ads", "TikTok Ads", "LinkedIn Ads"]


class TestPublish:
    def test_publish_success(self, client, monkeypatch):
        monkeypatch.setenv("PUBLISH_DELAY_SECONDS", "0")
        asset = main.library.assets[0]

        response = client.post("/api/publish", json={"asset_id": asset.id, "platform": "Meta Ads"})

        assert response.status_code == 200
        assert response.json()["platform_id"] == "meta-ads"

    def test_publish_missing_platform_is_400(self, client):
        asset = main.library.assets[0]
        response = client.post("/api/publish", json={"asset_id": asset.id})
        assert response.status_code == 400
        assert "Missing Information" in response.json()["details"]

    def test_publish_missing_asset_id_is_400(self, client):
        response = client.post("/api/publish", json={"platform": "Meta Ads"})
        assert response.status_code == 400

    def test_publish_unknown_asset_is_404(self, client):
        response = client.post("/api/publish", json={"asset_id": "nope", "platform": "Meta Ads"})
        assert response.status_code == 404

    def test_publish_by_content_sn_id(self, client, monkeypatch):
        monkeypatch.setenv("PUBLISH_DELAY_SECONDS", "0")

        response = client.post("/api/publish", json={"content_sn_id": "SN-2024-0005", "platform": "TikTok Ads"})

        assert response.status_code == 200
        assert response.json()["content_sn_id"] == "SN-2024-0005"

    def test_publish_unknown_content_sn_id_is_404(self, client):
        response = client.post("/api/publish", json={"content_sn_id": "SN-0000-0000", "platform": "Meta Ads"})
        assert response.status_code == 404
