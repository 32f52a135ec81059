from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from typing import List, Optional
import logging

import sentry_sdk

from creative_review.analysis import analyze_combined, run_test_analysis
from creative_review.assets import AssetLibrary
from creative_review.config import configure_logging, describe_active_models, get_app_config
from creative_review.errors import (
    AnalysisError,
    AnalysisModelError,
    AnalysisValidationError,
    InvalidMediaError,
    PublishError,
)
from creative_review.media import check_upload_size, parse_data_uri
from creative_review.publish import PLATFORMS, publish_asset
from creative_review.schemas import CombinedAnalysisInput

API_VERSION = "1.0.0"

# Configure logging
configure_logging()
logger = logging.getLogger("api")

_app_config = get_app_config()

if _app_config.sentry_dsn:
    sentry_sdk.init(
        dsn=_app_config.sentry_dsn,
        environment=_app_config.sentry_environment,
        release=f"creative-review-api@{API_VERSION}",
        traces_sample_rate=0.1,
    )
    logger.info("Sentry error tracking initialized")
else:
    logger.debug("SENTRY_DSN not set - error tracking disabled")

app = FastAPI(
    title="Creative Review API",
    description="Brand-safety and creative analysis for advertising assets",
    version=API_VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_app_config.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Seed library shared by this process; uploads happen in the dashboard session.
library = AssetLibrary()

_ANALYSIS_STATUS_CODES = {
    InvalidMediaError: 400,
    AnalysisValidationError: 422,
    AnalysisModelError: 502,
}

# --- Models ---

class PublishRequest(BaseModel):
    asset_id: Optional[str] = None
    content_sn_id: Optional[str] = None
    platform: Optional[str] = None


def _error(status_code: int, error: str, details: Optional[str] = None) -> JSONResponse:
    body = {"error": error}
    if details is not None:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body)


def _analysis_error_response(exc: AnalysisError) -> JSONResponse:
    status_code = _ANALYSIS_STATUS_CODES.get(type(exc), 500)
    return _error(status_code, exc.kind, str(exc))

# --- Endpoints ---

@app.get("/api/status")
async def get_status():
    """System health check"""
    return {"status": "online", "version": API_VERSION, "analyzer": describe_active_models()}


@app.get("/api/assets")
async def list_assets(
    search: str = "",
    status: List[str] = Query(default=[]),
    content_type: List[str] = Query(default=[]),
):
    """List library assets, filtered by search term, status and content type"""
    assets = library.filter(search_term=search, statuses=status, content_types=content_type)
    return [asset.model_dump(by_alias=True) for asset in assets]


@app.get("/api/assets/{asset_id}")
async def get_asset(asset_id: str):
    """Get one asset by id"""
    asset = library.get(asset_id)
    if asset is None:
        return _error(404, "Asset not found")
    return asset.model_dump(by_alias=True)


@app.post("/api/flows/combined-analysis")
def combined_analysis(request: CombinedAnalysisInput):
    """Run the combined brand-safety and creative analysis on one media payload"""
    try:
        payload = parse_data_uri(request.media)
        check_upload_size(payload.size_bytes, get_app_config().max_upload_mb)
        result = analyze_combined(request)
    except AnalysisError as e:
        logger.error(f"Combined analysis failed ({e.kind}): {e}")
        if not isinstance(e, InvalidMediaError):
            sentry_sdk.capture_exception(e)
        return _analysis_error_response(e)
    return result.model_dump(by_alias=True)


@app.get("/api/test-analysis")
def get_test_analysis():
    """Analyze the bundled test image"""
    try:
        result = run_test_analysis(get_app_config().test_asset_path)
    except (AnalysisError, OSError) as e:
        logger.error(f"Error running test analysis: {e}")
        sentry_sdk.capture_exception(e)
        return _error(500, "Failed to run test analysis.", str(e))
    return result.model_dump(by_alias=True)


@app.get("/api/platforms")
async def list_platforms():
    """Ad platforms available for publishing"""
    return PLATFORMS


@app.post("/api/publish")
def publish(request: PublishRequest):
    """Simulate publishing an asset to an ad platform"""
    asset = None
    if request.asset_id:
        asset = library.get(request.asset_id)
    elif request.content_sn_id:
        asset = library.get_by_content_sn_id(request.content_sn_id)
    if (request.asset_id or request.content_sn_id) and asset is None:
        return _error(404, "Asset not found")
    try:
        receipt = publish_asset(asset, request.platform)
    except PublishError as e:
        logger.warning(f"Publish rejected: {e}")
        return _error(400, "Publish rejected", str(e))
    return receipt.to_dict()
