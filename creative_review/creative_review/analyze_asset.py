"""
CLI for running the combined analysis on a local media file.

    python -m creative_review.analyze_asset ad.mp4 --campaign "Summer" --transcript "..."
    python -m creative_review.analyze_asset --test-asset
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from .analysis import analyze_combined, run_test_analysis
from .config import configure_logging, get_app_config
from .errors import AnalysisError
from .media import check_upload_size, file_to_data_uri
from .schemas import CombinedAnalysisInput, CombinedAnalysisOutput, ManualData, QuantitativeData

logger = logging.getLogger(__name__)


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run brand-safety and creative analysis on one asset.")
    parser.add_argument("path", nargs="?", help="Image, video or audio file to analyze.")
    parser.add_argument(
        "--test-asset",
        action="store_true",
        help="Analyze the configured TEST_ASSET_PATH image with a placeholder campaign.",
    )
    parser.add_argument("--campaign", help="Campaign name.")
    parser.add_argument("--agency", help="Creative agency name.")
    parser.add_argument("--platform", nargs="+", default=None, help="Platforms the ad aired on.")
    parser.add_argument("--endorsement", help="Endorsement type.")
    parser.add_argument("--narrator", help="Narrator type.")
    parser.add_argument("--transcript", help="Transcript text.")
    parser.add_argument("--shot-count", type=int, default=None, help="Number of shots.")
    parser.add_argument("--objects", nargs="+", default=None, help="Detected objects.")
    parser.add_argument("--mime-type", default=None, help="Override the detected MIME type.")
    args = parser.parse_args(argv)
    if not args.path and not args.test_asset:
        parser.error("a file path is required unless --test-asset is given")
    return args


def _build_input(args: argparse.Namespace) -> CombinedAnalysisInput:
    check_upload_size(os.path.getsize(args.path), get_app_config().max_upload_mb)
    return CombinedAnalysisInput(
        media=file_to_data_uri(args.path, mime_type=args.mime_type),
        manual_data=ManualData(
            campaign_name=args.campaign,
            creative_agency_name=args.agency,
            platform_aired=args.platform or [],
            endorsement_type=args.endorsement,
            narrator_type=args.narrator,
        ),
        quantitative_data=QuantitativeData(
            transcript=args.transcript,
            shot_count=args.shot_count,
            detected_objects=args.objects or [],
        ),
    )


def _run(args: argparse.Namespace) -> CombinedAnalysisOutput:
    if args.test_asset:
        return run_test_analysis(get_app_config().test_asset_path)
    return analyze_combined(_build_input(args))


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    configure_logging()
    try:
        result = _run(args)
    except (AnalysisError, OSError) as exc:
        logger.error("Analysis failed: %s", exc)
        return 1
    print(result.model_dump_json(by_alias=True, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
