import logging
from pathlib import Path

import dotenv
import streamlit as st

from creative_review import config as cr_config
from creative_review.analysis import run_test_analysis
from creative_review.assets import AssetLibrary, score_band, status_variant
from creative_review.errors import (
    AnalysisError,
    OverrideError,
    PublishError,
    UploadInProgressError,
)
from creative_review.media import check_upload_size, parse_data_uri
from creative_review.overrides import AssetReviewForm
from creative_review.publish import PLATFORMS, publish_asset
from creative_review.schemas import ALL_CONTENT_TYPES, ALL_STATUSES

# --- Config & Setup ---
st.set_page_config(
    page_title="Creative Review",
    page_icon="🎬",
    layout="wide",
    initial_sidebar_state="expanded",
)

ENV_PATH = Path(".env")

logger = logging.getLogger("dashboard")

SCORE_BADGES = {"high": "🟢", "medium": "🟡", "low": "🔴", "unknown": "⚪"}
STATUS_BADGES = {"default": "🔵", "secondary": "✅", "destructive": "⛔", "outline": "▫️"}
TYPE_ICONS = {"Video": "🎞️", "Image": "🖼️", "Audio": "🎧"}


def load_env_vars():
    """Reload environment variables from file."""
    dotenv.load_dotenv(ENV_PATH, override=True)
    cr_config.clear_config_caches()


def init_session_state():
    """Per-viewer state: the asset library, open review forms, publish history."""
    if "library" not in st.session_state:
        st.session_state.library = AssetLibrary()
    if "review_forms" not in st.session_state:
        st.session_state.review_forms = {}
    if "selected_asset_id" not in st.session_state:
        st.session_state.selected_asset_id = None
    if "publish_history" not in st.session_state:
        st.session_state.publish_history = []


def get_review_form(asset):
    forms = st.session_state.review_forms
    if asset.id not in forms:
        forms[asset.id] = AssetReviewForm(asset)
    return forms[asset.id]


def clear_widget_state(asset_id: str):
    """Drop widget values for an asset so controls re-read the form after a reset."""
    prefix = f"ovr::{asset_id}::"
    for key in [k for k in st.session_state.keys() if str(k).startswith(prefix)]:
        del st.session_state[key]


def asset_label(asset) -> str:
    return f"{asset.name or 'Untitled'} ({asset.content_sn_id})"


# --- Sidebar ---
load_env_vars()
init_session_state()
app_cfg = cr_config.get_app_config()

st.sidebar.title("🎬 Creative Review")
st.sidebar.subheader("System Status")
analyzer = cr_config.describe_active_models()
if analyzer["configured"]:
    st.sidebar.success(f"✅ Analyzer: {analyzer['provider']} / {analyzer['model']}")
else:
    st.sidebar.error(f"❌ Analyzer not configured: {analyzer['error']}")

st.sidebar.caption(f"{len(st.session_state.library)} assets in this session")

with st.sidebar.expander("🧪 Test Analysis"):
    st.caption(f"Runs the analyzer on `{app_cfg.test_asset_path}`.")
    if st.button("Run Test Analysis", disabled=not analyzer["configured"]):
        with st.spinner("Analyzing test asset..."):
            try:
                result = run_test_analysis(app_cfg.test_asset_path)
            except (AnalysisError, OSError) as e:
                logger.error(f"Error running test analysis: {e}")
                st.error(f"Failed to run test analysis: {e}")
            else:
                st.json(result.model_dump(by_alias=True))


# --- Main Tabs ---
tab_library, tab_review, tab_publish = st.tabs(["📚 Asset Library", "🔍 Review & Override", "🚀 Publish"])

# ==============================================================================
# TAB 1: ASSET LIBRARY
# ==============================================================================
with tab_library:
    library = st.session_state.library

    st.header("Asset Library")

    with st.expander("⬆️ Upload Asset", expanded=False):
        uploaded = st.file_uploader(
            "Image, video or audio file (any type)",
        )
        if st.button("Analyze & Add", type="primary", disabled=uploaded is None or library.busy):
            data = uploaded.getvalue()
            try:
                check_upload_size(len(data), app_cfg.max_upload_mb)
                with st.spinner(f"Analyzing {uploaded.name}..."):
                    new_asset = library.upload(uploaded.name, data, mime_type=uploaded.type or None)
            except UploadInProgressError as e:
                st.warning(str(e))
            except AnalysisError as e:
                st.error(f"Analysis Failed: {e}")
            else:
                st.toast(f"Analysis Complete: {new_asset.name} added as {new_asset.content_sn_id}", icon="✅")
                st.session_state.selected_asset_id = new_asset.id

    filter_col1, filter_col2, filter_col3 = st.columns([2, 2, 2])
    with filter_col1:
        search_term = st.text_input("Search", placeholder="Name or Content SN ID")
    with filter_col2:
        status_filter = st.multiselect("Status", ALL_STATUSES)
    with filter_col3:
        content_type_filter = st.multiselect("Content Type", ALL_CONTENT_TYPES)

    visible = library.filter(search_term, status_filter, content_type_filter)
    st.caption(f"Showing {len(visible)} of {len(library)} assets")

    if not visible:
        st.info("No assets match the current filters.")

    for asset in visible:
        with st.container(border=True):
            cols = st.columns([1, 3, 2, 2, 1, 1])
            with cols[0]:
                if asset.thumbnail and asset.thumbnail.startswith("data:"):
                    st.image(parse_data_uri(asset.thumbnail).data, width=80)
                elif asset.thumbnail:
                    st.image(asset.thumbnail, width=80)
                else:
                    st.markdown(f"### {TYPE_ICONS.get(asset.type, '📄')}")
            with cols[1]:
                st.markdown(f"**{asset.name or 'Untitled'}**")
                st.caption(f"{asset.content_sn_id} · {asset.type} · {asset.length or 'N/A'}")
                if asset.campaign:
                    st.caption(f"Campaign: {asset.campaign}")
            with cols[2]:
                st.markdown(f"{STATUS_BADGES[status_variant(asset.status)]} {asset.status}")
                st.caption(asset.content_type)
            with cols[3]:
                band = score_band(asset.content_score)
                score_text = asset.content_score if asset.content_score is not None else "N/A"
                st.markdown(f"{SCORE_BADGES[band]} Score: {score_text}")
                if asset.roas is not None:
                    st.caption(f"ROAS {asset.roas:.1f}x")
            with cols[4]:
                if asset.brand_safety is not None:
                    st.markdown("🛡️ Safe" if asset.brand_safety.is_safe else "⚠️ Flagged")
            with cols[5]:
                if st.button("Review", key=f"review::{asset.id}"):
                    st.session_state.selected_asset_id = asset.id
                    st.toast(f"Open the Review tab to edit {asset.content_sn_id}")

# ==============================================================================
# TAB 2: REVIEW & OVERRIDE
# ==============================================================================
with tab_review:
    library = st.session_state.library
    all_assets = library.assets
    ids = [a.id for a in all_assets]

    st.header("Review & Override")

    default_idx = ids.index(st.session_state.selected_asset_id) if st.session_state.selected_asset_id in ids else 0
    selected_id = st.selectbox(
        "Asset",
        ids,
        index=default_idx,
        format_func=lambda asset_id: asset_label(library.get(asset_id)),
    )
    asset = library.get(selected_id) if selected_id else None

    if asset is None:
        st.info("Asset not found.")
    else:
        st.session_state.selected_asset_id = asset.id
        form = get_review_form(asset)

        meta_cols = st.columns(4)
        meta_cols[0].metric("Content Score", asset.content_score if asset.content_score is not None else "N/A")
        meta_cols[1].metric("ROAS", f"{asset.roas:.1f}x" if asset.roas is not None else "N/A")
        meta_cols[2].metric("Status", asset.status)
        meta_cols[3].metric("Type", asset.type)

        with st.expander("Asset Details"):
            st.write(f"**Creator:** {asset.creator or 'N/A'}")
            st.write(f"**Campaign:** {asset.campaign or 'N/A'}")
            st.write(f"**Tags:** {asset.tags or 'N/A'}")
            st.write(f"**Created:** {asset.creation_date or 'N/A'} · **Daypart:** {asset.daypart or 'N/A'} · **Spot Length:** {asset.spot_length or 'N/A'}")

        fields = form.fields()
        if asset.analysis is None:
            st.info("This asset has not been analyzed yet; only identification fields are available.")

        current_section = None
        for field in fields:
            if field.section != current_section:
                current_section = field.section
                st.subheader(current_section)

            key = f"ovr::{asset.id}::{field.path}"
            current = form.get_value(field.path)

            if field.kind == "text":
                new_value = st.text_input(field.label, value=current or "", key=key)
            elif field.kind == "textarea":
                new_value = st.text_area(field.label, value=current or "", key=key)
            elif field.kind == "boolean":
                new_value = st.checkbox(field.label, value=bool(current), key=key)
            elif field.kind == "select":
                options = list(field.choices)
                new_value = st.selectbox(
                    field.label, options, index=options.index(current) if current in options else 0, key=key
                )
            elif field.kind == "slider":
                new_value = st.slider(field.label, min(field.choices), max(field.choices), value=int(current), key=key)
            else:
                new_value = st.text_input(
                    f"{field.label} (comma-separated)", value=", ".join(current or []), key=key
                )

            reasoning = form.ai_reasoning(field.path)
            if reasoning:
                st.caption(f"AI reasoning: {reasoning}")

            if field.kind == "text" and current is None and new_value == "":
                continue
            try:
                if field.kind == "tags":
                    if [t.strip() for t in new_value.split(",") if t.strip()] != (current or []):
                        form.set_value(field.path, new_value)
                elif new_value != current:
                    form.set_value(field.path, new_value)
            except OverrideError as e:
                st.error(str(e))

        if form.ml_ready_features is not None:
            with st.expander("ML-Ready Features"):
                st.json(form.ml_ready_features)

        st.divider()
        if form.is_dirty:
            st.warning(f"{len(form.changes())} unsaved override(s)")

        btn_col1, btn_col2 = st.columns([1, 1])
        with btn_col1:
            if st.button("💾 Save Overrides", type="primary", disabled=not form.is_dirty):
                saved = form.save()
                st.success(f"Saved {len(saved)} override(s).")
        with btn_col2:
            if st.button("↩️ Reset", disabled=not form.is_dirty):
                form.reset()
                clear_widget_state(asset.id)
                st.rerun()

# ==============================================================================
# TAB 3: PUBLISH
# ==============================================================================
with tab_publish:
    library = st.session_state.library

    st.header("Publish to Ad Platform")
    st.caption("Publishing is simulated; nothing is sent to the platform.")

    with st.form("publish_form"):
        ids = [""] + [a.id for a in library.assets]
        publish_asset_id = st.selectbox(
            "Asset",
            ids,
            format_func=lambda asset_id: asset_label(library.get(asset_id)) if asset_id else "Select an asset",
        )
        platform_names = [""] + [p["name"] for p in PLATFORMS]
        publish_platform = st.selectbox(
            "Platform", platform_names, format_func=lambda name: name or "Select a platform"
        )
        submitted = st.form_submit_button("🚀 Publish")

    if submitted:
        try:
            with st.spinner("Publishing..."):
                receipt = publish_asset(library.get(publish_asset_id) if publish_asset_id else None, publish_platform)
        except PublishError as e:
            st.error(str(e))
        else:
            st.session_state.publish_history.insert(0, receipt)
            st.success(receipt.message)

    if st.session_state.publish_history:
        st.subheader("Publish History")
        for receipt in st.session_state.publish_history:
            st.write(f"**{receipt.platform_name}** · {receipt.asset_name or receipt.content_sn_id} · {receipt.published_at}")
