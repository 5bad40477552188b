"""
Pixel Remix — web front end

Run with:
    streamlit run streamlit_app.py
"""

from __future__ import annotations

import io

import numpy as np
import streamlit as st
from PIL import Image

from pixel_remix.color_utils import mean_error, perceptual_error
from pixel_remix.config import RemixConfig
from pixel_remix.engine import RemixEngine
from pixel_remix.errors import RemixError
from pixel_remix.image_io import compute_target_size, resize_rgba

# -- Page config -------------------------------------------------------
st.set_page_config(
    page_title="Pixel Remix",
    page_icon=None,
    layout="wide",
    initial_sidebar_state="collapsed",
)

_DEFAULTS = RemixConfig()
_GRID_SIZES = [16, 32, 48, 64, 96, 128]

# -- CSS ---------------------------------------------------------------
st.markdown("""
<style>
    .stApp {
        background-color: #faf9f6;
        color: #2a2a2a;
        font-family: 'Inter', 'Helvetica Neue', sans-serif;
    }
    .block-container {
        max-width: 1000px;
        padding-top: 3.5rem;
    }
    .remix-title {
        font-family: 'Georgia', serif;
        font-size: 2.6rem;
        font-weight: 300;
        text-align: center;
        border-bottom: 1px solid #1a1a1a;
        padding-bottom: 0.6rem;
        margin-bottom: 0.5rem;
    }
    .remix-subtitle {
        font-size: 0.8rem;
        font-weight: 300;
        line-height: 1.8;
        margin-bottom: 2.5rem;
    }
    .label-detail {
        text-align: center;
        font-size: 0.75rem;
        color: #777;
    }
    #MainMenu {visibility: hidden;}
    footer {visibility: hidden;}
</style>
""", unsafe_allow_html=True)


def _engine() -> RemixEngine:
    # one engine per browser session: a second click while a run is active
    # is rejected instead of starting a parallel run
    if "engine" not in st.session_state:
        st.session_state.engine = RemixEngine(_DEFAULTS)
    return st.session_state.engine


def _open(uploaded) -> Image.Image | None:
    if uploaded is None:
        return None
    return Image.open(io.BytesIO(uploaded.getvalue()))


def _upscaled(pixels: np.ndarray, w: int, h: int, upscale: int) -> Image.Image:
    return Image.fromarray(pixels.reshape(h, w, 4)).resize(
        (w * upscale, h * upscale), Image.NEAREST,
    )


# -- Title -------------------------------------------------------------
st.markdown('<div class="remix-title">Pixel Remix</div>', unsafe_allow_html=True)
st.markdown(
    '<div class="remix-subtitle">'
    "Upload a photo and a target. Every pixel of your photo is kept, only "
    "moved, so that together they reproduce the target. The heuristic mode "
    "searches a window of unused pixels for each position; raise the quality "
    "to widen that window. Exact mode computes the optimal arrangement and "
    "is limited to small grids."
    "</div>",
    unsafe_allow_html=True,
)

# -- Controls ----------------------------------------------------------
c1, c2, c3 = st.columns(3)
with c1:
    grid_size = st.selectbox(
        "Grid size", _GRID_SIZES, index=_GRID_SIZES.index(_DEFAULTS.grid_size),
    )
with c2:
    quality = st.slider("Quality", 0, 100, _DEFAULTS.quality)
with c3:
    mode = st.radio("Mode", ["heuristic", "exact"], horizontal=True)
upscale = st.slider("Upscale", 2, 16, _DEFAULTS.pixel_upscale)

st.markdown("---")

# -- Upload ------------------------------------------------------------
u1, u2 = st.columns(2)
with u1:
    source_file = st.file_uploader(
        "Source photo", type=["jpg", "jpeg", "png", "webp", "bmp", "jfif"],
    )
with u2:
    target_file = st.file_uploader(
        "Target image", type=["jpg", "jpeg", "png", "webp", "bmp", "jfif"],
    )

source_img = _open(source_file)
target_img = _open(target_file)

if source_img is None or target_img is None:
    st.markdown(
        '<p style="color: #bbb; font-style: italic; margin-top: 2rem;">'
        "Select a source photo and a target image to begin.</p>",
        unsafe_allow_html=True,
    )
    st.stop()

w, h = compute_target_size(target_img.width, target_img.height, grid_size)
source = resize_rgba(source_img, (w, h))
target = resize_rgba(target_img, (w, h))

p1, p2 = st.columns(2)
with p1:
    st.image(_upscaled(source, w, h, upscale), use_container_width=True)
    st.markdown('<div class="label-detail">Source</div>', unsafe_allow_html=True)
with p2:
    st.image(_upscaled(target, w, h, upscale), use_container_width=True)
    st.markdown(
        f'<div class="label-detail">Target {w} &times; {h}</div>',
        unsafe_allow_html=True,
    )

if st.button("REMIX", type="primary", use_container_width=True):
    bar = st.progress(0.0, text="Rearranging …")
    try:
        result = _engine().run(
            source, target, quality=quality, mode=mode,
            on_progress=lambda f: bar.progress(f, text=f"Rearranging … {f:.0%}"),
        )
    except RemixError as exc:
        bar.empty()
        st.error(str(exc))
        st.stop()
    bar.empty()

    out = _upscaled(result.pixels, w, h, upscale)
    st.image(out, use_container_width=True)

    buf = io.BytesIO()
    out.save(buf, format="PNG")
    st.download_button(
        "DOWNLOAD",
        data=buf.getvalue(),
        file_name=f"pixel_remix_{w}x{h}_{result.mode}.png",
        mime="image/png",
        use_container_width=True,
    )

    m1, m2, m3, m4 = st.columns(4)
    m1.metric("Pixels", f"{w * h:,}")
    m2.metric("Time", f"{result.elapsed:.1f} s")
    m3.metric("Avg Error", f"{mean_error(target, result.pixels):.1f}")
    m4.metric("Avg ΔE", f"{perceptual_error(target, result.pixels):.1f}")
