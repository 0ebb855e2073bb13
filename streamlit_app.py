"""
Brick Mosaic — Studio Edition

Run with:
    streamlit run streamlit_app.py
"""

from __future__ import annotations

import io
import time

import numpy as np
import streamlit as st
from PIL import Image, ImageDraw

from brick_mosaic.catalog import CATALOGS
from brick_mosaic.config import MosaicConfig
from brick_mosaic.errors import BrickMosaicError
from brick_mosaic.image_io import compute_target_size
from brick_mosaic.pipeline import build_panel
from brick_mosaic.renderer import render
from brick_mosaic.report import bill_of_materials, format_bom

# -- Page config -------------------------------------------------------
st.set_page_config(
    page_title="Brick Mosaic",
    page_icon=None,
    layout="wide",
    initial_sidebar_state="collapsed",
)

_DEFAULTS = MosaicConfig()

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
        padding-bottom: 4rem;
    }
    .studio-title {
        font-family: 'Georgia', serif;
        font-size: 2.6rem;
        font-weight: 300;
        text-align: center;
        border-bottom: 1px solid #1a1a1a;
        padding-bottom: 0.6rem;
        margin-bottom: 0.5rem;
    }
    .studio-subtitle {
        font-size: 0.8rem;
        font-weight: 300;
        line-height: 1.8;
        margin-bottom: 2.5rem;
    }
    .label-detail {
        font-size: 0.75rem;
        color: #888;
        text-align: center;
        letter-spacing: 0.04em;
    }
    #MainMenu {visibility: hidden;}
    footer {visibility: hidden;}
    header {visibility: hidden;}
</style>
""", unsafe_allow_html=True)


# -- Helpers -----------------------------------------------------------

def _add_passepartout(img: Image.Image, border: int = 20) -> Image.Image:
    w, h = img.size
    bg = (250, 249, 246)
    canvas = Image.new("RGB", (w + border * 2, h + border * 2), bg)
    canvas.paste(img, (border, border))
    draw = ImageDraw.Draw(canvas)
    draw.rectangle(
        [border - 1, border - 1, border + w, border + h],
        outline=(224, 222, 216), width=1,
    )
    return canvas


# -- Title -------------------------------------------------------------
st.markdown('<div class="studio-title">Brick Mosaic</div>', unsafe_allow_html=True)
st.markdown(
    '<div class="studio-subtitle">'
    "Upload an image and it is rebuilt from real brick colours. Every cell is "
    "snapped to the nearest catalog colour, then covered greedily with the "
    "largest brick that fits inside a single colour patch. Download the "
    "rendered mosaic and the list of bricks you need to build it."
    "</div>",
    unsafe_allow_html=True,
)

# -- Controls ----------------------------------------------------------
ctrl1, ctrl2, ctrl3 = st.columns(3)
with ctrl1:
    width = st.slider("Width (bricks)", 8, 128, _DEFAULTS.width)
    catalog_name = st.selectbox(
        "Catalog", list(CATALOGS), index=list(CATALOGS).index(_DEFAULTS.catalog),
    )
with ctrl2:
    scale = st.slider("Pixels per brick", 2, 24, _DEFAULTS.scale)
    color_space = st.radio("Colour distance", ["rgb", "lab"], horizontal=True)
with ctrl3:
    dither = st.toggle("Dithering", value=_DEFAULTS.dither)
    outline = st.toggle("Brick outlines", value=_DEFAULTS.outline)

catalog = CATALOGS[catalog_name]

st.markdown("---")

# -- Upload ------------------------------------------------------------
uploaded = st.file_uploader(
    "Select artwork", type=["jpg", "jpeg", "png", "webp", "bmp", "gif"],
)

if uploaded is not None:
    st.session_state.uploaded_data = uploaded.getvalue()
elif "uploaded_data" not in st.session_state:
    st.session_state.uploaded_data = None

if st.session_state.uploaded_data is not None:
    original = Image.open(io.BytesIO(st.session_state.uploaded_data)).convert("RGB")
    w, h = compute_target_size(original.width, original.height, width)
    target = np.array(original.resize((w, h), Image.LANCZOS), dtype=np.uint8)

    if st.button("BUILD", type="primary", use_container_width=True):
        t0 = time.perf_counter()
        try:
            grid, panel = build_panel(
                target, catalog, dither=dither, color_space=color_space,
            )
        except BrickMosaicError as exc:
            st.error(str(exc))
            st.stop()
        elapsed = time.perf_counter() - t0

        mosaic = render(panel, scale, outline)
        lines = bill_of_materials(panel, catalog)

        st.image(_add_passepartout(mosaic, border=28), use_container_width=True)

        buf = io.BytesIO()
        mosaic.save(buf, format="PNG")
        dl1, dl2 = st.columns(2)
        with dl1:
            st.download_button(
                "SAVE MOSAIC",
                data=buf.getvalue(),
                file_name="brick_mosaic.png",
                mime="image/png",
                use_container_width=True,
            )
        with dl2:
            st.download_button(
                "SAVE PARTS LIST",
                data=format_bom(lines, "csv"),
                file_name="brick_mosaic_bom.csv",
                mime="text/csv",
                use_container_width=True,
            )

        m1, m2, m3, m4 = st.columns(4)
        m1.metric("Grid", f"{w} × {h}")
        m2.metric("Bricks", f"{len(panel):,}")
        m3.metric("Kinds", f"{len(lines)}")
        m4.metric("Time", f"{elapsed:.1f} s")

        st.markdown("")
        doc1, doc2 = st.columns(2)
        with doc1:
            st.image(
                _add_passepartout(
                    Image.fromarray(grid.to_rgb()).resize((w * scale, h * scale), Image.NEAREST),
                    border=12,
                ),
                use_container_width=True,
            )
            st.markdown('<div class="label-detail">Quantised</div>', unsafe_allow_html=True)
        with doc2:
            st.dataframe(
                [
                    {
                        "Shape": str(line.piece.shape),
                        "Colour": line.piece.color.name,
                        "Count": line.count,
                    }
                    for line in lines
                ],
                use_container_width=True,
                hide_index=True,
            )
    else:
        prev1, prev2 = st.columns(2)
        with prev1:
            st.image(original, use_container_width=True)
            st.markdown('<div class="label-detail">Source</div>', unsafe_allow_html=True)
        with prev2:
            st.image(
                Image.fromarray(target).resize((w * scale, h * scale), Image.NEAREST),
                use_container_width=True,
            )
            st.markdown(
                f'<div class="label-detail">{w} &times; {h}</div>',
                unsafe_allow_html=True,
            )
else:
    st.markdown(
        '<p style="color: #bbb; font-style: italic; margin-top: 2rem;">'
        "Select an artwork to begin.</p>",
        unsafe_allow_html=True,
    )
