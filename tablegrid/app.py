#!/usr/bin/env python
"""
Streamlit Web UI for the Table Reconstruction Pipeline.

Run with:
    streamlit run tablegrid/app.py

Features:
- Upload a PDF with a text layer
- Page-by-page conversion with progress indicator
- Preview of the first extracted rows
- Download as xlsx, csv or json
"""

import sys
from pathlib import Path

# Add project root to path for imports when running as script
_root_dir = Path(__file__).parent.parent
if str(_root_dir) not in sys.path:
    sys.path.insert(0, str(_root_dir))

import streamlit as st
import tempfile
from typing import Optional

import logging
logging.getLogger('pdfminer').setLevel(logging.ERROR)

from tablegrid.config import GridConfig, ExportConfig, get_config


# Page config must be first Streamlit command
st.set_page_config(
    page_title="PDF to Excel",
    page_icon="📊",
    layout="wide",
    initial_sidebar_state="expanded"
)


def load_css():
    """Load custom CSS styles."""
    st.markdown("""
    <style>
    .main-header {
        font-size: 2.5rem;
        font-weight: bold;
        color: #16A34A;
        text-align: center;
        margin-bottom: 1rem;
    }
    .sub-header {
        font-size: 1.2rem;
        color: #888;
        text-align: center;
        margin-bottom: 2rem;
    }
    </style>
    """, unsafe_allow_html=True)


def init_session_state():
    """Initialize session state variables."""
    if "rows" not in st.session_state:
        st.session_state.rows = None
    if "source_name" not in st.session_state:
        st.session_state.source_name = None
    if "summary" not in st.session_state:
        st.session_state.summary = None


def render_sidebar() -> dict:
    """Render sidebar with settings."""
    st.sidebar.header("⚙️ Settings")

    defaults = get_config()

    st.sidebar.subheader("Text Layer")
    fragment_mode = st.sidebar.selectbox(
        "Fragment granularity",
        ["word", "line"],
        index=["word", "line"].index(defaults.source.fragment_mode),
        help="Word splits each text line at spaces; line keeps whole text lines"
    )

    st.sidebar.subheader("Column Detection")
    row_threshold = st.sidebar.number_input(
        "Row threshold",
        min_value=0.5,
        value=float(defaults.grid.row_threshold),
        step=0.5,
        help="Fragments closer than this vertically share a row"
    )
    gap_multiplier = st.sidebar.number_input(
        "Gap multiplier",
        min_value=1.0,
        value=float(defaults.grid.gap_multiplier),
        step=0.5,
        help="Cell boundary = median word gap x multiplier"
    )
    min_gap = st.sidebar.number_input(
        "Minimum cell gap",
        min_value=1.0,
        value=float(defaults.grid.min_gap_threshold),
        step=1.0,
        help="Absolute floor for the cell boundary gap"
    )

    return {
        "fragment_mode": fragment_mode,
        "grid": GridConfig(
            row_threshold=row_threshold,
            noise_floor=defaults.grid.noise_floor,
            gap_multiplier=gap_multiplier,
            min_gap_threshold=min_gap,
            default_median_gap=defaults.grid.default_median_gap,
        ),
        "source": defaults.source,
    }


def process_document(uploaded_file, settings) -> Optional[dict]:
    """Process the uploaded PDF."""
    from tablegrid.utils.assembler import TableAssembler
    from tablegrid.utils.errors import NoTabularTextError
    from tablegrid.utils.fragments import PdfFragmentSource

    try:
        with tempfile.TemporaryDirectory(prefix="tablegrid_") as temp_dir:
            input_path = Path(temp_dir) / uploaded_file.name
            with open(input_path, "wb") as f:
                f.write(uploaded_file.getbuffer())

            progress_bar = st.progress(0, text="Loading document...")

            def on_progress(done: int, total: int):
                progress_bar.progress(
                    done / total,
                    text=f"Analyzing page {done} of {total}..."
                )

            source_config = settings["source"]
            source_config.fragment_mode = settings["fragment_mode"]

            with PdfFragmentSource.from_config(input_path, source_config) as source:
                matrix = TableAssembler(settings["grid"]).process_document(
                    source,
                    source_file=uploaded_file.name,
                    progress_callback=on_progress
                )

            progress_bar.progress(1.0, text="Done")

        return {
            "rows": matrix.rows,
            "summary": matrix.metrics.to_dict(),
        }

    except NoTabularTextError as e:
        st.error(f"❌ {e}")
        st.info("Run OCR on the document first if it only contains scanned pages.")
    except Exception as e:
        st.error(f"❌ Conversion failed: {e}")
        logging.getLogger("tablegrid").exception("Conversion failed")

    return None


def render_preview(rows: list, limit: int):
    """Render the first rows as a table with generic column headers."""
    import pandas as pd
    from tablegrid.utils.export import pad_rows

    padded = pad_rows(rows[:limit])
    width = len(padded[0]) if padded else 0
    df = pd.DataFrame(padded, columns=[f"Col {i + 1}" for i in range(width)])
    st.dataframe(df, use_container_width=True, hide_index=True)

    col1, col2 = st.columns(2)
    with col1:
        st.caption(f"Previewing up to {limit} rows")
    with col2:
        st.caption(f"Total rows extracted: {len(rows)}")


def render_downloads(rows: list, source_name: str):
    """Render format selector and download button."""
    from tablegrid.utils.export import (
        CsvExporter, JsonExporter, WorkbookExporter, MIME_TYPES, output_name
    )

    export_config = ExportConfig()
    exporters = {
        "xlsx": WorkbookExporter(sheet_name=export_config.sheet_name),
        "csv": CsvExporter(delimiter=export_config.csv_delimiter),
        "json": JsonExporter(indent=export_config.json_indent),
    }

    fmt = st.radio(
        "Export format",
        list(exporters),
        format_func=str.upper,
        horizontal=True
    )

    try:
        data = exporters[fmt].to_bytes(rows)
    except ImportError as e:
        st.button(f"⬇️ Download .{fmt.upper()} ❌", disabled=True, help=str(e))
        return

    st.download_button(
        f"⬇️ Download .{fmt.upper()}",
        data,
        file_name=output_name(source_name, fmt),
        mime=MIME_TYPES[fmt],
        use_container_width=True,
        type="primary"
    )


def main():
    """Main application."""
    load_css()
    init_session_state()

    st.markdown('<h1 class="main-header">📊 PDF to Excel</h1>', unsafe_allow_html=True)
    st.markdown(
        '<p class="sub-header">Extract tables and data from PDF files to Excel spreadsheets</p>',
        unsafe_allow_html=True
    )

    settings = render_sidebar()

    st.markdown("---")

    uploaded_file = st.file_uploader(
        "Drop your PDF here",
        type=["pdf"],
        help="Best results with PDFs containing tables"
    )

    if uploaded_file:
        col1, col2 = st.columns([2, 1])

        with col1:
            st.info(f"📁 **{uploaded_file.name}** ({uploaded_file.size / 1024:.1f} KB)")

        with col2:
            convert_btn = st.button(
                "Convert to Excel",
                use_container_width=True,
                type="primary"
            )

        if convert_btn:
            with st.spinner("Analyzing document structure and extracting tables..."):
                result = process_document(uploaded_file, settings)

            if result:
                st.session_state.rows = result["rows"]
                st.session_state.summary = result["summary"]
                st.session_state.source_name = uploaded_file.name
                st.success("✅ Conversion complete!")

    if st.session_state.rows:
        st.markdown("---")
        st.subheader("Smart Data Preview")
        render_preview(st.session_state.rows, ExportConfig().preview_rows)

        with st.expander("Processing summary", expanded=False):
            st.json(st.session_state.summary)

        st.markdown("---")
        render_downloads(st.session_state.rows, st.session_state.source_name)

        if st.button("Convert another PDF"):
            st.session_state.rows = None
            st.session_state.summary = None
            st.session_state.source_name = None
            st.rerun()


if __name__ == "__main__":
    main()
