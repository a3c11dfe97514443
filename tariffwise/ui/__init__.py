"""Streamlit views, one module per dashboard panel."""
