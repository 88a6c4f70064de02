"""Komponen Streamlit."""
