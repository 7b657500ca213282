"""Streamlit calculator."""
