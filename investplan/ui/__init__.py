"""Streamlit preview UI."""
