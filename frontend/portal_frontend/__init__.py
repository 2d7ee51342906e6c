"""Streamlit frontend for the project portal."""
