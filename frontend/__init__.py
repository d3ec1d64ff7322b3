"""Streamlit search view for the recommendation proxy."""
