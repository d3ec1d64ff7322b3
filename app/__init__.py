"""Recommendation proxy service."""
