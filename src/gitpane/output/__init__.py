"""Renderers for parsed git models."""
