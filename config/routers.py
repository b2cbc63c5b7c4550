"""
Custom DRF Router to avoid converter registration conflict.

DRF's DefaultRouter uses format_suffix_patterns which registers a custom
converter 'drf_format_suffix'. When multiple routers exist across apps,
this causes a ValueError: "Converter 'drf_format_suffix' is already registered."
"""

from rest_framework.routers import DefaultRouter


class SafeDefaultRouter(DefaultRouter):
    """
    DefaultRouter that doesn't use format suffix patterns and
    does not publish an API root view per app.
    """
    include_format_suffixes = False
    include_root_view = False
