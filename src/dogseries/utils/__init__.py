"""Utility helpers for dogseries."""

from dogseries.utils.tags import SOURCE_TAG, extract_source_from_tags, normalise_tags, split_tags

__all__ = ["SOURCE_TAG", "extract_source_from_tags", "normalise_tags", "split_tags"]
