"""Tag parsing and normalisation utilities.

Metric entries are keyed by a raw tags key: the entry's tags joined with
commas, e.g. ``"env:prod,statsd_source_id:web-1,role:api"``. One of them may
carry the host the metric originated from.
"""

from __future__ import annotations

from collections.abc import Iterable

__all__ = ["SOURCE_TAG", "extract_source_from_tags", "normalise_tags", "split_tags"]

# Tag carrying the originating host of a metric
SOURCE_TAG = "statsd_source_id"

_SOURCE_PREFIX = SOURCE_TAG + ":"


def split_tags(tags_key: str) -> list[str]:
    """Split a raw tags key into its individual tags.

    Args:
        tags_key: Comma-joined tags, possibly empty

    Returns:
        List of stripped, non-empty tags in their original order.

    Examples:
        >>> split_tags("env:prod, role:api,")
        ['env:prod', 'role:api']
        >>> split_tags("")
        []
    """
    return [tag.strip() for tag in tags_key.split(",") if tag.strip()]


def normalise_tags(tags: Iterable[str]) -> list[str]:
    """Return the canonical form of a tag set.

    Tags are stripped, empty tags dropped, duplicates removed and the result
    sorted, so semantically identical tag sets serialize identically.
    Normalising an already normalised list returns an equal list.

    Examples:
        >>> normalise_tags(["role:api", "env:prod", "role:api"])
        ['env:prod', 'role:api']
    """
    return sorted({tag.strip() for tag in tags if tag and tag.strip()})


def extract_source_from_tags(tags_key: str) -> tuple[str, list[str]]:
    """Extract the host override from a raw tags key.

    Args:
        tags_key: Comma-joined tags, possibly empty

    Returns:
        Tuple of (host, remaining_tags). host is an empty string when no
        ``statsd_source_id:<host>`` tag is present; the source tag itself is
        never part of remaining_tags.

    Examples:
        >>> extract_source_from_tags("env:prod,statsd_source_id:web-1")
        ('web-1', ['env:prod'])
    """
    host = ""
    remaining: list[str] = []
    for tag in split_tags(tags_key):
        if tag.startswith(_SOURCE_PREFIX):
            if not host:
                host = tag[len(_SOURCE_PREFIX) :].strip()
            continue
        remaining.append(tag)
    return host, remaining
