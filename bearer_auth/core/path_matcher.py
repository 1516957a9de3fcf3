"""Segment-level wildcard matching for skip paths."""

import re
from collections.abc import Iterable
from functools import lru_cache

from bearer_auth.core.token_config import get_config

WILDCARD = "*"
PREFIX_MARKER = "/*"


@lru_cache(maxsize=512)
def _segment_regex(pattern_segment: str) -> re.Pattern[str]:
    parts = (re.escape(part) for part in pattern_segment.split(WILDCARD))
    return re.compile("[^/]*".join(parts))


def _match_segment(segment: str, pattern_segment: str) -> bool:
    if segment == pattern_segment:
        return True
    if WILDCARD not in pattern_segment:
        return False
    return _segment_regex(pattern_segment).fullmatch(segment) is not None


def _match_segments(segments: list[str], pattern_segments: list[str]) -> bool:
    return all(
        _match_segment(segment, pattern_segment)
        for segment, pattern_segment in zip(segments, pattern_segments, strict=True)
    )


def match_wildcard(candidate: str, pattern: str) -> bool:
    """Match a path against a skip pattern.

    A pattern ending in ``/*`` matches its prefix and every deeper path. Any
    other pattern must have exactly as many ``/`` segments as the candidate;
    ``*`` inside a segment matches any run of characters within that segment.
    """
    segments = candidate.split("/")

    if pattern.endswith(PREFIX_MARKER):
        prefix_segments = pattern[: -len(PREFIX_MARKER)].split("/")
        if len(segments) < len(prefix_segments):
            return False
        return _match_segments(segments[: len(prefix_segments)], prefix_segments)

    pattern_segments = pattern.split("/")
    if len(segments) != len(pattern_segments):
        return False
    return _match_segments(segments, pattern_segments)


def is_skipped(path: str, patterns: Iterable[str] | None = None) -> bool:
    """Check whether a request path bypasses authentication.

    Uses the configured skip paths unless ``patterns`` is given.
    """
    if patterns is None:
        patterns = get_config().skip_paths
    return any(match_wildcard(path, pattern) for pattern in patterns)
