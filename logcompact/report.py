"""
Rendering of PatternGroups into the compacted text report.
"""

from typing import Iterable, List

from .models import PatternGroup
from .templating import placeholder

SAMPLE_INDENT = "     "


def sort_groups(groups: Iterable[PatternGroup]) -> List[PatternGroup]:
    """Most frequent first; equal counts ordered by template text."""
    return sorted(groups, key=lambda g: (-g.count, g.template))


def sample_limit(count: int) -> int:
    """Samples shown per placeholder, fewer for very frequent groups."""
    if count > 100:
        return 1
    if count > 10:
        return 2
    return 3


def format_header(group: PatternGroup) -> str:
    if group.count > 1:
        return f"[{group.count}x] {group.template}"
    return group.template


def format_samples(group: PatternGroup) -> str:
    """Sample line for a group, or "" when no placeholder has samples."""
    limit = sample_limit(group.count)
    parts = [
        f"{placeholder(index)}: {', '.join(values[:limit])}"
        for index, values in enumerate(group.samples)
        if values
    ]
    if not parts:
        return ""
    return SAMPLE_INDENT + " | ".join(parts)


def format_report(groups: Iterable[PatternGroup]) -> str:
    """Render groups sorted by frequency, one header plus optional sample line each."""
    lines = []
    for group in sort_groups(groups):
        lines.append(format_header(group))
        sample_line = format_samples(group)
        if sample_line:
            lines.append(sample_line)
    return "\n".join(lines)
