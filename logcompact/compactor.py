"""
Pattern-mining compactor.

Turns a complete sequence of text lines into a deduplicated report in
which recurring lines collapse into templates with repeat counts and
sample values for their variable parts.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from .binary_images import BinaryImageSummary, format_binary_images, split_binary_images
from .columns import analyze_bucket, bucket_by_length
from .merger import TemplateMerger
from .models import MiningConfig, ParsedLine, PatternGroup
from .report import format_report, sort_groups
from .templating import TemplateBuilder
from .tokenizer import parse_line

logger = logging.getLogger(__name__)


class PatternCompactor:
    """
    Main entry point of the mining engine.

    An instance holds configuration only; every call works on its own data
    and nothing is kept between calls.
    """

    def __init__(self, config: Optional[MiningConfig] = None):
        """
        Initialize the compactor.

        Args:
            config: Tuning knobs; defaults are used when omitted

        Raises:
            ValueError: If a configuration value is out of range
        """
        self.config = (config or MiningConfig()).validate()
        self.template_builder = TemplateBuilder(max_samples=self.config.max_samples)
        self.merger = TemplateMerger(
            similarity_threshold=self.config.similarity_threshold,
            max_samples=self.config.max_samples,
        )

    def parse(self, lines: Sequence[str]) -> List[ParsedLine]:
        return [parse_line(line, self.config.strip_indent) for line in lines]

    def build_groups(self, lines: Sequence[str]) -> List[PatternGroup]:
        """Per-bucket templates before any merging, in bucket then first-seen order."""
        groups: List[PatternGroup] = []
        buckets = bucket_by_length(self.parse(lines))
        for bucket in buckets.values():
            profiles, _, mask = analyze_bucket(bucket, self.config)
            groups.extend(self.template_builder.build(bucket, profiles, mask))
        logger.debug("Built %d templates from %d lines in %d buckets",
                     len(groups), len(lines), len(buckets))
        return groups

    def mine(self, lines: Sequence[str]) -> List[PatternGroup]:
        """
        Mine and merge templates.

        Returns:
            Final PatternGroups sorted for reporting
        """
        groups = self.merger.merge_all(self.build_groups(lines))
        logger.debug("%d templates after merging", len(groups))
        return sort_groups(groups)

    def split(self, lines: Sequence[str]) -> Tuple[List[str], BinaryImageSummary]:
        """Apply the optional binary image split; returns (lines to mine, summary)."""
        if self.config.binary_images:
            return split_binary_images(list(lines))
        return list(lines), BinaryImageSummary()

    def analyze(self, lines: Sequence[str]) -> Tuple[Optional[List[PatternGroup]], BinaryImageSummary]:
        """
        Run the whole engine without rendering.

        Returns:
            Tuple of (sorted groups, or None when no line was left to mine; image summary)
        """
        remaining, images = self.split(lines)
        groups = self.mine(remaining) if remaining else None
        return groups, images

    @staticmethod
    def render(groups: Optional[List[PatternGroup]], images: BinaryImageSummary) -> str:
        """
        Join the pattern report and the binary image section.

        The image section always opens with a blank separator line, so when
        every input line was an image row (``groups`` is None) the result
        starts with ``"\\n=== Binary Images ==="``.
        """
        output = [format_report(groups)] if groups is not None else []
        output.extend(format_binary_images(images))
        return "\n".join(output)

    def compact(self, lines: Sequence[str]) -> str:
        """
        Produce the compacted report for ``lines``.

        Args:
            lines: Complete input, one element per line, without newlines

        Returns:
            The report, or "" when ``lines`` is empty
        """
        if not lines:
            return ""
        return self.render(*self.analyze(lines))


def compact(lines: Sequence[str], config: Optional[MiningConfig] = None) -> str:
    """Compact ``lines`` into a report using a short-lived PatternCompactor."""
    return PatternCompactor(config).compact(lines)
