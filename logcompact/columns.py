"""
Column statistics for lines of equal token count.

Lines are bucketed by width, every column of a bucket gets a frequency
table over display forms, and the Shannon entropy of those tables drives
an adaptive cutoff that separates structural columns from variable ones.
"""

import logging
import math
from typing import Dict, Iterable, List, Optional

from .models import ColumnProfile, MiningConfig, ParsedLine

logger = logging.getLogger(__name__)


def bucket_by_length(lines: Iterable[ParsedLine]) -> Dict[int, List[ParsedLine]]:
    """Group parsed lines by token count, keeping first-appearance order of widths."""
    buckets: Dict[int, List[ParsedLine]] = {}
    for line in lines:
        buckets.setdefault(len(line), []).append(line)
    return buckets


def shannon_entropy(value_counts: Dict[str, int], total: int) -> float:
    """Entropy in bits of a frequency table; 0.0 for an empty table."""
    if total <= 0:
        return 0.0
    entropy = 0.0
    for count in value_counts.values():
        p = count / total
        entropy -= p * math.log2(p)
    return entropy


def profile_columns(bucket: List[ParsedLine], width: Optional[int] = None) -> List[ColumnProfile]:
    """Build one ColumnProfile per column of a length bucket in a single scan."""
    if width is None:
        width = len(bucket[0]) if bucket else 0
    profiles = [ColumnProfile() for _ in range(width)]

    for line in bucket:
        for column, token in enumerate(line.classified):
            profiles[column].observe(token)

    for profile in profiles:
        profile.entropy = shannon_entropy(profile.value_counts, profile.total_observations)
    return profiles


def select_threshold(profiles: List[ColumnProfile], config: Optional[MiningConfig] = None) -> float:
    """
    Derive the entropy cutoff above which a column counts as variable.

    Nearly-unique columns (identifiers, sequence numbers) pull the cutoff
    to just below their entropy; otherwise the cutoff never drops below the
    configured floor. The median of all column entropies bounds it from below.
    """
    config = config or MiningConfig()
    observed = [p for p in profiles if p.total_observations > 0]
    if not observed:
        return config.empty_threshold

    entropies = sorted(p.entropy for p in observed)
    median = entropies[len(entropies) // 2]

    noisy = [p.entropy for p in observed if p.uniqueness_ratio > config.uniqueness_cutoff]
    if noisy:
        return max(min(noisy) * config.anchor_factor, median)
    return max(median, config.entropy_floor)


def variable_columns(profiles: List[ColumnProfile], threshold: float) -> List[bool]:
    """Flag columns that are inherently variable or noisier than ``threshold``."""
    return [p.inherently_variable or p.entropy > threshold for p in profiles]


def analyze_bucket(bucket: List[ParsedLine], config: Optional[MiningConfig] = None):
    """
    Profile a bucket and decide which of its columns are variable.

    Returns:
        Tuple of (profiles, threshold, variable column mask)
    """
    profiles = profile_columns(bucket)
    threshold = select_threshold(profiles, config)
    mask = variable_columns(profiles, threshold)
    logger.debug("Bucket of %d lines x %d columns: threshold=%.3f, variable columns=%s",
                 len(bucket), len(profiles), threshold,
                 [i for i, flag in enumerate(mask) if flag])
    return profiles, threshold, mask
