"""
Greedy merging of near-duplicate templates.

Two templates of equal token count are merged when the Jaccard similarity
of their literal (non-placeholder) tokens reaches the configured threshold.
Pairs are scanned in index order and the first qualifying pair is merged
before scanning again, so the result depends only on the input order.
"""

import itertools
import logging
from dataclasses import dataclass
from typing import Collection, Dict, List, Optional, Set, Tuple

from .models import PatternGroup, add_bounded, placeholder_index
from .templating import placeholder

logger = logging.getLogger(__name__)


def literal_tokens(tokens: List[str], slots: Optional[Collection[int]] = None) -> Set[str]:
    """
    Distinct literal tokens of a template.

    With ``slots`` only those positions count as placeholders; without it
    every ``<N>`` token does.
    """
    if slots is None:
        return {t for t in tokens if placeholder_index(t) is None}
    return {t for position, t in enumerate(tokens) if position not in slots}


def group_literals(group: PatternGroup) -> Set[str]:
    return literal_tokens(group.template.split(), set(group.slot_positions()))


def jaccard_similarity(first: Set[str], second: Set[str]) -> float:
    """|A & B| / |A | B|, with two empty sets counting as identical."""
    if not first and not second:
        return 1.0
    return len(first & second) / len(first | second)


def template_similarity(first: str, second: str) -> float:
    return jaccard_similarity(literal_tokens(first.split()), literal_tokens(second.split()))


def _slot_indexes(group: PatternGroup) -> Dict[int, int]:
    """Map of token position to sample set index."""
    return {position: index for index, position in enumerate(group.slot_positions())}


def _merge_hint(first_hint: str, second_hint: str) -> str:
    return first_hint if first_hint == second_hint else ""


@dataclass
class _Candidate:
    """A group with its template pre-split for repeated comparisons."""
    group: PatternGroup
    tokens: List[str]
    literals: Set[str]
    serial: int


class TemplateMerger:
    """
    Coalesces PatternGroups whose templates differ in only a few literals.

    Differing positions become new placeholders seeded with the values (or
    literal tokens) from both sides; identical positions are kept.
    """

    def __init__(self, similarity_threshold: float = 0.6, max_samples: int = 3):
        self.similarity_threshold = similarity_threshold
        self.max_samples = max_samples

    def can_merge(self, first: PatternGroup, second: PatternGroup) -> bool:
        if len(first.template.split()) != len(second.template.split()):
            return False
        return jaccard_similarity(group_literals(first),
                                  group_literals(second)) >= self.similarity_threshold

    def merge_pair(self, first: PatternGroup, second: PatternGroup) -> PatternGroup:
        """
        Merge ``second`` into ``first`` position by position.

        Placeholders are renumbered from 0; samples from ``first`` come before
        those from ``second`` and every set stays duplicate-free and capped.
        """
        parts = []
        samples: List[List[str]] = []
        hints: List[str] = []
        slots: List[int] = []
        first_slots = _slot_indexes(first)
        second_slots = _slot_indexes(second)

        pairs = zip(first.template.split(), second.template.split())
        for position, (first_token, second_token) in enumerate(pairs):
            first_slot = first_slots.get(position)
            second_slot = second_slots.get(position)

            if first_token == second_token and first_slot is None and second_slot is None:
                parts.append(first_token)
                continue

            if first_slot is not None:
                merged = list(first.samples[first_slot][:self.max_samples])
                first_hint = first.var_type_hints[first_slot]
            else:
                merged = [first_token]
                first_hint = ""

            if second_slot is not None:
                contribution = second.samples[second_slot]
                second_hint = second.var_type_hints[second_slot]
            else:
                contribution = [second_token]
                second_hint = ""

            for value in contribution:
                add_bounded(merged, value, self.max_samples)

            parts.append(placeholder(len(samples)))
            samples.append(merged)
            hints.append(_merge_hint(first_hint, second_hint))
            slots.append(position)

        return PatternGroup(
            template=" ".join(parts),
            count=first.count + second.count,
            samples=samples,
            var_type_hints=hints,
            slots=slots,
        )

    def merge_all(self, groups: List[PatternGroup]) -> List[PatternGroup]:
        """
        Merge until no pair qualifies.

        Args:
            groups: PatternGroups in index order; the list itself is not modified

        Returns:
            New list of groups with merged groups replacing their lower-index member
        """
        serials = itertools.count()
        candidates = [self._candidate(g, next(serials)) for g in groups]
        # Pairs of unchanged groups that were already compared and rejected
        rejected: Set[Tuple[int, int]] = set()

        while True:
            pair = self._first_qualifying_pair(candidates, rejected)
            if pair is None:
                break
            i, j = pair
            first, second = candidates[i].group, candidates[j].group
            merged = self.merge_pair(first, second)
            logger.debug("Merged %r (%dx) with %r (%dx) into %r",
                         first.template, first.count, second.template, second.count,
                         merged.template)
            candidates[i] = self._candidate(merged, next(serials))
            del candidates[j]

        return [c.group for c in candidates]

    def _first_qualifying_pair(self, candidates: List[_Candidate],
                               rejected: Set[Tuple[int, int]]) -> Optional[Tuple[int, int]]:
        for i, first in enumerate(candidates):
            for j in range(i + 1, len(candidates)):
                second = candidates[j]
                key = (first.serial, second.serial)
                if key in rejected:
                    continue
                if (len(first.tokens) == len(second.tokens) and
                        jaccard_similarity(first.literals, second.literals) >= self.similarity_threshold):
                    return i, j
                rejected.add(key)
        return None

    @staticmethod
    def _candidate(group: PatternGroup, serial: int) -> _Candidate:
        tokens = group.template.split()
        literals = literal_tokens(tokens, set(group.slot_positions()))
        return _Candidate(group=group, tokens=tokens, literals=literals, serial=serial)
