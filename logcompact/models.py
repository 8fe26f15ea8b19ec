"""
Core data models for log pattern mining and compaction.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from dataclasses_json import Exclude, config, dataclass_json
from enum import Enum

_PLACEHOLDER_PATTERN = re.compile(r'<([0-9]+)>')


def placeholder_index(token: str) -> Optional[int]:
    """Return N for a ``<N>`` placeholder token, None for a literal."""
    match = _PLACEHOLDER_PATTERN.fullmatch(token)
    return int(match.group(1)) if match else None


class TokenShape(Enum):
    """Lexical shapes a token can be recognized as."""
    BRACKETED_HEX = "[<hex>]"
    HEX = "<hex>"
    TIME = "<time>"
    NUMBER = "<num>"

    def __str__(self) -> str:
        return self.value

    @property
    def hint(self) -> str:
        """Type hint recorded for a variable column of this shape."""
        return _SHAPE_HINTS[self]

    @classmethod
    def from_display_form(cls, display_form: str) -> Optional['TokenShape']:
        for shape in cls:
            if shape.value == display_form:
                return shape
        return None


_SHAPE_HINTS = {
    TokenShape.BRACKETED_HEX: "hex",
    TokenShape.HEX: "hex",
    TokenShape.TIME: "time",
    TokenShape.NUMBER: "num",
}


@dataclass(frozen=True)
class ClassifiedToken:
    """A token as seen by the column statistics."""
    display_form: str
    is_inherently_variable: bool = False


@dataclass
class ParsedLine:
    """A raw line split into verbatim and classified tokens."""
    tokens: List[str]
    classified: List[ClassifiedToken]

    def __len__(self) -> int:
        return len(self.tokens)


@dataclass
class ColumnProfile:
    """Value distribution of one column within a length bucket."""
    value_counts: Dict[str, int] = field(default_factory=dict)
    total_observations: int = 0
    entropy: float = 0.0
    inherently_variable: bool = False

    def observe(self, token: ClassifiedToken) -> None:
        self.value_counts[token.display_form] = self.value_counts.get(token.display_form, 0) + 1
        self.total_observations += 1
        self.inherently_variable = self.inherently_variable or token.is_inherently_variable

    @property
    def distinct_count(self) -> int:
        return len(self.value_counts)

    @property
    def uniqueness_ratio(self) -> float:
        if self.total_observations == 0:
            return 0.0
        return self.distinct_count / self.total_observations


@dataclass_json
@dataclass
class PatternGroup:
    """
    A template together with how often it occurred and sample values.

    ``samples[i]`` and ``var_type_hints[i]`` describe placeholder ``<i>``.
    ``slots[i]`` is the token position of placeholder ``<i>``, so a verbatim
    token spelled like a placeholder stays a literal. It is not serialized.
    """
    template: str
    count: int = 1
    samples: List[List[str]] = field(default_factory=list)
    var_type_hints: List[str] = field(default_factory=list)
    slots: Optional[List[int]] = field(default=None, repr=False, compare=False,
                                       metadata=config(exclude=Exclude.ALWAYS))

    @property
    def placeholder_count(self) -> int:
        return len(self.samples)

    def slot_positions(self) -> List[int]:
        """
        Token positions of the placeholders, in placeholder order.

        Groups created without recorded slots (by hand or from JSONL) fall
        back to the ``<N>`` tokens of the template that have a sample set.
        """
        if self.slots is not None:
            return self.slots
        return [
            position for position, token in enumerate(self.template.split())
            if (placeholder_index(token) is not None and
                placeholder_index(token) < len(self.samples))
        ]

    def add_sample(self, index: int, value: str, max_samples: int = 3) -> bool:
        """Append a sample to placeholder ``index`` unless full or already present."""
        return add_bounded(self.samples[index], value, max_samples)

    def has_samples(self) -> bool:
        return any(self.samples)


def add_bounded(values: List[str], value: str, max_samples: int) -> bool:
    """Insertion-ordered, duplicate-free append capped at ``max_samples``."""
    if len(values) >= max_samples or value in values:
        return False
    values.append(value)
    return True


@dataclass_json
@dataclass
class MiningConfig:
    """Tuning knobs for the pattern-mining engine."""
    similarity_threshold: float = 0.6  # Jaccard cutoff for merging templates
    uniqueness_cutoff: float = 0.5  # columns above this ratio anchor the threshold
    anchor_factor: float = 0.9
    entropy_floor: float = 2.0  # bits
    empty_threshold: float = 1.0
    max_samples: int = 3
    strip_indent: bool = False
    binary_images: bool = False

    def validate(self) -> 'MiningConfig':
        """Raise ValueError when a knob is out of range."""
        if not 0.0 <= self.similarity_threshold <= 1.0:
            raise ValueError(
                f"similarity_threshold must be between 0.0 and 1.0, got {self.similarity_threshold}")
        if not 0.0 <= self.uniqueness_cutoff <= 1.0:
            raise ValueError(
                f"uniqueness_cutoff must be between 0.0 and 1.0, got {self.uniqueness_cutoff}")
        if self.anchor_factor < 0.0:
            raise ValueError(f"anchor_factor must be non-negative, got {self.anchor_factor}")
        if self.entropy_floor < 0.0:
            raise ValueError(f"entropy_floor must be non-negative, got {self.entropy_floor}")
        if self.max_samples < 1:
            raise ValueError(f"max_samples must be at least 1, got {self.max_samples}")
        return self
