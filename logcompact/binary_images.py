"""
Binary image tables of macOS crash and sample reports.

Rows like ``0x104fc4000 - 0x10a1fbfff +com.example.app (1.0) <UUID> /path``
are pulled out of the mined input. Application images are kept in a short
trailing section; system libraries are only counted.
"""

import re
from dataclasses import dataclass, field
from typing import List, Tuple

_BINARY_IMAGE = re.compile(r'^\s*0x[0-9a-fA-F]+\s+-\s+0x[0-9a-fA-F]+\s+')
_SYSTEM_LIBRARY = re.compile(r'/System/Library/|/usr/lib/')

# Applied in order; bracketed hex must go before plain hex
_IMAGE_NORMALIZERS = [
    (re.compile(r'\[0x[0-9a-fA-F]+\]'), '<addr>'),
    (re.compile(r'0x[0-9a-fA-F]+'), '<hex>'),
    (re.compile(r'<[0-9A-F]{8}-[0-9A-F]{4}-[0-9A-F]{4}-[0-9A-F]{4}-[0-9A-F]{12}>'), '<uuid>'),
    (re.compile(r'Thread_[0-9]+'), 'Thread_<id>'),
    (re.compile(r'\b[0-9]{2}:[0-9]{2}:[0-9]{2}(?:\.[0-9]+)?'), '<time>'),
    (re.compile(r'\b[0-9]{5,}\b'), '<num>'),
]

SECTION_HEADER = "=== Binary Images ==="


@dataclass
class BinaryImageSummary:
    app_images: List[str] = field(default_factory=list)
    system_count: int = 0

    def is_empty(self) -> bool:
        return not self.app_images and self.system_count == 0


def is_binary_image(line: str) -> bool:
    return _BINARY_IMAGE.match(line) is not None


def normalize_image_line(line: str) -> str:
    for pattern, replacement in _IMAGE_NORMALIZERS:
        line = pattern.sub(replacement, line)
    return line


def split_binary_images(lines: List[str]) -> Tuple[List[str], BinaryImageSummary]:
    """
    Separate binary image rows from the other lines.

    Returns:
        Tuple of (remaining lines in order, summary of the image rows)
    """
    remaining = []
    summary = BinaryImageSummary()
    for line in lines:
        if not is_binary_image(line):
            remaining.append(line)
        elif _SYSTEM_LIBRARY.search(line):
            summary.system_count += 1
        else:
            summary.app_images.append(line)
    return remaining, summary


def format_binary_images(summary: BinaryImageSummary) -> List[str]:
    """Report lines for the image section, starting with a blank separator."""
    if summary.is_empty():
        return []
    lines = ["", SECTION_HEADER]
    lines.extend(normalize_image_line(image) for image in summary.app_images)
    if summary.system_count:
        lines.append(f"[{summary.system_count} system libraries omitted]")
    return lines
