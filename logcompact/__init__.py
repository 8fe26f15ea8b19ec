"""
Log Pattern Compaction System

A Python library for collapsing repetitive log files, stack traces and
crash reports into templates with repeat counts and sample values.
"""

__version__ = "1.0.0"
__author__ = "Log Pattern Compaction System"

from .compactor import PatternCompactor, compact
from .models import MiningConfig, PatternGroup
from .merger import TemplateMerger
from .templating import TemplateBuilder
from .io_utils import JSONLWriter, read_lines, load_config

__all__ = [
    "PatternCompactor",
    "compact",
    "MiningConfig",
    "PatternGroup",
    "TemplateMerger",
    "TemplateBuilder",
    "JSONLWriter",
    "read_lines",
    "load_config"
]
