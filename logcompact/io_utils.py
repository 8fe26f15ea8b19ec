"""
I/O utilities for reading input lines, loading configuration and JSONL output.
"""

import json
from pathlib import Path
from typing import Iterable, List

import click
from tqdm import tqdm

from .models import MiningConfig, PatternGroup


def read_lines(path: str = '-', show_progress: bool = False) -> List[str]:
    """
    Read a whole input file (or stdin for ``-``) as a list of lines.

    Lines end at ``\\n`` only; one trailing ``\\r`` is dropped with it and a
    lone ``\\r`` stays inside the line. Undecodable bytes are replaced.

    Raises:
        OSError: If the input cannot be opened or read
    """
    lines = []
    # Binary mode, since text mode would also split on a lone \r
    with click.open_file(path, 'rb') as handle:
        for raw in tqdm(handle, desc="Reading lines", unit=" lines", disable=not show_progress):
            if raw.endswith(b'\n'):
                raw = raw[:-1]
            if raw.endswith(b'\r'):
                raw = raw[:-1]
            lines.append(raw.decode('utf-8', errors='replace'))
    return lines


def load_config(path: str) -> MiningConfig:
    """
    Load tuning knobs from a JSON file; unknown keys are ignored.

    Raises:
        OSError: If the file cannot be read
        ValueError: If the file is not valid JSON or a value is out of range
    """
    text = Path(path).read_text(encoding='utf-8')
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Invalid config file {path}: expected a JSON object")
    try:
        return MiningConfig.from_dict(data).validate()
    except TypeError as e:
        raise ValueError(f"Invalid config file {path}: {e}") from e


class JSONLWriter:
    """
    Writer for JSONL (JSON Lines) format, one PatternGroup per line.
    """

    def __init__(self, file_path: str = '-'):
        self.file_path = file_path
        self.file_handle = None

    def __enter__(self):
        self.file_handle = click.open_file(self.file_path, 'w', encoding='utf-8')
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if not self.file_handle:
            return
        # stdout must stay open for the caller
        if self.file_path == '-':
            self.file_handle.flush()
        else:
            self.file_handle.close()

    def write_group(self, group: PatternGroup) -> None:
        """Write a single group to the JSONL stream."""
        if not self.file_handle:
            raise ValueError("JSONLWriter not opened")

        json.dump(group.to_dict(), self.file_handle, ensure_ascii=False)
        self.file_handle.write('\n')

    def write_groups(self, groups: Iterable[PatternGroup]) -> None:
        for group in groups:
            self.write_group(group)
