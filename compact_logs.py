#!/usr/bin/env python3
"""
CLI tool for compacting repetitive logs, stack traces and crash reports.

Usage:
    python compact_logs.py --in server.log
    cat crash.txt | python compact_logs.py --binary-images --strip-indent
"""

import click
import dataclasses
import logging
import os
import sys

# Add the package to Python path
sys.path.insert(0, os.path.dirname(__file__))

from logcompact import PatternCompactor
from logcompact.io_utils import JSONLWriter, load_config, read_lines
from logcompact.models import MiningConfig


def _build_config(config_path, similarity, max_samples, strip_indent, binary_images) -> MiningConfig:
    """Load the config file (if any) and apply command line overrides."""
    config = load_config(config_path) if config_path else MiningConfig()
    overrides = {}
    if similarity is not None:
        overrides['similarity_threshold'] = similarity
    if max_samples is not None:
        overrides['max_samples'] = max_samples
    if strip_indent:
        overrides['strip_indent'] = True
    if binary_images:
        overrides['binary_images'] = True
    return dataclasses.replace(config, **overrides).validate()


@click.command()
@click.option('--input', '--in', '-i', 'input_file',
              default='-',
              type=click.Path(allow_dash=True),
              help='Input file to compact (default: stdin)')
@click.option('--output', '--out', '-o', 'output_file',
              default='-',
              type=click.Path(allow_dash=True),
              help='Output file for the report (default: stdout)')
@click.option('--format', 'output_format',
              type=click.Choice(['text', 'jsonl']),
              default='text',
              help='Output format (default: text)')
@click.option('--similarity',
              type=float,
              default=None,
              help='Jaccard similarity needed to merge templates (0.0-1.0, default: 0.6)')
@click.option('--max-samples',
              type=int,
              default=None,
              help='Sample values kept per placeholder (default: 3)')
@click.option('--strip-indent',
              is_flag=True,
              help='Strip leading indentation and tree markers (+ ! : |) before mining')
@click.option('--binary-images',
              is_flag=True,
              help='Summarize macOS "Binary Images" rows instead of mining them')
@click.option('--config', 'config_path',
              type=click.Path(exists=True, dir_okay=False),
              help='JSON file with tuning knobs')
@click.option('--progress',
              is_flag=True,
              help='Show a progress bar while reading input')
@click.option('--stats',
              is_flag=True,
              help='Print compaction statistics to stderr')
@click.option('--verbose', '-v',
              is_flag=True,
              help='Enable debug logging')
def compact_logs(input_file: str,
                 output_file: str,
                 output_format: str,
                 similarity: float,
                 max_samples: int,
                 strip_indent: bool,
                 binary_images: bool,
                 config_path: str,
                 progress: bool,
                 stats: bool,
                 verbose: bool):
    """
    Collapse recurring lines into templates with counts and sample values.

    Columns whose tokens vary between otherwise identical lines (timestamps,
    addresses, counters, ids) become placeholders <0>, <1>, ...; similar
    templates are then merged. The most frequent templates are listed first.

    Examples:

    \b
    # Compact a log file
    python compact_logs.py --in /var/log/auth.log

    \b
    # Compact a macOS sample report
    python compact_logs.py --in sample.txt --strip-indent --binary-images

    \b
    # Machine-readable groups
    python compact_logs.py --in server.log --format jsonl --out groups.jsonl
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
        stream=sys.stderr,
    )

    try:
        config = _build_config(config_path, similarity, max_samples, strip_indent, binary_images)
        compactor = PatternCompactor(config)

        lines = read_lines(input_file, show_progress=progress)

        groups, images = compactor.analyze(lines) if lines else (None, None)

        if output_format == 'jsonl':
            with JSONLWriter(output_file) as writer:
                writer.write_groups(groups or [])
        elif lines:
            report = compactor.render(groups, images)
            # An empty report is suppressed entirely
            if report:
                with click.open_file(output_file, 'w', encoding='utf-8') as outfile:
                    click.echo(report, file=outfile)

        if stats:
            _echo_stats(len(lines), len(groups or []))

    except KeyboardInterrupt:
        click.echo("Compaction cancelled by user", err=True)
        sys.exit(1)
    except (OSError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        if verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)


def _echo_stats(line_count: int, group_count: int) -> None:
    ratio = (1 - group_count / line_count) * 100 if line_count else 0.0
    click.echo("Compaction statistics:", err=True)
    click.echo(f"   • Input lines: {line_count}", err=True)
    click.echo(f"   • Pattern groups: {group_count}", err=True)
    click.echo(f"   • Reduction: {ratio:.1f}%", err=True)


if __name__ == '__main__':
    compact_logs()
