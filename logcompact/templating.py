"""
Template generation for length buckets.

Variable columns are replaced by positional placeholders ``<0>``, ``<1>``, ...
and the verbatim values they hid are kept as bounded sample sets.
"""

from typing import Dict, List

from .models import ColumnProfile, ParsedLine, PatternGroup, TokenShape


def placeholder(index: int) -> str:
    return f"<{index}>"


def column_type_hint(profile: ColumnProfile) -> str:
    """
    Hint for a variable column.

    Only a column whose every observation shares one recognized shape gets a
    hint ("hex", "time" or "num"); anything mixed or verbatim gets "".
    """
    if profile.distinct_count != 1:
        return ""
    shape = TokenShape.from_display_form(next(iter(profile.value_counts)))
    return shape.hint if shape else ""


class TemplateBuilder:
    """
    Builds PatternGroups for the lines of one length bucket.

    Lines with identical template strings share a group; each group keeps at
    most ``max_samples`` distinct values per placeholder in first-seen order.
    """

    def __init__(self, max_samples: int = 3):
        self.max_samples = max_samples

    def build_template(self, line: ParsedLine, variable_mask: List[bool]):
        """
        Render one line against a column mask.

        Returns:
            Tuple of (template string, verbatim values removed, their column indexes)
        """
        parts = []
        values = []
        columns = []
        for column, token in enumerate(line.tokens):
            if variable_mask[column]:
                parts.append(placeholder(len(values)))
                values.append(token)
                columns.append(column)
            else:
                parts.append(token)
        return " ".join(parts), values, columns

    def build(self, bucket: List[ParsedLine], profiles: List[ColumnProfile],
              variable_mask: List[bool]) -> List[PatternGroup]:
        """
        Group the lines of a bucket by template.

        Args:
            bucket: Lines sharing one token count
            profiles: Column profiles of the bucket
            variable_mask: Per-column flag, True where the column is variable

        Returns:
            PatternGroups in order of first occurrence
        """
        hints = [column_type_hint(p) if flag else "" for p, flag in zip(profiles, variable_mask)]
        groups: Dict[str, PatternGroup] = {}

        for line in bucket:
            template, values, columns = self.build_template(line, variable_mask)
            group = groups.get(template)
            if group is None:
                groups[template] = PatternGroup(
                    template=template,
                    count=1,
                    samples=[[value] for value in values],
                    var_type_hints=[hints[c] for c in columns],
                    slots=columns,
                )
                continue

            group.count += 1
            for index, value in enumerate(values):
                group.add_sample(index, value, self.max_samples)

        return list(groups.values())
