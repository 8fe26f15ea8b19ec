"""
Tests for greedy template merging.
"""

import unittest

from logcompact.merger import (
    TemplateMerger, group_literals, jaccard_similarity, literal_tokens,
    placeholder_index, template_similarity
)
from logcompact.models import PatternGroup


def _group(template, count=1, samples=None, hints=None):
    samples = samples or []
    return PatternGroup(template=template, count=count, samples=samples,
                        var_type_hints=hints if hints is not None else [""] * len(samples))


class TestSimilarity(unittest.TestCase):

    def test_placeholder_index(self):
        self.assertEqual(placeholder_index("<0>"), 0)
        self.assertEqual(placeholder_index("<12>"), 12)
        self.assertIsNone(placeholder_index("<hex>"))
        self.assertIsNone(placeholder_index("<1>x"))
        self.assertIsNone(placeholder_index("word"))

    def test_literal_tokens_skip_placeholders(self):
        self.assertEqual(literal_tokens(["open", "<0>", "file", "<1>"]), {"open", "file"})

    def test_recorded_slots_decide_what_is_literal(self):
        self.assertEqual(literal_tokens(["<0>", "open", "<0>"], {2}), {"<0>", "open"})
        group = PatternGroup("<0> open <0>", 1, [["f"]], [""], slots=[2])
        self.assertEqual(group_literals(group), {"<0>", "open"})

    def test_jaccard(self):
        self.assertEqual(jaccard_similarity(set(), set()), 1.0)
        self.assertEqual(jaccard_similarity({"a"}, set()), 0.0)
        self.assertAlmostEqual(jaccard_similarity({"a", "b", "c"}, {"a", "b", "d"}), 0.5)

    def test_template_similarity_ignores_placeholders(self):
        self.assertEqual(template_similarity("<0> ok", "<1> ok"), 1.0)
        self.assertEqual(template_similarity("<0>", "<0>"), 1.0)
        self.assertAlmostEqual(template_similarity("job alpha finished ok", "job beta finished ok"), 0.6)


class TestTemplateMerger(unittest.TestCase):

    def setUp(self):
        self.merger = TemplateMerger()

    def test_single_differing_word(self):
        groups = [
            _group("worker pool started on node alpha"),
            _group("worker pool stopped on node alpha"),
        ]
        merged = self.merger.merge_all(groups)

        self.assertEqual(len(merged), 1)
        self.assertEqual(merged[0].template, "worker pool <0> on node alpha")
        self.assertEqual(merged[0].count, 2)
        self.assertEqual(merged[0].samples, [["started", "stopped"]])
        self.assertEqual(merged[0].var_type_hints, [""])

    def test_different_lengths_never_merge(self):
        groups = [_group("a b c"), _group("a b c d")]
        self.assertEqual(self.merger.merge_all(groups), groups)

    def test_below_threshold_is_kept_apart(self):
        groups = [_group("a b c d"), _group("a b x y")]
        self.assertEqual(len(self.merger.merge_all(groups)), 2)

    def test_threshold_is_inclusive(self):
        merged = self.merger.merge_all([_group("job alpha finished ok", 3),
                                        _group("job beta finished ok")])
        self.assertEqual([(g.template, g.count) for g in merged], [("job <0> finished ok", 4)])

    def test_placeholders_are_renumbered(self):
        first = _group("open <0> file <1>", 2, [["a.txt"], ["r"]], ["", ""])
        second = _group("open x.txt file <0>", 1, [["w"]], [""])
        merged = self.merger.merge_pair(first, second)

        self.assertEqual(merged.template, "open <0> file <1>")
        self.assertEqual(merged.samples, [["a.txt", "x.txt"], ["r", "w"]])
        self.assertEqual(merged.count, 3)

    def test_identical_placeholders_union_samples(self):
        first = _group("t <0> x", 1, [["07:00:00", "07:00:01"]], ["time"])
        second = _group("t <0> x", 1, [["07:00:01", "07:00:02", "07:00:03"]], ["time"])
        merged = self.merger.merge_pair(first, second)

        self.assertEqual(merged.template, "t <0> x")
        self.assertEqual(merged.samples, [["07:00:00", "07:00:01", "07:00:02"]])
        self.assertEqual(merged.var_type_hints, ["time"])

    def test_hint_dropped_against_literal(self):
        first = _group("t <0> x", 1, [["07:00:00"]], ["time"])
        second = _group("t 12:00 x")
        merged = self.merger.merge_pair(first, second)

        self.assertEqual(merged.samples, [["07:00:00", "12:00"]])
        self.assertEqual(merged.var_type_hints, [""])

    def test_literal_placeholder_spelling_is_kept(self):
        first = PatternGroup("<0> open <0>", 2, [["a", "b"]], ["hex"], slots=[2])
        second = PatternGroup("<0> open <0>", 1, [["c"]], ["hex"], slots=[2])
        merged = self.merger.merge_pair(first, second)

        self.assertEqual(merged.template, "<0> open <0>")
        self.assertEqual(merged.slots, [2])
        self.assertEqual(merged.samples, [["a", "b", "c"]])
        self.assertEqual(merged.var_type_hints, ["hex"])

    def test_merged_slots_follow_positions(self):
        first = PatternGroup("<0> x y <0>", 1, [["v"]], [""], slots=[3])
        second = PatternGroup("<0> x z <0>", 1, [["w"]], [""], slots=[3])
        merged = self.merger.merge_pair(first, second)

        self.assertEqual(merged.template, "<0> x <0> <1>")
        self.assertEqual(merged.slots, [2, 3])
        self.assertEqual(merged.samples, [["y", "z"], ["v", "w"]])

    def test_samples_are_capped(self):
        merger = TemplateMerger(max_samples=2)
        merged = merger.merge_pair(_group("k <0>", 1, [["a", "b"]]), _group("k <0>", 1, [["c"]]))
        self.assertEqual(merged.samples, [["a", "b"]])

        merged = self.merger.merge_pair(_group("k <0>", 1, [["a", "b", "c"]]), _group("k d"))
        self.assertEqual(merged.samples, [["a", "b", "c"]])

    def test_first_qualifying_pair_wins(self):
        groups = [_group("p q r s"), _group("x y z s"), _group("p q r t")]
        merged = self.merger.merge_all(groups)

        self.assertEqual([g.template for g in merged], ["p q r <0>", "x y z s"])
        self.assertEqual(merged[0].samples, [["s", "t"]])

    def test_merging_restarts_after_each_merge(self):
        groups = [_group("a b c d"), _group("a b c e"), _group("a b c f")]
        merged = self.merger.merge_all(groups)

        self.assertEqual(len(merged), 1)
        self.assertEqual(merged[0].template, "a b c <0>")
        self.assertEqual(merged[0].samples, [["d", "e", "f"]])
        self.assertEqual(merged[0].count, 3)

    def test_fully_variable_templates_merge(self):
        merged = self.merger.merge_all([_group("<0>", 2, [["x"]]), _group("<0>", 5, [["y"]])])
        self.assertEqual(len(merged), 1)
        self.assertEqual(merged[0].count, 7)
        self.assertEqual(merged[0].samples, [["x", "y"]])

    def test_count_conservation_and_input_untouched(self):
        groups = [_group("a b c d", 4), _group("w x y z", 2), _group("a b c e", 3),
                  _group("w x y q", 1), _group("solo", 5)]
        snapshot = [g.template for g in groups]
        merged = self.merger.merge_all(groups)

        self.assertEqual(sum(g.count for g in merged), 15)
        self.assertEqual([g.template for g in groups], snapshot)
        for group in merged:
            for values in group.samples:
                self.assertLessEqual(len(values), 3)
                self.assertEqual(len(values), len(set(values)))


if __name__ == '__main__':
    unittest.main()
