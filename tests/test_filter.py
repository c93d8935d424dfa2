"""Tests for query evaluation entry points."""

import unittest

from tap_query.config import MatchConfig
from tap_query.errors import (
    ErrorKind,
    InvalidPathError,
    InvalidPatternError,
    QueryError,
    QuerySyntaxError,
    UnknownAxisError,
)
from tap_query.filter import Filter, evaluate

from sample_tree import (
    ALL_NODES,
    DOCUMENTS,
    HOLIDAY,
    IMG001,
    IMG002,
    NOTES,
    PHOTOS,
    README,
    REPORT,
    build_sample_tree,
)


class TestEvaluate(unittest.TestCase):
    """Tests for evaluate function."""

    def setUp(self):
        self.tree = build_sample_tree()

    def run_query(self, query, candidates=ALL_NODES, config=None):
        return evaluate(self.tree, list(candidates), query, config)

    def test_name_exact(self):
        self.assertEqual(self.run_query("name == 'img001.jpg'"), [IMG001])
        self.assertEqual(self.run_query("name == 'IMG001.JPG'"), [])

    def test_name_wildcard(self):
        self.assertEqual(self.run_query("name == w'img*'"), [IMG001, IMG002])

    def test_name_wildcard_case_insensitive_config(self):
        config = MatchConfig(wildcard_case_sensitive=False)

        self.assertEqual(self.run_query("name == w'*.jpg'", config=config), [IMG001, IMG002])

    def test_explicit_fixed_method(self):
        self.assertEqual(self.run_query("name == u'readme'"), [README])

    def test_attribute_name_wildcard(self):
        self.assertEqual(self.run_query("attribute.name == w'exif.*'"), [IMG001, IMG002])

    def test_attribute_key_regex_value_fixed(self):
        self.assertEqual(self.run_query(r"attribute:r'^exif\.' == 'Canon'"), [IMG001])

    def test_attribute_key_wildcard_value_regex(self):
        self.assertEqual(self.run_query("attribute:w'exif.*' == r'^(Canon|Nikon)$'"), [IMG001, IMG002])

    def test_data_defaults_to_regex(self):
        self.assertEqual(self.run_query("data == 'revenue|nikon'"), [IMG002, REPORT])

    def test_data_text(self):
        self.assertEqual(self.run_query("data == t'Revenue'"), [REPORT])

    def test_invalid_data_regex_is_an_error(self):
        """Test an invalid pattern fails instead of matching nothing."""
        with self.assertRaises(InvalidPatternError) as cm:
            self.run_query("data == r'('")
        self.assertEqual(cm.exception.kind, ErrorKind.INVALID_PATTERN)

    def test_invalid_pattern_aborts_whole_query(self):
        with self.assertRaises(InvalidPatternError):
            self.run_query("name == 'readme' or name == r'[a-'")

    def test_or_is_union_without_duplicates(self):
        result = self.run_query("(name == w'img*') or (attribute:'exif.make' == 'Canon')")

        self.assertEqual(result, [IMG001, IMG002])

    def test_or_order(self):
        """Test left results come first, then new right results."""
        self.assertEqual(
            self.run_query("name == 'report.txt' or name == w'img*'"), [REPORT, IMG001, IMG002]
        )

    def test_and_not_is_difference(self):
        self.assertEqual(
            self.run_query("(name == w'img*') and not (attribute:'exif.make' == 'Canon')"),
            [IMG002],
        )

    def test_and(self):
        self.assertEqual(
            self.run_query("attribute.name == 'size' and data == t'Canon'"), [IMG001]
        )

    def test_left_to_right_fold(self):
        """Test A or B and C is (A or B) and C."""
        query = "name == 'readme' or name == 'report.txt' and data == t'Revenue'"

        self.assertEqual(self.run_query(query), [REPORT])
        self.assertEqual(
            self.run_query("name == 'readme' or (name == 'report.txt' and data == t'Revenue')"),
            [README, REPORT],
        )

    def test_and_not_then_or(self):
        query = "name == w'*.txt' and not name == 'notes.txt' or name == 'readme'"

        self.assertEqual(self.run_query(query), [REPORT, README])

    def test_result_is_subset_of_candidates(self):
        candidates = [IMG002, NOTES, HOLIDAY]
        result = self.run_query("name == r'.' or data == '.'", candidates)

        self.assertEqual(result, [IMG002, NOTES, HOLIDAY])
        self.assertTrue(set(result) <= set(candidates))

    def test_empty_candidates(self):
        """Test an empty candidate list gives an empty result, not an error."""
        for query in (
            "name == 'x'",
            "data == t'x'",
            "attribute:w'*' == f'x' or attribute.name == r'x' and not data == 'y'",
        ):
            self.assertEqual(self.run_query(query, []), [])

    def test_deterministic(self):
        query = "name == r'\\.' or attribute.name == 'size' and not data == t'Canon'"

        self.assertEqual(self.run_query(query), self.run_query(query))

    def test_duplicate_candidates_collapsed(self):
        self.assertEqual(self.run_query("name == 'readme'", [README, README]), [README])

    def test_embedded_quote_rejected(self):
        with self.assertRaises(QuerySyntaxError):
            self.run_query("attribute:'author' == 'O'Brien'")

    def test_unknown_axis(self):
        with self.assertRaises(UnknownAxisError):
            self.run_query("size == '10'")

    def test_errors_share_base_class(self):
        """Test callers can catch every failure as QueryError."""
        for query in ("name ==", "size == 'x'", "name == r'('"):
            with self.assertRaises(QueryError):
                self.run_query(query)


class TestFilter(unittest.TestCase):
    """Tests for Filter entry points."""

    def setUp(self):
        self.tree = build_sample_tree()

    def test_nodes(self):
        self.assertEqual(
            Filter.nodes(self.tree, "name == w'*.txt'", [NOTES, REPORT]), [NOTES, REPORT]
        )

    def test_tree(self):
        self.assertEqual(Filter.tree(self.tree, "name == r'^(photos|documents)$'"), [PHOTOS, DOCUMENTS])

    def test_path(self):
        self.assertEqual(Filter.path(self.tree, "name == r'.'", "/photos"), [IMG001, IMG002, HOLIDAY])

    def test_path_with_root_name(self):
        self.assertEqual(Filter.path(self.tree, "name == r'.'", "/root/documents"), [REPORT, NOTES])

    def test_invalid_path(self):
        with self.assertRaises(InvalidPathError) as cm:
            Filter.path(self.tree, "name == 'x'", "/nowhere")
        self.assertEqual(cm.exception.kind, ErrorKind.INVALID_PATH)


if __name__ == "__main__":
    unittest.main()
