"""Tests for attribute helpers."""

import unittest
from datetime import datetime

from tap_query.attributes import (
    attribute_count,
    attribute_names,
    find_data_nodes,
    flatten_attributes,
    format_value,
)

from sample_tree import IMG001, IMG002, NOTES, PHOTOS, README, REPORT, build_sample_tree


class TestFlattenAttributes(unittest.TestCase):
    """Tests for flatten_attributes and attribute_names."""

    ATTRIBUTES = [("exif", {"make": "Canon", "gps": {"lat": 1.5}}), ("size", 3)]

    def test_flatten(self):
        self.assertEqual(
            list(flatten_attributes(self.ATTRIBUTES)),
            [("exif.make", "Canon"), ("exif.gps.lat", 1.5), ("size", 3)],
        )

    def test_flatten_mapping(self):
        self.assertEqual(list(flatten_attributes({"a": {"b": 1}})), [("a.b", 1)])

    def test_names_include_containers(self):
        self.assertEqual(
            list(attribute_names(self.ATTRIBUTES)),
            ["exif.make", "exif.gps.lat", "exif.gps", "exif", "size"],
        )


class TestFormatValue(unittest.TestCase):
    """Tests for format_value."""

    def test_values(self):
        self.assertEqual(format_value("x"), "x")
        self.assertEqual(format_value(12), "12")
        self.assertEqual(format_value(False), "false")
        self.assertEqual(format_value(b"raw"), "raw")
        self.assertEqual(format_value(datetime(2020, 1, 2, 3, 4, 5)), "2020-01-02 03:04:05")


class TestTreeHelpers(unittest.TestCase):
    """Tests for attribute_count and find_data_nodes."""

    def setUp(self):
        self.tree = build_sample_tree()

    def test_attribute_count(self):
        # img001: 3 exif + size + created, img002: 1 exif + size + created,
        # holiday: 2, report: 2, notes: 1, readme: 1
        self.assertEqual(attribute_count(self.tree), 14)

    def test_attribute_count_nodes(self):
        self.assertEqual(attribute_count(self.tree, [PHOTOS, REPORT]), 2)

    def test_find_data_nodes(self):
        self.assertEqual(find_data_nodes(self.tree), [IMG001, IMG002, REPORT, NOTES, README])

    def test_find_data_nodes_subset(self):
        self.assertEqual(find_data_nodes(self.tree, [PHOTOS, IMG002]), [IMG002])


if __name__ == "__main__":
    unittest.main()
