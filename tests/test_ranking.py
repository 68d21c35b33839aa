import pandas as pd
import pytest

from beatwise.ranking import is_placeholder, rank_counts, top_locations, top_occurrences


def crime_types(values):
    return pd.DataFrame({"Crime_Type": values})


class TestPlaceholder:
    @pytest.mark.parametrize("value", ["", " ", "-", "--", "--,  -", ",", " - , "])
    def test_placeholders(self, value):
        assert is_placeholder(value)

    @pytest.mark.parametrize("value", ["Theft", "12.30", "-76.6", "a-b"])
    def test_real_values(self, value):
        assert not is_placeholder(value)


class TestTopOccurrences:
    def test_excludes_blanks_and_placeholders(self):
        records = crime_types(["Theft", "Theft", "-", "", "Assault"])
        assert top_occurrences(records, "Crime_Type", 2) == [("Theft", 2), ("Assault", 1)]

    def test_placeholders_never_ranked(self):
        records = crime_types(["-"] * 50 + ["  "] * 20 + ["--,  -"] * 10 + ["Theft"])
        assert top_occurrences(records, "Crime_Type") == [("Theft", 1)]

    def test_ties_keep_first_seen_order(self):
        records = crime_types(["Robbery", "Assault", "Theft", "Assault", "Theft", "Robbery"])
        assert top_occurrences(records, "Crime_Type") == [("Robbery", 2), ("Assault", 2), ("Theft", 2)]

    def test_limit_and_non_increasing_counts(self):
        records = crime_types(list("aabbbcdddde"))
        ranked = top_occurrences(records, "Crime_Type", 3)
        assert len(ranked) == 3
        counts = [n for _, n in ranked]
        assert counts == sorted(counts, reverse=True)
        assert ranked == [("d", 4), ("b", 3), ("a", 2)]

    def test_fewer_values_than_limit(self):
        assert top_occurrences(crime_types(["Theft"]), "Crime_Type", 10) == [("Theft", 1)]

    def test_empty_inputs(self, empty_incidents):
        assert top_occurrences(empty_incidents, "Crime_Type") == []
        assert top_occurrences(crime_types(["", "-"]), "Crime_Type") == []
        assert top_occurrences(crime_types(["Theft"]), "missing_field") == []

    def test_zero_limit(self):
        assert top_occurrences(crime_types(["Theft"]), "Crime_Type", 0) == []

    def test_rank_counts_keeps_placeholders(self):
        assert rank_counts(pd.Series(["-", "Theft", "-"])) == [("-", 2), ("Theft", 1)]


class TestTopLocations:
    def test_pairs_each_latitude(self, incidents):
        mysuru = incidents[incidents["district_name"] == "Mysuru"]
        locations = top_locations(mysuru)
        assert [loc["latitude"] for loc in locations] == ["12.30", "12.31", "12.32"]
        assert locations[0] == {"latitude": "12.30", "longitude": "76.65", "crime_type": "Theft", "count": 3}
        assert locations[1]["longitude"] == "76.66"
        assert locations[1]["crime_type"] == "Assault"

    def test_sub_filter_requires_longitude(self):
        records = pd.DataFrame(
            {
                "latitude": ["12.1", "12.1", "12.1"],
                "longitude": ["", "", "77.0"],
                "Crime_Type": ["Theft", "Theft", "Assault"],
            }
        )
        (location,) = top_locations(records)
        assert location["count"] == 3
        assert location["longitude"] == "77.0"
        assert location["crime_type"] == "Assault"

    def test_placeholder_longitude_gives_none(self):
        records = pd.DataFrame({"latitude": ["12.1"], "longitude": ["-"], "Crime_Type": [""]})
        assert top_locations(records) == [
            {"latitude": "12.1", "longitude": None, "crime_type": None, "count": 1}
        ]

    def test_limit(self, incidents):
        assert len(top_locations(incidents, 2)) == 2
