import pandas as pd

from beatwise.census import build_frequency_tables, field_frequency


class TestFrequencyTables:
    def test_every_table_sums_to_record_count(self, incidents):
        tables = build_frequency_tables(incidents)
        assert set(tables) == set(incidents.columns)
        for table in tables.values():
            assert sum(table.values()) == len(incidents)

    def test_counts_blanks_and_placeholders(self, incidents):
        tables = build_frequency_tables(incidents)
        assert tables["latitude"] == {"12.30": 3, "12.31": 2, "-": 1, "12.32": 1, "12.52": 1}
        assert tables["Crime_Type"][""] == 1
        assert tables["place_of_offence"]["null"] == 1

    def test_explicit_fields(self, incidents):
        tables = build_frequency_tables(incidents, ["beat_name", "victim_caste"])
        assert tables["beat_name"] == {"Beat 1": 3, "Beat 2": 3, "Beat 7": 1, "Beat 9": 1}
        assert tables["victim_caste"] == {"": 8}

    def test_untrimmed_values_stay_distinct(self):
        records = pd.DataFrame({"Crime_Type": ["Theft", "Theft ", "Theft"]})
        assert field_frequency(records, "Crime_Type") == {"Theft": 2, "Theft ": 1}

    def test_empty(self, empty_incidents):
        tables = build_frequency_tables(empty_incidents)
        assert all(table == {} for table in tables.values())
