import pandas as pd
import pytest

from beatwise.records import CsvRecordSource


COLUMNS = [
    "district_name", "unitname", "beat_name", "latitude", "longitude", "Crime_Type",
    "crime_group_name", "Offence_From_Date_only", "Offence_From_Time_only", "month",
    "place_of_offence", "fir_type",
]

ROWS = [
    ["Mysuru", "Nazarbad PS", "Beat 1", "12.30", "76.65", "Theft", "Property", "2023-01-01", "05:30:00", "1", "Market", "Non Heinous"],
    ["Mysuru", "Nazarbad PS", "Beat 1", "12.30", "76.65", "Theft", "Property", "2023-01-15", "05:10:00", "1", "Market", "Non Heinous"],
    ["Mysuru", "Nazarbad PS", "Beat 2", "12.31", "76.66", "Assault", "Body", "2023-02-03", "23:00:00", "2", "Road", "Heinous"],
    ["Mysuru", "Nazarbad PS", "Beat 2", "-", "-", "", "", "2023-02-10", "", "2", "null", "Non Heinous"],
    ["Mysuru", "Lashkar PS", "Beat 7", "12.32", "76.67", "Robbery", "Property", "2023-03-05", "14:00:00", "3", "House", "Heinous"],
    ["Mysuru", "Nazarbad PS", "Beat 1", "12.30", "76.64", "Assault", "Body", "2023-12-31", "05:45:00", "12", "Road", "Heinous"],
    ["Mandya", "Mandya West PS", "Beat 9", "12.52", "76.90", "Theft", "Property", "2023-06-20", "10:00:00", "6", "Market", "Non Heinous"],
    ["Mysuru", "Nazarbad PS", "Beat 2", "12.31", "76.66", "Theft", "Property", "", "05:00:00", "", "Road", "Non Heinous"],
]


@pytest.fixture
def incidents():
    return pd.DataFrame(ROWS, columns=COLUMNS, dtype=str)


@pytest.fixture
def empty_incidents():
    return pd.DataFrame(columns=COLUMNS, dtype=str)


@pytest.fixture
def csv_path(tmp_path, incidents):
    path = tmp_path / "incidents.csv"
    incidents.to_csv(path, index=False)
    return path


@pytest.fixture
def source(csv_path):
    return CsvRecordSource(str(csv_path))
