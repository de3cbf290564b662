import pytest

from popravci.models import ProfessionalRecord
from popravci.search import DirectorySnapshot


def make_record(id, name, **fields):
    return ProfessionalRecord.model_validate({"id": id, "name": name, **fields})


@pytest.fixture
def scenario_records():
    return [
        make_record("r1", "Ivan Horvat", categories=["Vodoinstalacije"], location="Zagreb"),
        make_record("r2", "Ana Babić", categories=["Električne instalacije"], location="Split"),
        make_record("r3", "Marko Ivić", categories=["Vodoinstalacije"], location="Zagreb"),
    ]


@pytest.fixture
def scenario_snapshot(scenario_records):
    return DirectorySnapshot(scenario_records)


@pytest.fixture
def directory_snapshot():
    return DirectorySnapshot([
        make_record(
            "a", "Ivan Horvat",
            categories=["Vodoinstalacije", "Kupaonica"], languages=["Hrvatski", "English"],
            location="Zagreb", service_area="Zagreb i okolica",
            wait_time_days=2, emergency_available=True,
            created_at="2024-02-11T09:15:00+00:00",
        ),
        make_record(
            "b", "ana Babić",
            categories=["Električne instalacije"], languages=["Hrvatski", "Deutsch"],
            location="Split", service_area="Dalmacija",
            wait_time_days=5, weekend_evening=True,
            created_at="2024-03-02T14:40:00+00:00",
        ),
        make_record(
            "c", "Marko Ivić",
            categories=["2. Vodoinstalacije"], languages=["Hrvatski"],
            location="Zagreb", service_area="Novi Zagreb",
            wait_time_days=None,
            created_at="2023-11-20T08:00:00+00:00",
        ),
        make_record(
            "d", "Petra Kovač",
            categories=["Klima / Grijanje"], languages=["Italiano"],
            location="Rijeka", wait_time_days=7,
            emergency_available=True, weekend_evening=True,
            bio="<p>Servis klima uređaja</p>",
            created_at=None,
        ),
        make_record(
            "e", "Tomislav Jurić",
            categories=None, languages=None,
            location=None, service_area="Split i okolica",
            wait_time_days=1,
            created_at="2024-01-03T11:30:00+00:00",
        ),
    ])
