"""End-to-end tests for the SQLAlchemy catalogue on a seeded SQLite database."""

import logging

import pytest

from models.city import City
from models.metro import TrackType
from models.projections import MetroSystemWithCity
from services.catalogue import INVALID_CITY_NAME
from services.filters import LineFilter
from services.sqlalchemy_catalogue import SqlAlchemyCatalogue


@pytest.fixture
def catalogue(session_factory):
    return SqlAlchemyCatalogue(session_factory)


class TestInsertAndRead:
    def test_insert_returns_generated_id(self, catalogue, capsys):
        city = catalogue.insert_with_generated_id()
        assert city.id is not None
        assert city.id not in (1, 2, 3)
        assert f"Inserted, generated id: {city.id}" in capsys.readouterr().out

    def test_read_back_by_id_is_identical(self, catalogue):
        inserted = catalogue.insert_with_generated_id()
        assert catalogue.get_city(inserted.id) == inserted
        assert inserted == City(id=inserted.id, name="New York", population=19795791, area=141300.0)

    def test_get_missing_city(self, catalogue):
        assert catalogue.get_city(999) is None


class TestSelects:
    def test_select_all(self, catalogue):
        assert [c.name for c in catalogue.select_all()] == ["Warszawa", "Paris", "Chicago"]

    def test_select_all_lines_decodes_track_type(self, catalogue):
        lines = catalogue.select_all_lines()
        assert len(lines) == 7
        assert lines[2].track_type is TrackType.RUBBER

    def test_select_names_of_big(self, catalogue):
        assert catalogue.select_names_of_big() == []
        catalogue.insert_with_generated_id()
        assert catalogue.select_names_of_big() == ["New York"]

    def test_systems_with_city_names(self, catalogue):
        assert catalogue.select_metro_systems_with_city_names()[1] == MetroSystemWithCity(
            "Métro de Paris", "Paris", 4160000
        )

    def test_lines_sorted_by_stations(self, catalogue):
        rows = catalogue.select_metro_lines_sorted_by_stations()
        counts = [r.station_count for r in rows]
        assert counts == sorted(counts, reverse=True)
        assert (rows[0].metro_line_name, rows[0].metro_system_name, rows[0].city_name) == (
            "Ligne 7",
            "Métro de Paris",
            "Paris",
        )

    def test_systems_with_most_lines(self, catalogue):
        rows = catalogue.select_metro_systems_with_most_lines()
        assert rows[0].metro_system_name == "Métro de Paris"
        assert rows[0].line_count == 3
        assert {r.metro_system_name: r.line_count for r in rows} == {
            "Métro de Paris": 3,
            "Metro Warszawskie": 2,
            "CTA Rail": 2,
        }

    def test_cities_with_systems_and_lines(self, catalogue):
        cities = catalogue.select_cities_with_systems_and_lines()
        assert [c.name for c in cities] == ["Warszawa", "Paris", "Chicago"]
        lines = [l for c in cities for s in c.systems for l in s.lines]
        assert sorted(l.id for l in lines) == [1, 2, 3, 4, 5, 6, 7]
        for city in cities:
            for system in city.systems:
                assert all(l.system_id == system.id for l in system.lines)

    def test_plain_sql(self, catalogue):
        rows = catalogue.plain_sql()
        assert [r.metro_system_name for r in rows] == ["Métro de Paris", "CTA Rail", "Metro Warszawskie"]
        assert rows[0] == MetroSystemWithCity("Métro de Paris", "Paris", 4160000)


class TestDynamicFilter:
    def test_min_ten_descending(self, catalogue):
        lines = catalogue.select_lines_constrained_dynamically()
        assert [l.station_count for l in lines] == [38, 33, 27, 25, 21, 13]

    def test_range_ascending(self, catalogue):
        lines = catalogue.select_lines_constrained_dynamically(LineFilter(min_stations=10, max_stations=25))
        assert [l.station_count for l in lines] == [13, 21, 25]

    def test_no_bounds_returns_everything(self, catalogue):
        assert len(catalogue.select_lines_constrained_dynamically(LineFilter())) == 7


class TestTransactions:
    def test_insert_then_delete(self, catalogue, capsys):
        assert catalogue.transactions() == 1
        assert catalogue.count_cities_named(INVALID_CITY_NAME) == 0
        assert capsys.readouterr().out == "Transactions\nDeleted 1 rows\n\n"

    def test_logs_transaction_outcome(self, catalogue, caplog):
        with caplog.at_level(logging.INFO, logger="services.sqlalchemy_catalogue"):
            catalogue.transactions()
        assert "and deleted 1 row(s)" in caplog.text

    def test_failed_delete_rolls_back_insert(self, catalogue, monkeypatch):
        def boom(session, city_id):
            raise RuntimeError("delete failed")

        monkeypatch.setattr(SqlAlchemyCatalogue, "_delete_city", staticmethod(boom))
        with pytest.raises(RuntimeError):
            catalogue.transactions()
        assert catalogue.count_cities_named(INVALID_CITY_NAME) == 0


class TestRunAll:
    def test_runs_every_operation_in_order(self, catalogue, capsys):
        catalogue.run_all()
        out = capsys.readouterr().out
        labels = [
            "Inserted, generated id:",
            "All cities",
            "All lines",
            "All city names with population over 4M",
            "Metro systems with city names",
            "Metro lines sorted by station count",
            "Metro systems with most lines",
            "Cities with list of systems with list of lines",
            "Lines constrained dynamically",
            "Plain sql",
            "Transactions",
            "Deleted 1 rows",
        ]
        positions = [out.index(label) for label in labels]
        assert positions == sorted(positions)
