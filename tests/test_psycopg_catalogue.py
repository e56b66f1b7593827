"""Tests for the psycopg2 catalogue with a mocked pool connection."""

import logging
from unittest.mock import MagicMock, patch

import pytest

from models.metro import MetroLine
from services.filters import LineFilter
from services.psycopg_catalogue import PsycopgCatalogue


@pytest.fixture
def pooled():
    """Route every get_connection() to one mocked connection."""
    conn = MagicMock()
    cur = MagicMock()
    conn.cursor.return_value.__enter__.return_value = cur
    with patch("db.connection.get_connection", return_value=conn), patch("db.connection.release_connection"):
        yield conn, cur


class TestTransactions:
    def test_insert_and_delete_share_one_commit(self, pooled, capsys):
        conn, cur = pooled
        cur.fetchone.return_value = (11,)
        cur.rowcount = 1

        assert PsycopgCatalogue().transactions() == 1

        statements = [c.args[0] for c in cur.execute.call_args_list]
        assert statements[0].startswith("INSERT INTO city")
        assert statements[1] == "DELETE FROM city WHERE id = %s;"
        assert cur.execute.call_args_list[1].args[1] == (11,)
        conn.commit.assert_called_once()
        assert capsys.readouterr().out == "Transactions\nDeleted 1 rows\n\n"

    def test_logs_transaction_outcome(self, pooled, caplog):
        _, cur = pooled
        cur.fetchone.return_value = (11,)
        cur.rowcount = 1
        with caplog.at_level(logging.INFO, logger="services.psycopg_catalogue"):
            PsycopgCatalogue().transactions()
        assert "Transaction inserted city #11 and deleted 1 row(s)" in caplog.text

    def test_failed_delete_rolls_back_insert(self, pooled):
        conn, cur = pooled
        cur.fetchone.return_value = (11,)
        cur.execute.side_effect = [None, RuntimeError("delete failed")]

        with pytest.raises(RuntimeError):
            PsycopgCatalogue().transactions()

        conn.rollback.assert_called_once()
        conn.commit.assert_not_called()


class TestDynamicFilter:
    def test_passes_composed_query_to_repository(self, capsys):
        catalogue = PsycopgCatalogue()
        line = MetroLine(id=4, system_id=2, name="Ligne 7", station_count=38)
        with patch.object(catalogue.metro, "get_lines_filtered", return_value=[line]) as get_lines:
            assert catalogue.select_lines_constrained_dynamically() == [line]

        get_lines.assert_called_once_with(LineFilter(min_stations=10, max_stations=None, sort_desc=True))
        assert capsys.readouterr().out.startswith("Lines constrained dynamically\n")
