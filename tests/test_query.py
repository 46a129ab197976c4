"""Tests for the query facade and the CLI."""

import io
import json
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest.mock import patch

from parking_query import ParkingDataQuery, QueryConfig
from parking_query.cli import main
from parking_query.aggregation import entry_url
from parking_query.errors import FetchError, NotFoundError

from helpers import StaticGraphClient, catalog_facts, interval_page, parking_facts

CATALOG_URL = "http://example.org/catalog"
A = "http://a.example/parkings"
B = "http://b.example/parkings"


class TestParkingDataQuery(unittest.IsolatedAsyncioTestCase):
    """Test the facade end to end over an in-memory client."""

    async def test_resolve_then_stream_facilities(self):
        client = StaticGraphClient({
            CATALOG_URL: catalog_facts({"http://example.org/ds/a": [A], "http://example.org/ds/b": [B]}),
            A: parking_facts(A, [("p1", "P1", 10)]),
            B: parking_facts(B, [("p1", "Q1", 20), ("p2", "Q2", 30)]),
        })
        query = ParkingDataQuery(client=client)

        await query.resolve_catalog(CATALOG_URL)
        records = await query.get_facilities().collect()

        self.assertEqual(query.list_catalog(), [A, B])
        self.assertEqual(sorted(r.label for r in records), ["P1", "Q1", "Q2"])

    async def test_add_fast_path_for_unknown_dataset(self):
        """Test add_fast_path fails for a dataset outside the catalog."""
        query = ParkingDataQuery(client=StaticGraphClient({}))
        with self.assertRaises(NotFoundError):
            query.add_fast_path(A, "http://fast")

        query.add_dataset(A)
        query.add_dataset(A)
        query.add_fast_path(A, "http://fast")
        self.assertEqual(query.list_catalog(), [A])

    async def test_instances_do_not_share_catalogs(self):
        first = ParkingDataQuery(client=StaticGraphClient({}))
        second = ParkingDataQuery(client=StaticGraphClient({}))
        first.add_dataset(A)
        self.assertEqual(second.list_catalog(), [])

    async def test_bootstrap_loads_configuration(self):
        client = StaticGraphClient({CATALOG_URL: catalog_facts({"http://example.org/ds/a": [A]})})
        config = QueryConfig(catalogs=[CATALOG_URL], datasets=[B], fast_paths={B: "http://b-fast"})
        query = ParkingDataQuery(config, client=client)

        await query.bootstrap()

        self.assertEqual(query.list_catalog(), [A, B])
        self.assertEqual(query.state.entry_point(B), "http://b-fast")

    async def test_bootstrap_surfaces_catalog_errors(self):
        client = StaticGraphClient({CATALOG_URL: FetchError(CATALOG_URL, "down")})
        query = ParkingDataQuery(QueryConfig(catalogs=[CATALOG_URL]), client=client)
        with self.assertRaises(FetchError):
            await query.bootstrap()

    async def test_interval_over_empty_catalog(self):
        query = ParkingDataQuery(client=StaticGraphClient({}))
        stream = query.get_interval(1000, 2000)
        self.assertEqual(await stream.collect(), [])
        self.assertEqual(stream.errors, [])


class TestCli(unittest.TestCase):
    """Test the command line entry point without network access."""

    def run_cli(self, *argv):
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = main(list(argv))
        return code, out.getvalue(), err.getvalue()

    def test_catalog_lists_datasets(self):
        code, out, _ = self.run_cli("--dataset", A, "--dataset", B, "--dataset", A, "--format", "json", "catalog")
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out), [A, B])

    def test_unknown_fast_path_fails(self):
        code, _, err = self.run_cli("--dataset", A, "--fast-path", f"{B}=http://fast", "catalog")
        self.assertEqual(code, 1)
        self.assertIn(B, err)

    def test_missing_command_prints_help(self):
        code, out, _ = self.run_cli()
        self.assertEqual(code, 1)
        self.assertIn("usage", out)

    def test_facility_requires_dataset_url(self):
        code, _, err = self.run_cli("interval", "--from", "1000", "--to", "2000", "--facility", "uri:42")
        self.assertEqual(code, 1)
        self.assertIn("--dataset-url", err)

    def test_invalid_catalog_url_fails_cleanly(self):
        """Test a malformed catalog URL exits 1 with an error message."""
        code, _, err = self.run_cli("--catalog", "http://[::1/catalog", "catalog")
        self.assertEqual(code, 1)
        self.assertIn("error:", err)


class TestCliCommands(unittest.TestCase):
    """Test the data commands over an in-memory client."""

    def run_cli(self, documents, *argv):
        client = StaticGraphClient(documents)
        out, err = io.StringIO(), io.StringIO()
        with patch(
            "parking_query.cli.ParkingDataQuery",
            side_effect=lambda config: ParkingDataQuery(config, client=client),
        ):
            with redirect_stdout(out), redirect_stderr(err):
                code = main(list(argv))
        return code, out.getvalue(), err.getvalue()

    def test_facilities_reports_failed_sources_as_warnings(self):
        code, out, err = self.run_cli(
            {A: parking_facts(A, [("p1", "P1 Centrum", 10)])},
            "--dataset", A, "--dataset", B, "--format", "json", "facilities",
        )

        self.assertEqual(code, 0)
        records = json.loads(out)
        self.assertEqual([r["identifier"] for r in records], ["p1-centrum"])
        self.assertIn("warning:", err)
        self.assertIn(B, err)

    def test_interval_source_failure_exits_nonzero(self):
        """Test a failing interval source ends the command with exit code 1."""
        code, _, err = self.run_cli({}, "--dataset", A, "interval", "--from", "1000", "--to", "2000")
        self.assertEqual(code, 1)
        self.assertIn("error:", err)

    def test_interval_for_one_facility(self):
        entry = entry_url(A, 2000)
        code, out, _ = self.run_cli(
            {entry: interval_page(entry, [(1500, "uri:1", 5), (1600, "uri:2", 7)])},
            "--format", "json",
            "interval", "--from", "1000", "--to", "2000", "--dataset-url", A, "--facility", "uri:1",
        )

        self.assertEqual(code, 0)
        records = json.loads(out)
        self.assertEqual(len(records), 1)
        self.assertEqual(records[0]["facility_uri"], "uri:1")
        self.assertEqual(records[0]["vacant_spaces"], 5)


if __name__ == "__main__":
    unittest.main()
