"""
Tests for the get commands.

Runs the CLI with the in-memory client patched in for motor.
"""

import json

import yaml
from bson import Int64, ObjectId
from click.testing import CliRunner

from mongokit.cli.main import cli

TEST_URI = "mongodb://localhost:27017"
HEX_ID = "5f1d7c3e2a9b4c0012345678"


def invoke(*args, **kwargs):
    runner = CliRunner()
    return runner.invoke(cli, ["--uri", TEST_URI, *args], **kwargs)


class TestGetCommands:
    """Test the get commands."""

    def test_get_databases(self, motor_class, fake_client):
        """Test listing databases."""
        fake_client.seed("shop", "items", [{"_id": "a"}])

        result = invoke("get", "databases")

        assert result.exit_code == 0
        assert json.loads(result.output) == ["shop"]
        fake_client.close.assert_called_once()

    def test_aliases(self, motor_class, fake_client):
        """Test verb and noun aliases run the same command."""
        fake_client.seed("shop", "items", [{"_id": "a"}])

        result = invoke("g", "dbs")

        assert result.exit_code == 0
        assert json.loads(result.output) == ["shop"]

    def test_get_collections(self, motor_class, fake_client):
        """Test listing collections."""
        fake_client.seed("shop", "items", [{"_id": "a"}])
        fake_client.seed("shop", "orders", [{"_id": "b"}])

        result = invoke("get", "cols", "shop")

        assert result.exit_code == 0
        assert sorted(json.loads(result.output)) == ["items", "orders"]

    def test_get_collection_to_yaml_file(self, motor_class, fake_client, tmp_path):
        """Test writing a collection to a YAML file."""
        fake_client.seed("shop", "items", [{"_id": ObjectId(HEX_ID), "n": 1}])
        out = tmp_path / "items.yaml"

        result = invoke("get", "col", "shop", "items", str(out))

        assert result.exit_code == 0
        assert yaml.safe_load(out.read_text()) == [{"_id": HEX_ID, "n": 1}]

    def test_get_database(self, motor_class, fake_client):
        """Test fetching a whole database."""
        fake_client.seed("shop", "items", [{"_id": "a"}])

        result = invoke("get", "db", "shop")

        assert result.exit_code == 0
        assert json.loads(result.output) == [
            {"name": "items", "documents": [{"_id": "a"}]}
        ]

    def test_get_documents_csv(self, motor_class, fake_client, tmp_path):
        """Test writing document ids to CSV."""
        fake_client.seed("shop", "items", [{"_id": "a"}, {"_id": "b"}])
        out = tmp_path / "ids.csv"

        result = invoke("get", "docs", "shop", "items", str(out))

        assert result.exit_code == 0
        assert out.read_text() == "value\na\nb\n"

    def test_get_document(self, motor_class, fake_client):
        """Test fetching one document by hex id."""
        fake_client.seed("shop", "items", [{"_id": ObjectId(HEX_ID), "n": 1}])

        result = invoke("get", "doc", "shop", "items", HEX_ID)

        assert result.exit_code == 0
        assert json.loads(result.output) == {"_id": HEX_ID, "n": 1}

    def test_get_missing_document(self, motor_class):
        """Test a missing document prints null and succeeds."""
        result = invoke("get", "doc", "shop", "items", "nope")

        assert result.exit_code == 0
        assert json.loads(result.output) is None

    def test_get_collection_int64_to_yaml(self, motor_class, fake_client, tmp_path):
        """Test large integers are written to YAML files."""
        fake_client.seed("shop", "items", [{"_id": "a", "big": Int64(2**40)}])
        out = tmp_path / "items.yaml"

        result = invoke("get", "col", "shop", "items", str(out))

        assert result.exit_code == 0
        assert yaml.safe_load(out.read_text()) == [{"_id": "a", "big": 2**40}]

    def test_unsupported_output_format(self, motor_class, tmp_path):
        """Test an unknown output extension fails cleanly."""
        result = invoke("get", "dbs", str(tmp_path / "out.txt"))

        assert result.exit_code != 0
        assert "Unsupported file format" in result.output


class TestGlobalOptions:
    """Test root options and configuration errors."""

    def test_missing_uri(self, motor_class):
        """Test a missing URI fails before connecting."""
        runner = CliRunner()

        result = runner.invoke(cli, ["get", "dbs"], env={"MONGO_URI": None})

        assert result.exit_code != 0
        assert "Mongo URI must be set" in result.output
        motor_class.assert_not_called()

    def test_uri_from_environment(self, motor_class, fake_client):
        """Test MONGO_URI is used when --uri is absent."""
        runner = CliRunner()

        result = runner.invoke(cli, ["get", "dbs"], env={"MONGO_URI": TEST_URI})

        assert result.exit_code == 0
        assert motor_class.call_args.args[0] == TEST_URI

    def test_timeout_option(self, motor_class):
        """Test --timeout-ms reaches the driver."""
        result = invoke("--timeout-ms", "250", "get", "dbs")

        assert result.exit_code == 0
        assert motor_class.call_args.kwargs["serverSelectionTimeoutMS"] == 250

    def test_unknown_noun(self, motor_class):
        """Test a misspelled command is a usage error."""
        result = invoke("get", "databse")

        assert result.exit_code != 0
        motor_class.assert_not_called()

    def test_version(self):
        """Test --version prints the version."""
        result = CliRunner().invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "mongokit" in result.output

    def test_help_lists_verbs(self):
        """Test the root help lists get, set and update."""
        result = CliRunner().invoke(cli, ["--help"])

        assert result.exit_code == 0
        for verb in ("get", "set", "update"):
            assert verb in result.output
