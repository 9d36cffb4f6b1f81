"""Tests for document commands: insert, get, find, count, delete, patch, replace, explain."""

import json

from sqldoc.cli import _exitcodes as ec
from sqldoc.engine import connect
from sqldoc.table import Table
from tests.cli.conftest import invoke


def _stored(db_path, id):
    conn = connect(db_path)
    try:
        return Table(conn, "jedi").get_by_id(id)
    finally:
        conn.close()


class TestInsert:
    def test_insert_object(self, runner, cli_db):
        result = invoke(
            runner, ["--json", "insert", "jedi", '{"name": "yoda", "age": 900}'], cli_db
        )
        assert result.exit_code == 0
        (doc,) = json.loads(result.output)
        assert doc["name"] == "yoda"
        assert _stored(cli_db, doc["id"]) == doc

    def test_insert_array(self, runner, cli_db):
        result = invoke(
            runner, ["--json", "insert", "jedi", '[{"id": "a"}, {"id": "b", "x": 1}]'], cli_db
        )
        assert result.exit_code == 0
        assert [d["id"] for d in json.loads(result.output)] == ["a", "b"]

    def test_insert_from_file(self, runner, cli_db, tmp_path):
        path = tmp_path / "doc.json"
        path.write_text('{"id": "from-file"}')
        result = invoke(runner, ["insert", "jedi", "--file", str(path)], cli_db)
        assert result.exit_code == 0
        assert json.loads(result.output.strip()) == {"id": "from-file"}

    def test_insert_text_mode_is_one_line_per_doc(self, runner, cli_db):
        result = invoke(runner, ["insert", "jedi", '[{"id": "a"}, {"id": "b"}]'], cli_db)
        assert result.exit_code == 0
        assert result.output.splitlines() == ['{"id":"a"}', '{"id":"b"}']

    def test_insert_invalid_json(self, runner, cli_db):
        result = invoke(runner, ["insert", "jedi", "{not json"], cli_db)
        assert result.exit_code == ec.USAGE_ERROR

    def test_insert_non_object(self, runner, cli_db):
        result = invoke(runner, ["insert", "jedi", "[1, 2]"], cli_db)
        assert result.exit_code == ec.USAGE_ERROR

    def test_insert_duplicate_id(self, runner, seeded_db):
        result = invoke(runner, ["insert", "jedi", '{"id": "luke"}'], seeded_db)
        assert result.exit_code == ec.DATABASE_ERROR


class TestGet:
    def test_get(self, runner, seeded_db):
        result = invoke(runner, ["get", "jedi", "luke"], seeded_db)
        assert result.exit_code == 0
        assert json.loads(result.output) == {"id": "luke", "name": "luke", "age": 42}

    def test_get_missing_document(self, runner, seeded_db):
        result = invoke(runner, ["get", "jedi", "vader"], seeded_db)
        assert result.exit_code == ec.NOT_FOUND

    def test_get_missing_table(self, runner, seeded_db):
        result = invoke(runner, ["get", "sith", "vader"], seeded_db)
        assert result.exit_code == ec.NOT_FOUND

    def test_get_missing_database(self, runner, tmp_path):
        result = invoke(runner, ["get", "jedi", "luke"], str(tmp_path / "missing.db"))
        assert result.exit_code == ec.DATABASE_ERROR


class TestFind:
    def test_find_all(self, runner, seeded_db):
        result = invoke(runner, ["--json", "find", "jedi"], seeded_db)
        assert result.exit_code == 0
        assert len(json.loads(result.output)) == 5

    def test_find_where(self, runner, seeded_db):
        result = invoke(
            runner,
            ["--json", "find", "jedi", "--where", "$age > ?", "--arg", "42", "--order-by", "age"],
            seeded_db,
        )
        assert result.exit_code == 0
        assert [d["name"] for d in json.loads(result.output)] == ["rey", "grogu"]

    def test_find_filter_desc_limit(self, runner, seeded_db):
        result = invoke(
            runner,
            [
                "--json",
                "find",
                "jedi",
                "--filter",
                "age lte 42",
                "--order-by",
                "$name",
                "--desc",
                "--limit",
                "2",
            ],
            seeded_db,
        )
        assert result.exit_code == 0
        assert [d["name"] for d in json.loads(result.output)] == ["luke", "leia"]

    def test_find_multiple_filters(self, runner, seeded_db):
        result = invoke(
            runner,
            ["--json", "find", "jedi", "--filter", "age eq 42", "--filter", "name like '\"l%a\"'"],
            seeded_db,
        )
        assert result.exit_code == 0
        assert [d["id"] for d in json.loads(result.output)] == ["leia"]

    def test_find_bad_filter(self, runner, seeded_db):
        result = invoke(runner, ["find", "jedi", "--filter", "age approx 42"], seeded_db)
        assert result.exit_code == ec.USAGE_ERROR

    def test_find_filter_missing_value(self, runner, seeded_db):
        result = invoke(runner, ["find", "jedi", "--filter", "age eq"], seeded_db)
        assert result.exit_code == ec.USAGE_ERROR

    def test_find_placeholder_mismatch(self, runner, seeded_db):
        result = invoke(runner, ["find", "jedi", "--where", "$age > ?"], seeded_db)
        assert result.exit_code == ec.USAGE_ERROR

    def test_find_bad_sql(self, runner, seeded_db):
        result = invoke(runner, ["find", "jedi", "--where", "$age >"], seeded_db)
        assert result.exit_code == ec.DATABASE_ERROR


class TestCount:
    def test_count(self, runner, seeded_db):
        result = invoke(runner, ["count", "jedi"], seeded_db)
        assert result.exit_code == 0
        assert result.output.strip() == "5"

    def test_count_filtered_json(self, runner, seeded_db):
        result = invoke(runner, ["--json", "count", "jedi", "--filter", "age eq 42"], seeded_db)
        assert result.exit_code == 0
        assert json.loads(result.output) == {"table": "jedi", "count": 2}


class TestDelete:
    def test_delete_by_id(self, runner, seeded_db):
        result = invoke(runner, ["--json", "delete", "jedi", "--id", "finn"], seeded_db)
        assert result.exit_code == 0
        assert json.loads(result.output) == {"table": "jedi", "deleted": 1}
        assert _stored(seeded_db, "finn") is None

    def test_delete_requires_selection(self, runner, seeded_db):
        result = invoke(runner, ["delete", "jedi"], seeded_db)
        assert result.exit_code == ec.USAGE_ERROR
        assert _stored(seeded_db, "finn") is not None

    def test_delete_all(self, runner, seeded_db):
        result = invoke(runner, ["--json", "delete", "jedi", "--all"], seeded_db)
        assert result.exit_code == 0
        assert json.loads(result.output)["deleted"] == 5


class TestPatch:
    def test_patch_by_id(self, runner, seeded_db):
        result = invoke(
            runner, ["--json", "patch", "jedi", '{"rank": "master"}', "--id", "luke"], seeded_db
        )
        assert result.exit_code == 0
        assert json.loads(result.output) == {"table": "jedi", "patched": 1}
        assert _stored(seeded_db, "luke")["rank"] == "master"

    def test_patch_null_removes_key(self, runner, seeded_db):
        result = invoke(runner, ["patch", "jedi", '{"age": null}', "--id", "rey"], seeded_db)
        assert result.exit_code == 0
        assert _stored(seeded_db, "rey") == {"id": "rey", "name": "rey"}

    def test_patch_dry_run(self, runner, seeded_db):
        result = invoke(
            runner,
            ["--json", "patch", "jedi", '{"age": 43}', "--filter", "age eq 42", "--dry-run"],
            seeded_db,
        )
        assert result.exit_code == 0
        preview = json.loads(result.output)
        assert sorted(d["id"] for d in preview) == ["leia", "luke"]
        assert all(d["age"] == 43 for d in preview)
        assert _stored(seeded_db, "luke")["age"] == 42

    def test_patch_requires_selection(self, runner, seeded_db):
        result = invoke(runner, ["patch", "jedi", '{"age": 1}'], seeded_db)
        assert result.exit_code == ec.USAGE_ERROR


class TestReplace:
    def test_replace(self, runner, seeded_db):
        result = invoke(
            runner, ["--json", "replace", "jedi", '{"id": "finn", "name": "fn"}', "--id", "finn"],
            seeded_db,
        )
        assert result.exit_code == 0
        assert json.loads(result.output)["replaced"] == 1
        assert _stored(seeded_db, "finn") == {"id": "finn", "name": "fn"}

    def test_replace_non_object(self, runner, seeded_db):
        result = invoke(runner, ["replace", "jedi", '"x"', "--id", "finn"], seeded_db)
        assert result.exit_code == ec.USAGE_ERROR


class TestExplain:
    def test_explain_id_lookup(self, runner, seeded_db):
        result = invoke(runner, ["--json", "explain", "jedi", "--id", "luke"], seeded_db)
        assert result.exit_code == 0
        plan = json.loads(result.output)["plan"]
        assert any("jedi_data_id" in line for line in plan)

    def test_explain_text(self, runner, seeded_db):
        result = invoke(runner, ["explain", "jedi", "--filter", "name eq '\"luke\"'"], seeded_db)
        assert result.exit_code == 0
        assert "SCAN" in result.output
