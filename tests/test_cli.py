"""Tests for the command-line interface."""

import json

import pytest

from report_pager.cli import main


def test_sample_then_paginate(tmp_path, capsys):
    table_path = tmp_path / "table.json"
    assert main(["sample", str(table_path), "--variant", "aggregate", "--groups", "8", "--seed", "4"]) == 0

    out_path = tmp_path / "pages.json"
    assert main(["paginate", str(table_path), "-o", str(out_path), "--variant", "aggregate"]) == 0

    document = json.loads(out_path.read_text(encoding="utf-8"))
    table = json.loads(table_path.read_text(encoding="utf-8"))
    rows = [row for page in document["pages"] for row in page["rows"]]
    assert rows == table["rows"]
    assert document["pages"][-1]["grandTotal"] == table["grandTotal"]

    output = capsys.readouterr().out
    assert f"into {document['totalPages']} pages" in output
    assert "Page 1:" in output


def test_paginate_default_output_and_jsonl(tmp_path):
    table_path = tmp_path / "report.json"
    table_path.write_text(json.dumps({
        "headers": [{"cells": [{"text": "Name"}]}],
        "rows": [{"type": "data", "cells": [{"text": str(i)}]} for i in range(40)],
    }))

    assert main(["paginate", str(table_path), "--jsonl"]) == 0

    lines = (tmp_path / "report.pages.jsonl").read_text(encoding="utf-8").splitlines()
    assert [len(json.loads(line)["rows"]) for line in lines] == [28, 12]


def test_paginate_with_config(tmp_path):
    config_path = tmp_path / "pager.yaml"
    config_path.write_text("page_size: A5\norientation: landscape\n")
    table_path = tmp_path / "report.json"
    table_path.write_text(json.dumps({
        "rows": [{"cells": [{"text": str(i)}]} for i in range(25)],
    }))
    out_path = tmp_path / "pages.json"

    assert main(["paginate", str(table_path), "-o", str(out_path), "--config", str(config_path)]) == 0

    document = json.loads(out_path.read_text(encoding="utf-8"))
    assert [len(p["rows"]) for p in document["pages"]] == [10, 10, 5]


def test_paginate_rejects_invalid_table(tmp_path, capsys, caplog):
    table_path = tmp_path / "bad.json"
    table_path.write_text(json.dumps({"rows": [{"type": "data"}]}))

    with pytest.raises(SystemExit) as excinfo:
        main(["paginate", str(table_path)])

    assert excinfo.value.code == 2
    assert "rows[0]" in capsys.readouterr().err
    assert "cli.table_invalid" in caplog.text


def test_paginate_missing_input(tmp_path, caplog):
    with pytest.raises(SystemExit) as excinfo:
        main(["paginate", str(tmp_path / "missing.json")])
    assert excinfo.value.code == 2
    assert "cli.input_missing" in caplog.text


def test_budget_command(capsys):
    assert main(["budget", "--page-size", "Letter", "--orientation", "portrait"]) == 0
    output = capsys.readouterr().out
    assert "Max data rows per page: 28" in output
    assert "available: 795.6px" in output


def test_budget_multi_row_headers(capsys):
    assert main(["budget", "--header-rows", "2", "--page-size", "A4"]) == 0
    assert "Max data rows per page: 29" in capsys.readouterr().out
