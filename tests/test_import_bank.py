import json

from civicsflash.filework import load_raw_bank
from civicsflash.import_bank import main, merge_categories


def _write_sheet(path, rows):
    lines = ["Category,ID,Question,Answers"] + [",".join(row) for row in rows]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")


def test_merge_categories_joins_same_names():
    merged = merge_categories(
        [
            [{"name": "History", "questions": [{"id": 1}]}],
            [{"name": "Geography", "questions": [{"id": 2}]}, {"name": "History", "questions": [{"id": 3}]}],
        ]
    )

    assert merged == [
        {"name": "History", "questions": [{"id": 1}, {"id": 3}]},
        {"name": "Geography", "questions": [{"id": 2}]},
    ]


def test_main_writes_bank(tmp_path, capsys):
    first = tmp_path / "one.csv"
    second = tmp_path / "two.csv"
    _write_sheet(first, [("History", "1", "First president?", "George Washington")])
    _write_sheet(second, [("Geography", "88", "Longest river?", "Missouri;Mississippi")])
    output = tmp_path / "res" / "questions.json"

    assert main([str(first), str(second), "--output", str(output)]) == 0

    categories = load_raw_bank(output)
    assert [category["name"] for category in categories] == ["History", "Geography"]
    assert categories[1]["questions"][0]["answers"] == ["Missouri", "Mississippi"]
    assert "Wrote 2 question(s)" in capsys.readouterr().out


def test_dry_run_leaves_bank_untouched(tmp_path, capsys):
    sheet = tmp_path / "one.csv"
    _write_sheet(sheet, [("History", "1", "First president?", "George Washington")])
    output = tmp_path / "questions.json"
    output.write_text(json.dumps({"categories": []}), encoding="utf-8")

    assert main([str(sheet), "--output", str(output), "--dry-run"]) == 0

    assert json.loads(output.read_text(encoding="utf-8")) == {"categories": []}
    assert "Would write 1 question(s)" in capsys.readouterr().out
