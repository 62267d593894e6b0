"""Tests for the emotion-radar command line."""

import json

import pytest

from emotion_radar.cli import main


@pytest.fixture
def run(tmp_path):
    workspace = str(tmp_path / "ws")

    def _run(*argv):
        return main(["--workspace", workspace, *argv])
    return _run


def test_analyze_table(run, capsys):
    assert run("analyze", "会いたい") == 0
    out = capsys.readouterr().out
    assert "* 愛情" in out
    assert "* 切なさ" in out
    assert "100.0" in out


def test_analyze_json(run, capsys):
    assert run("analyze", "悲しい", "--json") == 0
    data = json.loads(capsys.readouterr().out)
    assert data["leaders"] == ["sadness"]
    assert "sadness" in data["comments"]


def test_analyze_stdin(run, capsys, monkeypatch):
    import io
    monkeypatch.setattr("sys.stdin", io.StringIO("涙"))
    assert run("analyze", "-", "--json") == 0
    assert json.loads(capsys.readouterr().out)["leaders"] == ["sadness"]


def test_commit_and_history(run, capsys):
    assert run("commit", "会いたい") == 0
    assert run("commit", "会いたい") == 1
    capsys.readouterr()

    assert run("history", "list") == 0
    assert "会いたい" in capsys.readouterr().out

    assert run("history", "export") == 0
    items = json.loads(capsys.readouterr().out)
    assert len(items) == 1
    item_id = items[0]["id"]

    assert run("history", "pin", item_id) == 0
    assert run("history", "delete", item_id) == 1
    assert run("history", "pin", item_id) == 0
    assert run("history", "delete", item_id) == 0
    assert run("history", "delete", item_id) == 1


def test_history_import(run, tmp_path, capsys):
    good = tmp_path / "history.json"
    good.write_text(json.dumps([{"id": "a", "ts": "t", "fullText": "涙"}]), encoding="utf-8")
    bad = tmp_path / "bad.json"
    bad.write_text("{}", encoding="utf-8")

    assert run("history", "import", str(bad)) == 1
    assert run("history", "import", str(good)) == 0
    assert run("history", "clear") == 0
    assert "Removed 1 item(s)" in capsys.readouterr().out


def test_csv_to_file(run, tmp_path):
    out = tmp_path / "scores.csv"
    assert run("csv", "会いたい", "-o", str(out), "--ids") == 0
    text = out.read_text(encoding="utf-8-sig")
    assert text.splitlines()[1] == "affection,100.0"


def test_lexicon_commands(run, tmp_path, capsys):
    assert run("lexicon", "export") == 0
    exported = capsys.readouterr().out

    path = tmp_path / "lex.json"
    path.write_text(exported, encoding="utf-8")
    assert run("lexicon", "import", str(path)) == 0

    path.write_text('{"joy": []}', encoding="utf-8")
    assert run("lexicon", "import", str(path)) == 1
    assert run("lexicon", "reset") == 0


def test_stats(run, capsys):
    run("commit", "会いたい")
    capsys.readouterr()
    assert run("stats") == 0
    assert json.loads(capsys.readouterr().out)["history_items"] == 1


def test_env_workspace(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("EMOTION_RADAR_PATH", str(tmp_path / "env_ws"))
    assert main(["commit", "悲しい"]) == 0
    assert (tmp_path / "env_ws" / "history.json").exists()


@pytest.mark.parametrize("group", ["history", "lexicon"])
def test_import_unreadable_file(run, tmp_path, capsys, group):
    assert run(group, "import", str(tmp_path / "missing.json")) == 1
    assert "ERROR: cannot read" in capsys.readouterr().err

    raw = tmp_path / "latin1.json"
    raw.write_bytes(b"\xff\xfe\xfa\x80")
    assert run(group, "import", str(raw)) == 1
    assert "ERROR: cannot read" in capsys.readouterr().err


def test_history_show(run, capsys):
    run("commit", "悲しい涙")
    item_id = capsys.readouterr().out.split()[-1]

    assert run("history", "show", item_id) == 0
    assert "* 悲しみ" in capsys.readouterr().out

    assert run("history", "show", item_id, "--json") == 0
    assert json.loads(capsys.readouterr().out)["leaders"] == ["sadness"]

    assert run("history", "show", "nope") == 1
    assert "no history item nope" in capsys.readouterr().err
