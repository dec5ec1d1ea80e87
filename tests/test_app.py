"""Tests for the command-line front end."""

import json

import pytest

from notescore import __version__
from notescore.app import escape_id, main


def score_lines(out: str) -> dict:
    lines = [l for l in out.splitlines() if "\t" in l]
    return {note_id: float(score) for note_id, score in (l.split("\t") for l in lines)}


class TestScoreCommand:

    def test_scores_every_note_in_order(self, notes_file, capsys):
        main(["score", "--query", "Meeting", "--input", str(notes_file)])
        out = capsys.readouterr().out

        ids = [l.split("\t")[0] for l in out.splitlines() if "\t" in l]
        assert ids == ["aB12cD", "xY98zW", "_hidden"]

        scores = score_lines(out)
        assert scores["aB12cD"] > scores["_hidden"] > scores["xY98zW"]

    def test_identifier_query(self, notes_file, capsys):
        """The CLI lowercases the query, so mixed-case ids still match."""
        main(["score", "--query", "AB12CD", "--input", str(notes_file)])
        scores = score_lines(capsys.readouterr().out)
        assert scores["aB12cD"] >= 1000.0

    def test_explain(self, notes_file, capsys):
        main(["score", "--query", "meeting", "--input", str(notes_file), "--explain"])
        out = capsys.readouterr().out
        assert "  title: 500.0" in out
        assert "  hidden: True" in out

    def test_explicit_tokens_and_no_fuzzy(self, tmp_path, capsys):
        notes = tmp_path / "one.json"
        notes.write_text(json.dumps({"id": "n1", "title": "care"}))

        main(["score", "--query", "cart", "--input", str(notes)])
        fuzzy_on = score_lines(capsys.readouterr().out)["n1"]

        main(["score", "--query", "cart", "--tokens", "cart", "--input", str(notes), "--no-fuzzy"])
        fuzzy_off = score_lines(capsys.readouterr().out)["n1"]

        assert fuzzy_on == pytest.approx(62.0)
        assert fuzzy_off == 0.0

    def test_invalid_notes_are_skipped(self, tmp_path, capsys):
        notes = tmp_path / "mixed.json"
        notes.write_text(json.dumps([{"id": "bad"}, {"id": "good", "title": "cat"}]))

        main(["score", "--query", "cat", "--input", str(notes)])
        scores = score_lines(capsys.readouterr().out)

        assert list(scores) == ["good"]

    def test_missing_input(self, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            main(["score", "--query", "cat", "--input", str(tmp_path / "nope.json")])
        assert "Input file not found" in str(exc_info.value)

    def test_malformed_json(self, tmp_path):
        notes = tmp_path / "broken.json"
        notes.write_text("{not json")
        with pytest.raises(SystemExit) as exc_info:
            main(["score", "--query", "cat", "--input", str(notes)])
        assert "Invalid JSON" in str(exc_info.value)

    def test_bad_weight_override(self, notes_file, monkeypatch):
        monkeypatch.setenv("NOTESCORE_TITLE_FACTOR", "heavy")
        with pytest.raises(SystemExit) as exc_info:
            main(["score", "--query", "cat", "--input", str(notes_file)])
        assert "NOTESCORE_TITLE_FACTOR" in str(exc_info.value)

    def test_zero_hidden_penalty_is_rejected(self, tmp_path, monkeypatch):
        """A zero divisor stops the run with a config message instead of crashing."""
        notes = tmp_path / "hidden.json"
        notes.write_text(json.dumps({"id": "n1", "title": "cat", "hidden": True}))
        monkeypatch.setenv("NOTESCORE_HIDDEN_NOTE_PENALTY", "0")
        with pytest.raises(SystemExit) as exc_info:
            main(["score", "--query", "cat", "--input", str(notes)])
        assert "NOTESCORE_HIDDEN_NOTE_PENALTY" in str(exc_info.value)

    def test_log_dir_writes_metrics(self, notes_file, tmp_path, capsys):
        log_dir = tmp_path / "logs"
        main(["--log-dir", str(log_dir), "score", "--query", "meeting", "--input", str(notes_file)])
        content = next(log_dir.glob("notescore_*.log")).read_text()
        assert "Scoring Session Metrics" in content

    def test_debug_log_lists_effective_weights(self, notes_file, tmp_path, monkeypatch, capsys):
        monkeypatch.setenv("NOTESCORE_PATH_FACTOR", "0.5")
        log_dir = tmp_path / "logs"
        main([
            "--log-dir", str(log_dir), "--log-level", "DEBUG",
            "score", "--query", "meeting", "--input", str(notes_file),
        ])
        content = next(log_dir.glob("notescore_*.log")).read_text()
        assert "Effective weights" in content
        assert '"path_factor": 0.5' in content

    def test_ids_with_control_characters_stay_on_one_line(self, tmp_path, capsys):
        notes = tmp_path / "odd.json"
        notes.write_text(json.dumps([{"id": "a\tb\nc\\d", "title": "cat"}]))

        main(["score", "--query", "cat", "--input", str(notes)])
        lines = capsys.readouterr().out.splitlines()

        assert lines == ["a\\tb\\nc\\\\d\t2024.0"]


class TestOtherCommands:

    def test_validate_ok(self, notes_file, capsys):
        main(["validate", "--input", str(notes_file)])
        assert capsys.readouterr().out.strip() == "Valid"

    def test_validate_failure_exits_2(self, tmp_path, capsys):
        notes = tmp_path / "bad.json"
        notes.write_text(json.dumps([{"id": "n1", "title": 5}]))
        with pytest.raises(SystemExit) as exc_info:
            main(["validate", "--input", str(notes)])
        assert exc_info.value.code == 2
        assert "Invalid note #0" in capsys.readouterr().out

    def test_normalize(self, capsys):
        main(["normalize", "Hello, World!"])
        assert capsys.readouterr().out.strip() == "hello world"

    def test_distance(self, capsys):
        main(["distance", "kitten", "sitting"])
        assert capsys.readouterr().out.strip() == "3"

    def test_distance_past_bound(self, capsys):
        main(["distance", "abcdef", "uvwxyz", "--max", "3"])
        assert capsys.readouterr().out.strip() == ">3"

    def test_version(self, capsys):
        main(["--version"])
        assert capsys.readouterr().out.strip() == __version__


class TestEscapeId:

    def test_plain_id_unchanged(self):
        assert escape_id("aB12cD") == "aB12cD"

    def test_control_characters(self):
        assert escape_id("a\tb\r\nc") == "a\\tb\\r\\nc"

    def test_backslash_is_escaped_first(self):
        """A literal backslash-t in an id must not read back as a tab."""
        assert escape_id("a\\tb") == "a\\\\tb"
