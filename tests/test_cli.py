"""Tests for the command-line harness.

WHY: The harness is how pacing changes get eyeballed, so its input
handling and output modes must behave like the library calls they wrap.

HOW: main() is called with an explicit argv. stdout/stderr are read with
capsys; stdin is replaced through monkeypatch.

RULES:
- Error paths must exit with code 1 and print "Error:" to stderr.
"""

import io
import json

import jsonschema
import pytest

from scene_timing.cli import build_parser, main


def _write_segments(tmp_path, segments):
    path = tmp_path / "segments.json"
    path.write_text(json.dumps(segments), encoding="utf-8")
    return str(path)


class TestBuildParser:

    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.input is None
        assert args.sample is None
        assert args.output == "text"
        assert args.auto_split is False
        assert args.wpm is None
        assert args.fixed_policy is None

    def test_log_level_is_case_insensitive(self):
        assert build_parser().parse_args(["--log-level", "debug"]).log_level == "DEBUG"

    def test_unknown_output_mode_rejected(self):
        with pytest.raises(SystemExit) as exc:
            build_parser().parse_args(["--output", "xml"])
        assert exc.value.code == 2


class TestMain:

    def test_default_sample_text_report(self, capsys):
        main([])
        out, err = capsys.readouterr()
        assert "TIMING DEBUG REPORT" in out
        assert "SUMMARY TABLE:" in out
        assert "Timed 10 scenes from sample 'documentary'" in err

    def test_short_sample_json(self, capsys):
        main(["--sample", "short", "--output", "json"])
        doc = json.loads(capsys.readouterr().out)
        assert len(doc["segments"]) == 2
        assert doc["segments"][0]["reason"] == "merged"
        assert doc["segments"][0]["id"] == "scene-1-merged"
        assert doc["total_duration"] == doc["segments"][-1]["end_time"]

    def test_list_samples(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--list-samples"])
        assert exc.value.code == 0
        out = capsys.readouterr().out
        assert "documentary" in out
        assert "audio" in out

    def test_input_file(self, tmp_path, capsys):
        path = _write_segments(tmp_path, [
            {"id": "a", "text": "Audio line.", "audioStart": 0, "audioEnd": 2.5},
            {"id": "b", "text": "Estimated line."},
        ])
        main([path, "--output", "json"])
        doc = json.loads(capsys.readouterr().out)
        assert [(s["start_time"], s["end_time"]) for s in doc["segments"]] == [(0.0, 2.5), (2.5, 5.5)]

    def test_stdin_input(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps({"segments": [{"id": "x", "text": "Hi."}]})))
        main(["-", "--output", "json"])
        out, err = capsys.readouterr()
        assert json.loads(out)["segments"][0]["id"] == "x"
        assert "from -" in err

    def test_beats_output(self, capsys):
        main(["--sample", "audio", "--output", "beats"])
        beats = json.loads(capsys.readouterr().out)
        assert [b["id"] for b in beats] == ["scene-1", "scene-2", "scene-3"]
        assert beats[0]["script_text"] == "This scene has audio timing."
        assert beats[0]["timing_reason"] == "narration"
        assert beats[2]["start_time"] == 8.0

    def test_option_overrides(self, tmp_path, capsys):
        path = _write_segments(tmp_path, [{"id": "a", "text": "Short."}])
        main([path, "--min-duration", "4", "--output", "json"])
        assert json.loads(capsys.readouterr().out)["segments"][0]["duration_sec"] == 4.0

    def test_auto_split_flag(self, capsys):
        main(["--sample", "long", "--auto-split", "--output", "json"])
        ids = [s["id"] for s in json.loads(capsys.readouterr().out)["segments"]]
        assert ids == ["scene-1-part1", "scene-1-part2"]

    def test_legacy_preset(self, tmp_path, capsys):
        path = _write_segments(tmp_path, [{"id": "a", "text": "Short."}])
        main([path, "--preset", "legacy", "--output", "json"])
        assert json.loads(capsys.readouterr().out)["segments"][0]["duration_sec"] == 1.8


class TestMainErrors:

    def test_unknown_preset(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--sample", "short", "--preset", "turbo"])
        assert exc.value.code == 1
        assert "Error: Unknown preset 'turbo'" in capsys.readouterr().err

    def test_input_and_sample_together(self, tmp_path, capsys):
        path = _write_segments(tmp_path, [{"id": "a"}])
        with pytest.raises(SystemExit) as exc:
            main([path, "--sample", "short"])
        assert exc.value.code == 1
        assert "not both" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc:
            main([str(tmp_path / "nope.json")])
        assert exc.value.code == 1
        assert "Error:" in capsys.readouterr().err

    def test_invalid_segments(self, tmp_path, capsys):
        path = _write_segments(tmp_path, [{"id": "a", "kind": "montage"}])
        with pytest.raises(SystemExit) as exc:
            main([path])
        assert exc.value.code == 1
        assert "Error: Invalid segment input" in capsys.readouterr().err

    def test_negative_measured_start(self, tmp_path, capsys):
        path = _write_segments(tmp_path, [{"id": "a", "measuredStart": -0.5, "measuredEnd": 3.0}])
        with pytest.raises(SystemExit) as exc:
            main([path, "--output", "json"])
        assert exc.value.code == 1
        out, err = capsys.readouterr()
        assert out == ""
        assert "Error: Invalid segment input" in err

    def test_export_validation_failure(self, monkeypatch, capsys):
        def _reject(timings):
            raise jsonschema.ValidationError("-0.5 is less than the minimum of 0")

        monkeypatch.setattr("scene_timing.cli.timeline_to_json", _reject)
        with pytest.raises(SystemExit) as exc:
            main(["--sample", "short", "--output", "json"])
        assert exc.value.code == 1
        out, err = capsys.readouterr()
        assert out == ""
        assert "Error: Timeline failed export validation" in err

    def test_min_above_max(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--sample", "short", "--min-duration", "20"])
        assert exc.value.code == 1
