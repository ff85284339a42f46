import os
import pathlib
import subprocess
import sys
import tempfile

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))


def _run(*args, stdin=b""):
    cmd = [sys.executable, "-m", "json_tool", *args]
    return subprocess.run(cmd, cwd=REPO_ROOT, input=stdin, capture_output=True)


def test_stdin_is_pretty_printed_with_two_spaces():
    cp = _run(stdin=b'{"b": [true, null], "a": 1}')
    assert cp.returncode == 0
    assert cp.stdout.decode("utf-8") == '{\n  "a": 1,\n  "b": [\n    true,\n    null\n  ]\n}\n'
    assert cp.stderr == b""


def test_invalid_input_reports_prefixed_error():
    cp = _run(stdin=b"[1,]")
    assert cp.returncode == 1
    assert cp.stdout == b""
    err = cp.stderr.decode("utf-8")
    assert err.startswith("ERROR: Invalid JSON - ")
    assert "trailing comma in array" in err


def test_non_ascii_round_trips_as_utf8():
    cp = _run(stdin='"\\uD83D\\uDE02 café"'.encode("utf-8"))
    assert cp.returncode == 0
    assert cp.stdout.decode("utf-8") == '"\U0001F602 café"\n'


def test_invalid_utf8_is_rejected():
    cp = _run(stdin=b'"\xff"')
    assert cp.returncode == 1
    assert b"not valid UTF-8" in cp.stderr


def test_compact_and_indent_flags():
    assert _run("--compact", stdin=b'{"b":1, "a":[ ]}').stdout == b'{"a":[],"b":1}\n'
    assert _run("--indent", "4", stdin=b"[1]").stdout == b"[\n    1\n]\n"


def test_max_depth_flag():
    cp = _run("--max-depth", "1", stdin=b"[[1]]")
    assert cp.returncode == 1
    assert b"depth limit of 1 exceeded" in cp.stderr


def test_file_argument():
    with tempfile.NamedTemporaryFile("w", suffix=".json", delete=False, encoding="utf-8") as f:
        f.write("[1,2,3]")
        fname = f.name
    try:
        cp = _run(fname, "--compact")
        assert cp.returncode == 0
        assert cp.stdout == b"[1,2,3]\n"
    finally:
        pathlib.Path(fname).unlink(missing_ok=True)


def test_debug_flag_logs_to_stderr():
    cp = _run("--debug", stdin=b"[]")
    assert cp.returncode == 0
    assert b"DEBUG json_parser: parsed 2 characters into Array" in cp.stderr


def test_negative_indent_is_a_usage_error():
    cp = _run("--indent", "-1", stdin=b"[]")
    assert cp.returncode == 2


def test_missing_file_reports_clean_error():
    cp = _run(os.path.join(REPO_ROOT, "no-such-file.json"))
    assert cp.returncode == 1
    assert cp.stderr.startswith(b"ERROR: cannot read ")
    assert b"Traceback" not in cp.stderr


def test_max_depth_above_ceiling_is_a_usage_error():
    cp = _run("--max-depth", "5010", stdin=b"[]")
    assert cp.returncode == 2
    assert b"--max-depth must be between 0 and" in cp.stderr
