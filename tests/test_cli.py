"""
Tests for the sewer command line.
"""

import os
import subprocess
import sys
import textwrap
from pathlib import Path

import pytest

import sewer
from sewer.cli import main


def run_cli(cwd: Path, *args: str) -> subprocess.CompletedProcess:
    env = os.environ.copy()
    src_root = str(Path(sewer.__file__).resolve().parent.parent)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [src_root, env.get("PYTHONPATH")]))
    return subprocess.run(
        [sys.executable, "-m", "sewer.cli", *args],
        cwd=cwd, env=env, capture_output=True, text=True, encoding="utf-8"
    )


def test_single_rewrites_file(target: Path):
    rc = main([str(target), "single", r"size=(\d+)", "size=9999"])
    assert rc == 0
    assert target.read_bytes() == b"HEAD\x00size=9999;mode=ro\x00TAIL"


def test_single_with_alternation(target: Path):
    rc = main([str(target), "single", r"mode=(?P<m>r[ow])(x)?", "(?x) mode= ($2 | $<m>)"])
    assert rc == 0
    assert b"mode=ro" in target.read_bytes()


def test_dry_run_does_not_write(target: Path, capsys):
    before = target.read_bytes()
    rc = main([str(target), "-n", "single", "ro", "rw"])
    assert rc == 0
    assert target.read_bytes() == before
    err = capsys.readouterr().err
    assert "[INFO] #single" in err
    assert "+\\x72\\x77" in err


def test_backup(target: Path, tmp_path: Path):
    before = target.read_bytes()
    backup = tmp_path / "target.orig"
    rc = main([str(target), "--backup", str(backup), "single", "ro", "rw"])
    assert rc == 0
    assert backup.read_bytes() == before
    assert target.read_bytes() == before.replace(b"ro", b"rw")


def test_error_exit_code_and_message(target: Path, capsys):
    before = target.read_bytes()
    rc = main([str(target), "single", "missing", "x"])
    assert rc == 1
    assert "source pattern not found" in capsys.readouterr().err
    assert target.read_bytes() == before


def test_bad_template_is_reported(target: Path, capsys):
    rc = main([str(target), "single", "ro", "(r$"])
    assert rc == 1
    assert "dangling '$'" in capsys.readouterr().err


def test_length_mismatch(target: Path, capsys):
    rc = main([str(target), "single", "ro", "read-only"])
    assert rc == 1
    assert "source match was 2 bytes, but result is 9" in capsys.readouterr().err


def test_missing_file(tmp_path: Path, capsys):
    rc = main([str(tmp_path / "nope.bin"), "single", "a", "b"])
    assert rc == 1
    assert capsys.readouterr().err.startswith("io:")


def test_patch_file_partial(target: Path, tmp_path: Path, capsys):
    rules = tmp_path / "fix.patch"
    rules.write_text(textwrap.dedent("""\
        #size
        -size=(\\d{4})
        +size=1234

        #absent
        -nothing here
        +whatever!!!

        #mode
        -mode=ro
        +mode=rw
    """), encoding="utf-8")

    rc = main([str(target), "patch-file", str(rules), "--partial"])

    assert rc == 1
    assert target.read_bytes() == b"HEAD\x00size=1234;mode=rw\x00TAIL"
    err = capsys.readouterr().err
    assert "rule 'absent' failed" in err
    assert "one or more rules failed" in err


def test_patch_file_without_partial_writes_nothing(target: Path, tmp_path: Path):
    before = target.read_bytes()
    rules = tmp_path / "fix.patch"
    rules.write_text("#mode\n-mode=ro\n+mode=rw\n#absent\n-zzz\n+yyy\n", encoding="utf-8")

    assert main([str(target), "patch-file", str(rules)]) == 1
    assert target.read_bytes() == before


def test_patch_file_yaml(target: Path, tmp_path: Path):
    rules = tmp_path / "fix.yaml"
    rules.write_text("rules:\n  - name: mode\n    find: 'mode=(r)o'\n    replace: '$<0>($1w)'\n", encoding="utf-8")
    # $<0> is a name lookup, not an index: it is missing, so the rule fails
    assert main([str(target), "patch-file", str(rules)]) == 1

    rules.write_text("rules:\n  - name: mode\n    find: 'mode=(r)o'\n    replace: 'mode=$1w'\n", encoding="utf-8")
    assert main([str(target), "patch-file", str(rules)]) == 0
    assert b"mode=rw" in target.read_bytes()


def test_module_entry_point(target: Path):
    cp = run_cli(target.parent, target.name, "single", "TAIL", "LIAT")
    assert cp.returncode == 0, cp.stderr
    assert target.read_bytes().endswith(b"LIAT")


def test_version(capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["--version"])
    assert exc_info.value.code == 0
    assert capsys.readouterr().out.startswith("sewer ")


def test_rule_file_that_is_not_utf8(target: Path, tmp_path: Path, capsys):
    before = target.read_bytes()
    for name in ("bad.patch", "bad.yaml"):
        rules = tmp_path / name
        rules.write_bytes(b"#r\xff\n-a\n+b\n")

        assert main([str(target), "patch-file", str(rules)]) == 1
        assert "is not valid UTF-8" in capsys.readouterr().err
    assert target.read_bytes() == before


def test_failed_write_leaves_no_temp_file(target: Path, monkeypatch, capsys):
    before = target.read_bytes()

    def fail_replace(self, other):
        raise OSError("disk full")

    monkeypatch.setattr(Path, "replace", fail_replace)

    assert main([str(target), "single", "ro", "rw"]) == 1
    assert "disk full" in capsys.readouterr().err
    assert target.read_bytes() == before
    assert sorted(p.name for p in target.parent.iterdir()) == [target.name]
