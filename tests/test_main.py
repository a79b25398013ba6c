"""
Command line tests.
"""

import pytest

from deeptrace.main import main

DOCUMENT = """\
server:
  port: 80
  debug: true
items:
  - a
"""


@pytest.fixture
def document(tmp_path):
    path = tmp_path / "state.yaml"
    path.write_text(DOCUMENT, encoding="utf-8")
    return path


def test_applies_operations_and_prints_document(document, capsys):
    code = main([
        str(document), "--quiet",
        "--set", "server.port=8080",
        "--delete", "server.debug",
        "--set", "items.0=b",
    ])

    out = capsys.readouterr().out
    assert code == 0
    assert "port: 8080" in out
    assert "debug" not in out
    assert "- b" in out


def test_echoes_events(document, capsys):
    assert main([str(document), "--set", "server.port=8080", "--prefix", "cfg"]) == 0
    out = capsys.readouterr().out
    assert "SET cfg.server.port  80 -> 8080" in out


def test_summary_table(document, capsys):
    assert main([str(document), "--quiet", "--summary", "--set", "server.tls={enabled: true}"]) == 0
    out = capsys.readouterr().out
    assert "Mutations" in out
    assert "server.tls" in out
    assert "enabled: true" in out


def test_bad_path_fails(document):
    assert main([str(document), "--quiet", "--set", "missing.key=1"]) == 1


def test_scalar_document_fails(tmp_path):
    path = tmp_path / "scalar.yaml"
    path.write_text("42\n", encoding="utf-8")
    assert main([str(path)]) == 1


def test_missing_file_fails(tmp_path):
    assert main([str(tmp_path / "nope.yaml")]) == 1


def test_malformed_set_rejected(document):
    with pytest.raises(SystemExit):
        main([str(document), "--set", "no-equals-sign"])
