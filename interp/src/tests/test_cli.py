"""Tests for the render and expand commands."""

import sys

import yaml

from interp import __main__ as entry
from interp import run_expand, run_render


AGENT_YAML = """\
agent:
  name: feed
  id: feed-1
  options:
    url: "https://example.com/?q={{ query | uri_escape }}"
    auth: "Bearer {% credential token %}"
    static: 3
"""


def test_render_prints_interpolated_options(tmp_path, capsys):
    agent_file = tmp_path / "agent.yaml"
    agent_file.write_text(AGENT_YAML)
    subject_file = tmp_path / "event.yaml"
    subject_file.write_text("query: a b\n")

    code = run_render.main([
        str(agent_file), "-s", str(subject_file), "-c", "token=abc", "--offline",
    ])

    assert code == 0
    assert yaml.safe_load(capsys.readouterr().out) == {
        "url": "https://example.com/?q=a%20b",
        "auth": "Bearer abc",
        "static": 3,
    }


def test_render_reports_invalid_options(tmp_path, capsys):
    agent_file = tmp_path / "agent.yaml"
    agent_file.write_text("name: broken\noptions:\n  url: '{{ nope'\n")

    assert run_render.main([str(agent_file), "--offline"]) == 1
    assert capsys.readouterr().out == ""


def test_render_missing_credential_fails(tmp_path):
    agent_file = tmp_path / "agent.yaml"
    agent_file.write_text(AGENT_YAML)
    subject_file = tmp_path / "event.yaml"
    subject_file.write_text("query: x\n")

    assert run_render.main([str(agent_file), "-s", str(subject_file), "--offline"]) == 1


def test_parse_credentials():
    assert run_render.parse_credentials(["a=1", "b=x=y"]) == {"a": "1", "b": "x=y"}


def test_expand_non_http_url(capsys):
    assert run_expand.main(["mailto:someone@example.com"]) == 0
    assert capsys.readouterr().out.strip() == "mailto:someone@example.com"


def test_entry_point_dispatch(monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["interp", "expand", "mailto:someone@example.com"])
    try:
        entry.main()
    except SystemExit as e:
        assert e.code == 0
    assert "mailto:someone@example.com" in capsys.readouterr().out
