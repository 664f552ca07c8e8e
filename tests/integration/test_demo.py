"""Integration tests for the formflow-demo command."""

import pytest

from formflow.config import SETTLE_INTERVAL_ENV
from formflow.demo import main, run_session


@pytest.mark.integration
def test_run_session_with_valid_inputs_enables_form():
    """A complete, valid typing session ends with the form enabled"""
    events, pipeline = run_session(
        "abc", "abcdef", "abcdef", settle_interval=0.8, keystroke_gap=0.1
    )

    assert pipeline.is_form_valid is True
    assert pipeline.password_error_text == ""
    assert pipeline.is_stopped
    assert events[0] == (pytest.approx(0.8), "is_form_valid", False)
    assert ("is_form_valid", True) in [(name, value) for _, name, value in events]


@pytest.mark.integration
def test_run_session_with_weak_password_reports_it():
    events, pipeline = run_session("abc", "abc", "xyz", settle_interval=0.8, keystroke_gap=0.1)

    assert pipeline.is_form_valid is False
    assert pipeline.password_error_text == "Please pick a strong password"
    texts = [value for _, name, value in events if name == "password_error_text"]
    assert texts[-1] == "Please pick a strong password"


@pytest.mark.integration
def test_main_prints_table_and_final_state(capsys):
    exit_code = main(["--password", "abc", "--repeat-password", "xyz"])

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "Output changes" in out
    assert "Please pick a strong password" in out


@pytest.mark.integration
def test_main_rejects_bad_environment_setting(monkeypatch, capsys):
    monkeypatch.setenv(SETTLE_INTERVAL_ENV, "soon")

    exit_code = main([])

    assert exit_code == 2
    assert "Configuration error" in capsys.readouterr().out


@pytest.mark.integration
def test_main_rejects_negative_settle_interval(capsys):
    assert main(["--settle-interval", "-1"]) == 2
