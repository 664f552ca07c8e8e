"""Unit tests for FormOutputSink, which writes both output registers together."""

import pytest

from formflow.form import FormOutputSink
from formflow.observable import OutputRegister
from formflow.validation import PasswordStatus


@pytest.fixture
def registers():
    return OutputRegister("is_form_valid", False), OutputRegister("password_error_text", "")


@pytest.fixture
def sink(registers):
    form_valid, error_text = registers
    return FormOutputSink(form_valid, error_text)


@pytest.mark.unit
@pytest.mark.pipeline
def test_first_status_is_hidden_from_error_text(registers, sink):
    """The status of the untouched form never reaches the error text"""
    form_valid, error_text = registers
    texts = []
    error_text.subscribe(texts.append)

    sink.on_password_status(PasswordStatus.EMPTY)
    sink.on_password_status(PasswordStatus.TOO_WEAK)

    assert texts == ["Please pick a strong password"]


@pytest.mark.unit
@pytest.mark.pipeline
def test_validity_waits_for_both_inputs(registers, sink):
    """Validity is written once both status and email validity are known"""
    form_valid, _ = registers
    validity = []
    form_valid.subscribe(validity.append)

    sink.on_password_status(PasswordStatus.VALID)
    assert validity == []

    sink.on_email_valid(True)
    assert validity == [True]


@pytest.mark.unit
@pytest.mark.pipeline
def test_email_change_leaves_error_text_listeners_alone(registers, sink):
    """Only the validity flag is rewritten when the email changes"""
    form_valid, error_text = registers
    texts = []
    error_text.subscribe(texts.append)
    sink.on_password_status(PasswordStatus.EMPTY)

    sink.on_email_valid(True)
    sink.on_email_valid(False)

    assert texts == []
    assert form_valid.value is False


@pytest.mark.unit
@pytest.mark.pipeline
def test_listeners_see_both_registers_already_updated(registers, sink):
    """Every notification observes a consistent (validity, text) pair"""
    # Arrange
    form_valid, error_text = registers
    seen = []

    def record(_):
        seen.append((form_valid.value, error_text.value))

    form_valid.subscribe(record)
    error_text.subscribe(record)
    sink.on_email_valid(True)
    sink.on_password_status(PasswordStatus.EMPTY)

    # Act
    sink.on_password_status(PasswordStatus.MISMATCH)
    sink.on_password_status(PasswordStatus.VALID)
    sink.on_password_status(PasswordStatus.TOO_WEAK)

    # Assert
    assert (False, "Passwords don't match") in seen
    assert (True, "") in seen
    assert all(text == "" for valid, text in seen if valid)
