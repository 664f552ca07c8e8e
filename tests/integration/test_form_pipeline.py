"""Integration tests for the form validation pipeline end to end."""

import asyncio

import pytest

from formflow import (
    FormValidationPipeline,
    InactivePipelineError,
    PasswordStatus,
    PipelineConfig,
)


def fill(pipeline, email, password, repeat_password):
    pipeline.set_email(email)
    pipeline.set_password(password)
    pipeline.set_repeat_password(repeat_password)


@pytest.mark.integration
@pytest.mark.pipeline
def test_error_text_is_suppressed_before_user_types(pipeline, settle):
    """The status of the untouched form never reaches the footer"""
    # Arrange
    texts = []
    pipeline.on_password_error_text_changed(texts.append)

    # Act
    pipeline.start()

    # Assert
    assert texts == []
    settle()
    assert texts == []
    assert pipeline.password_error_text == ""


@pytest.mark.integration
@pytest.mark.pipeline
def test_form_validity_reports_false_once_inputs_settle(pipeline, settle):
    """Validity fires from its first computation onwards"""
    validity = []
    pipeline.on_form_validity_changed(validity.append)

    pipeline.start()
    assert validity == []
    settle()

    assert validity == [False]
    assert pipeline.is_form_valid is False


@pytest.mark.integration
@pytest.mark.pipeline
def test_valid_inputs_enable_the_form(pipeline, settle):
    """Good email and matching strong passwords make the form submittable"""
    # Arrange
    validity = []
    pipeline.on_form_validity_changed(validity.append)
    pipeline.start()
    settle()

    # Act
    fill(pipeline, "abc", "abcdef", "abcdef")
    settle()

    # Assert
    assert pipeline.is_form_valid is True
    assert pipeline.password_error_text == ""
    assert validity[0] is False
    assert validity[-1] is True


@pytest.mark.integration
@pytest.mark.pipeline
def test_inputs_typed_before_first_settle_still_validate(pipeline, settle):
    """Writes right after start are picked up by the first settle"""
    texts = []
    pipeline.on_password_error_text_changed(texts.append)
    pipeline.start()

    fill(pipeline, "abc", "abcdef", "abcdef")
    settle()

    assert pipeline.is_form_valid is True
    # The first computed status is the one being dropped, even when it is VALID.
    assert texts == []


@pytest.mark.integration
@pytest.mark.pipeline
def test_empty_passwords_report_empty_not_mismatch(pipeline, scheduler, settle):
    """Two empty passwords are equal, yet the status is EMPTY"""
    # Arrange
    statuses = []
    pipeline.graph.password_status.subscribe(statuses.append)

    # Act
    settle()

    # Assert
    assert statuses == [PasswordStatus.EMPTY]


@pytest.mark.integration
@pytest.mark.pipeline
def test_clearing_the_password_shows_empty_message(pipeline, settle):
    """Returning to an empty password after typing shows the EMPTY text"""
    pipeline.start()
    settle()
    pipeline.set_password("abc")
    settle()
    assert pipeline.password_error_text == "Please pick a strong password"

    pipeline.set_password("")
    settle()

    assert pipeline.password_error_text == "Password is empty"
    assert pipeline.is_form_valid is False


@pytest.mark.integration
@pytest.mark.pipeline
def test_weak_password_takes_precedence_over_mismatch(pipeline, settle):
    """A short password that also differs is reported as weak"""
    pipeline.start()
    settle()

    pipeline.set_password("abc")
    pipeline.set_repeat_password("xyz")
    settle()

    assert pipeline.password_error_text == "Please pick a strong password"
    assert pipeline.is_form_valid is False


@pytest.mark.integration
@pytest.mark.pipeline
def test_strong_but_different_passwords_report_mismatch(pipeline, settle):
    pipeline.start()
    settle()

    fill(pipeline, "abc", "abcdef", "abcdeg")
    settle()

    assert pipeline.password_error_text == "Passwords don't match"
    assert pipeline.is_form_valid is False


@pytest.mark.integration
@pytest.mark.pipeline
def test_short_email_keeps_form_invalid(pipeline, settle):
    """A valid password alone does not enable the form"""
    pipeline.start()
    settle()

    fill(pipeline, "ab", "abcdef", "abcdef")
    settle()

    assert pipeline.is_form_valid is False
    assert pipeline.password_error_text == ""


@pytest.mark.integration
@pytest.mark.pipeline
def test_password_burst_is_seen_once_by_strength_and_emptiness(pipeline, scheduler, settle):
    """Typing faster than the settle interval produces one derived value"""
    # Arrange
    strong, empty = [], []
    pipeline.graph.password_strong.subscribe(strong.append)
    pipeline.graph.password_empty.subscribe(empty.append)

    # Act
    pipeline.set_password("a")
    scheduler.advance_by(0.1)
    pipeline.set_password("ab")
    scheduler.advance_by(0.1)
    pipeline.set_password("abc")
    settle()

    # Assert
    assert strong == [False]
    assert empty == [False]


@pytest.mark.integration
@pytest.mark.pipeline
def test_repeating_the_same_email_emits_once(pipeline, settle):
    """Settled duplicates are removed before validation"""
    email_valid = []
    pipeline.graph.email_valid.subscribe(email_valid.append)
    settle()

    pipeline.set_email("abc")
    settle()
    pipeline.set_email("abc")
    settle()

    assert email_valid == [False, True]


@pytest.mark.integration
@pytest.mark.pipeline
def test_password_equality_debounces_the_combined_pair(pipeline, scheduler, settle):
    """Editing both fields within the interval gives one comparison"""
    # Arrange
    equal = []
    pipeline.graph.passwords_equal.subscribe(equal.append)
    settle()
    assert equal == [True]

    # Act
    pipeline.set_password("abc")
    scheduler.advance_by(0.5)
    pipeline.set_repeat_password("abc")
    settle()

    # Assert: the transient ("abc", "") mismatch is never compared
    assert equal == [True, True]


@pytest.mark.integration
@pytest.mark.pipeline
def test_stop_is_idempotent_and_silences_outputs(pipeline, scheduler, settle):
    """Nothing is emitted after stop and a second stop is harmless"""
    # Arrange
    events = []
    pipeline.on_form_validity_changed(lambda v: events.append(("valid", v)))
    pipeline.on_password_error_text_changed(lambda v: events.append(("text", v)))
    pipeline.start()
    settle()
    fill(pipeline, "abc", "abcdef", "abcdef")
    scheduler.advance_by(0.5)
    before = list(events)

    # Act
    pipeline.stop()
    pipeline.stop()
    scheduler.advance_by(5.0)

    # Assert
    assert events == before
    assert scheduler.pending == 0
    assert pipeline.is_stopped
    assert not pipeline.is_running


@pytest.mark.integration
@pytest.mark.pipeline
def test_use_after_stop_raises_inactive_pipeline(pipeline):
    """Setters, listeners and restart are rejected once stopped"""
    pipeline.start()
    pipeline.stop()

    with pytest.raises(InactivePipelineError):
        pipeline.set_email("abc")
    with pytest.raises(InactivePipelineError):
        pipeline.set_password("abc")
    with pytest.raises(InactivePipelineError):
        pipeline.set_repeat_password("abc")
    with pytest.raises(InactivePipelineError):
        pipeline.on_form_validity_changed(lambda v: None)
    with pytest.raises(InactivePipelineError):
        pipeline.on_password_error_text_changed(lambda v: None)
    with pytest.raises(InactivePipelineError, match="start"):
        pipeline.start()


@pytest.mark.integration
@pytest.mark.pipeline
def test_start_is_idempotent(pipeline, settle):
    """A second start does not wire the graph twice"""
    validity = []
    pipeline.on_form_validity_changed(validity.append)

    pipeline.start()
    pipeline.start()
    settle()

    assert validity == [False]
    assert pipeline.is_running


@pytest.mark.integration
@pytest.mark.pipeline
def test_disposed_listener_is_not_called(pipeline, settle):
    validity = []
    subscription = pipeline.on_form_validity_changed(validity.append)
    pipeline.start()

    subscription.dispose()
    settle()

    assert validity == []
    assert pipeline.is_form_valid is False


@pytest.mark.integration
@pytest.mark.pipeline
def test_context_manager_starts_and_stops(pipeline, settle):
    with pipeline as running:
        assert running is pipeline
        assert pipeline.is_running
        fill(pipeline, "abc", "abcdef", "abcdef")
        settle()
        assert pipeline.is_form_valid is True

    assert pipeline.is_stopped


@pytest.mark.integration
@pytest.mark.pipeline
def test_pipeline_runs_on_asyncio_event_loop():
    """The default scheduler debounces on the running event loop"""

    async def scenario():
        pipeline = FormValidationPipeline(PipelineConfig(settle_interval=0.01))
        with pipeline:
            fill(pipeline, "abc", "abcdef", "abcdef")
            await asyncio.sleep(0.1)
            return pipeline.is_form_valid, pipeline.password_error_text

    assert asyncio.run(scenario()) == (True, "")


@pytest.mark.integration
@pytest.mark.pipeline
def test_valid_form_never_shown_next_to_an_error(pipeline, scheduler, settle):
    """Each output notification sees validity and error text that agree"""
    # Arrange
    seen = []

    def record(_):
        seen.append((pipeline.is_form_valid, pipeline.password_error_text))

    pipeline.on_form_validity_changed(record)
    pipeline.on_password_error_text_changed(record)
    pipeline.start()
    settle()

    # Act: type a mismatch, fix it, weaken the password, strengthen it again
    fill(pipeline, "abc", "abcdef", "abcdeg")
    settle()
    pipeline.set_repeat_password("abcdef")
    settle()
    pipeline.set_password("abc")
    settle()
    for end in range(4, 7):
        pipeline.set_password("abcdef"[:end])
        scheduler.advance_by(0.1)
    settle()

    # Assert
    assert (False, "Passwords don't match") in seen
    assert (False, "Please pick a strong password") in seen
    assert seen[-1] == (True, "")
    assert all(text == "" for valid, text in seen if valid)
