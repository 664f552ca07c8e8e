"""
Shared pytest fixtures and configuration for FormFlow tests.
"""

import pytest

from formflow import FormValidationPipeline, PipelineConfig, VirtualTimeScheduler

SETTLE_INTERVAL = 0.8


@pytest.fixture
def scheduler():
    """Provide a fresh virtual clock starting at t=0."""
    return VirtualTimeScheduler()


@pytest.fixture
def settle(scheduler):
    """Advance virtual time past one settle interval."""

    def _settle():
        scheduler.advance_by(SETTLE_INTERVAL + 0.2)

    return _settle


@pytest.fixture
def pipeline(scheduler):
    """Provide an unstarted pipeline on the virtual clock; stopped after the test."""
    form = FormValidationPipeline(
        PipelineConfig(settle_interval=SETTLE_INTERVAL), scheduler=scheduler
    )
    yield form
    form.stop()
