"""Shared BDD fixtures and step definitions for the Tracking domain."""

import pytest
from pytest_bdd import given, parsers, then, when


@pytest.fixture()
def lookup():
    """Container for the latest tracking result."""
    return {"result": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('the carrier reports "{tracking_number}" as "{status}"'))
def carrier_reports(carrier, tracking_number, status):
    carrier.set_report(tracking_number, status)


@given(parsers.cfparse('the seller sets "{tracking_number}" to "{stage}"'))
def seller_sets_stage(orchestrator, tracking_number, stage):
    orchestrator.set_manual_status(tracking_number, stage)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the carrier reports "{tracking_number}" as "{status}"'))
def carrier_now_reports(carrier, tracking_number, status):
    carrier.set_report(tracking_number, status)


@when(parsers.cfparse("{seconds:d} seconds pass"))
def time_passes(clock, seconds):
    clock.advance(seconds=seconds)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the stage is "{stage}"'))
def stage_is(lookup, stage):
    assert lookup["result"].stage.status == stage
