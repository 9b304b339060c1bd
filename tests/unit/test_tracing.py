"""Unit tests for the optional Langfuse tracer."""

from unittest.mock import MagicMock

import pytest

from pdfchat.adapters.common.tracing import Observation, Tracer

pytestmark = pytest.mark.unit


class TestObservation:
    def test_noop_without_handle(self):
        observation = Observation()

        observation.success(output={"count": 1})

        assert observation.ended is True

    def test_success_updates_and_ends_handle(self):
        handle = MagicMock()

        Observation(handle).success(output={"count": 3}, batch=1)

        update = handle.update.call_args.kwargs
        assert update["output"] == {"count": 3}
        assert update["metadata"]["batch"] == 1
        assert "level" not in update
        handle.end.assert_called_once()

    def test_ends_only_once(self):
        handle = MagicMock()
        observation = Observation(handle)

        observation.warning("Client cancelled stream")
        observation.success(output="ignored")

        handle.update.assert_called_once()
        assert handle.update.call_args.kwargs["level"] == "WARNING"

    def test_langfuse_errors_are_swallowed(self):
        handle = MagicMock()
        handle.update.side_effect = RuntimeError("langfuse down")

        Observation(handle).failure("boom")

        assert handle.end.call_count == 0


class TestTracer:
    def test_disabled_tracer(self):
        tracer = Tracer()

        assert tracer.enabled is False
        assert tracer.start_span("span").ended is False
        tracer.flush()

    def test_start_generation_failure_falls_back_to_noop(self):
        client = MagicMock()
        client.start_generation.side_effect = RuntimeError("bad credentials")

        observation = Tracer(client).start_generation("gen", model="m")
        observation.success()

        assert observation.ended is True

    def test_flush_delegates(self):
        client = MagicMock()

        Tracer(client).flush()

        client.flush.assert_called_once()
