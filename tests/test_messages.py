"""
Unit tests for the calculation request/response boundary and channels.
"""

import math
import pytest
import sys
from pathlib import Path
from unittest import mock

sys.path.insert(0, str(Path(__file__).parent.parent))

from control_workbench.simulation import messages
from control_workbench.simulation.messages import (
    CalculationKind,
    CalculationRequest,
    CalculationResponse,
    check_parameters,
    dispatch,
)
from control_workbench.simulation.channels import InProcessChannel, WorkerChannel
from control_workbench.core.errors import InvalidParameter


def pid_parameters(**changes):
    params = {
        'kp': 1.0, 'ki': 0.0, 'kd': 0.0,
        'setpoint': 1.0, 'process_value': 0.5, 'dt': 0.01,
    }
    params.update(changes)
    return params


class TestCalculationRequest:
    """Test suite for request/response value types."""

    def test_unique_ids(self):
        ids = {CalculationRequest.create("pid", pid_parameters()).id for _ in range(100)}
        assert len(ids) == 100

    def test_kind_normalized(self):
        request = CalculationRequest("a", "step_response", {})
        assert request.kind is CalculationKind.STEP_RESPONSE

    def test_unknown_kind_kept(self):
        request = CalculationRequest("a", "matrix_inverse", {})
        assert request.kind == "matrix_inverse"
        assert request.to_dict()['kind'] == "matrix_inverse"

    def test_create_rejects_unknown_kind(self):
        with pytest.raises(InvalidParameter):
            CalculationRequest.create("matrix_inverse", {})

    def test_request_dict_roundtrip(self):
        request = CalculationRequest.create(CalculationKind.PID, pid_parameters(), generation=3)
        assert CalculationRequest.from_dict(request.to_dict()) == request

    def test_response_dict(self):
        ok = CalculationResponse("a", "pid", result={'output': 1.0})
        assert 'error' not in ok.to_dict()
        assert 'warnings' not in ok.to_dict()
        assert ok.ok
        failed = CalculationResponse.from_dict({'id': 'b', 'kind': 'pid', 'error': 'bad'})
        assert not failed.ok
        assert failed.result is None


class TestCheckParameters:
    """Closed parameter records per kind."""

    def test_missing_key(self):
        params = pid_parameters()
        del params['dt']
        with pytest.raises(InvalidParameter, match="dt"):
            check_parameters(CalculationKind.PID, params)

    def test_unknown_key(self):
        with pytest.raises(InvalidParameter, match="gain"):
            check_parameters(CalculationKind.PID, pid_parameters(gain=2.0))

    def test_optional_keys_accepted(self):
        check_parameters(CalculationKind.PID, pid_parameters(previous_error=0.1, integral=0.2))
        check_parameters(
            CalculationKind.TRANSFER_FUNCTION,
            {'numerator': [1], 'denominator': [1], 'input': [1], 'sample_time': 0.01}
        )

    def test_not_a_mapping(self):
        with pytest.raises(InvalidParameter):
            check_parameters(CalculationKind.PID, [1, 2, 3])


class TestDispatch:
    """Test suite for dispatch."""

    def test_pid(self):
        request = CalculationRequest.create("pid", pid_parameters(), generation=2)
        response = dispatch(request)
        assert response.ok
        assert response.id == request.id
        assert response.kind == "pid"
        assert response.generation == 2
        assert response.result['output'] == pytest.approx(0.5)
        assert response.result['integral'] == pytest.approx(0.005)
        assert response.result['derivative'] == pytest.approx(50.0)

    def test_pid_dt_zero_reports_error(self):
        response = dispatch(CalculationRequest.create("pid", pid_parameters(dt=0.0)))
        assert not response.ok
        assert "dt" in response.error
        assert response.result is None

    def test_transfer_function(self):
        response = dispatch(CalculationRequest.create(
            "transfer_function", {'numerator': [1], 'denominator': [1], 'input': [5]}
        ))
        assert response.result == [5.0]
        assert response.warnings == ()

    def test_degenerate_denominator_warned(self):
        """A zero leading denominator coefficient stays visible across the boundary."""
        response = dispatch(CalculationRequest.create(
            "transfer_function", {'numerator': [1], 'denominator': [0, 1], 'input': [1, 1]}
        ))
        assert response.ok
        assert response.result == pytest.approx([1.0, 0.0])
        assert response.warnings == (messages.DEGENERATE_DENOMINATOR,)
        assert response.to_dict()['warnings'] == [messages.DEGENERATE_DENOMINATOR]
        assert CalculationResponse.from_dict(response.to_dict()) == response

    def test_step_response_degenerate_warned(self):
        response = dispatch(CalculationRequest.create(
            "step_response",
            {'numerator': [1], 'denominator': [0, 1], 'amplitude': 1,
             'duration': 0.02, 'sample_time': 0.01}
        ))
        assert response.warnings == (messages.DEGENERATE_DENOMINATOR,)

    def test_step_response_too_long_reports_error(self):
        response = dispatch(CalculationRequest.create(
            "step_response",
            {'numerator': [1], 'denominator': [1], 'amplitude': 1,
             'duration': 1e308, 'sample_time': 1e-10}
        ))
        assert response.result == []
        assert "maximum" in response.error

    def test_step_response(self):
        response = dispatch(CalculationRequest.create(
            "step_response",
            {'numerator': [1], 'denominator': [1], 'amplitude': 2,
             'duration': 0.02, 'sample_time': 0.01}
        ))
        assert response.result == pytest.approx([2.0, 2.0])

    def test_step_response_invalid_times_give_empty_result(self):
        response = dispatch(CalculationRequest.create(
            "step_response",
            {'numerator': [1], 'denominator': [1], 'amplitude': 2,
             'duration': 0.02, 'sample_time': 0.0}
        ))
        assert response.result == []
        assert "sample_time" in response.error

    def test_frequency_response(self):
        response = dispatch(CalculationRequest.create(
            "frequency_response", {'numerator': [1], 'denominator': [1, 0], 'frequencies': [0, 1]}
        ))
        assert response.ok
        first, second = response.result
        assert first['magnitude_db'] == math.inf
        assert 'error' in first
        assert 'error' not in second
        assert second['phase_deg'] == pytest.approx(-90.0)

    def test_unknown_kind(self):
        response = dispatch(CalculationRequest("x1", "matrix_inverse", {}))
        assert response.id == "x1"
        assert response.kind == "matrix_inverse"
        assert "Unknown calculation type" in response.error

    def test_unexpected_fault_converted(self):
        """Faults outside the error taxonomy never cross the boundary."""
        boom = mock.Mock(side_effect=RuntimeError("kaput"))
        with mock.patch.dict(messages.CALCULATORS, {CalculationKind.PID: boom}):
            response = dispatch(CalculationRequest.create("pid", pid_parameters()))
        assert response.error == "RuntimeError: kaput"
        assert response.result is None


class TestChannels:
    """Test suite for calculation channels."""

    def test_in_process_channel(self):
        channel = InProcessChannel()
        request = CalculationRequest.create("pid", pid_parameters())
        channel.submit(request)
        assert channel.pending == 1
        response = channel.receive()
        assert response.id == request.id
        assert channel.receive() is None

    def test_worker_channel_matches_by_id(self):
        requests = [
            CalculationRequest.create("pid", pid_parameters(setpoint=float(i)))
            for i in range(20)
        ]
        with WorkerChannel(num_workers=4) as channel:
            for request in requests:
                channel.submit(request)
            responses = {}
            for _ in requests:
                response = channel.receive(timeout=5.0)
                assert response is not None
                responses[response.id] = response

        assert set(responses) == {r.id for r in requests}
        for i, request in enumerate(requests):
            assert responses[request.id].result['error'] == pytest.approx(i - 0.5)

    def test_worker_channel_receive_timeout(self):
        with WorkerChannel() as channel:
            assert channel.receive(timeout=0.01) is None

    def test_worker_channel_closed(self):
        channel = WorkerChannel()
        channel.close()
        with pytest.raises(RuntimeError):
            channel.submit(CalculationRequest.create("pid", pid_parameters()))

    def test_invalid_worker_count(self):
        with pytest.raises(ValueError):
            WorkerChannel(num_workers=0)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
