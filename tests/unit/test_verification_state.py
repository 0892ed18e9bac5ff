"""
Unit Tests for the Payment Verification state machine and registry.

These tests verify:
1. idle -> processing -> {success, failed} transitions
2. Terminal transitions happen once
3. Callback classification
4. The registry debounces by reference and stays bounded
"""

import pytest

from enrollment_gateway.application.services import VerificationRegistry
from enrollment_gateway.domain.entities import (
    GatewayCallback,
    PaymentVerification,
    VerificationStatus,
    REASON_DECLINED,
)


class TestStateMachine:
    """Tests for PaymentVerification."""

    def test_starts_idle(self):
        attempt = PaymentVerification(reference="ref_1")

        assert attempt.status == VerificationStatus.IDLE
        assert not attempt.has_processed
        assert not attempt.is_terminal

    def test_start_only_once(self):
        attempt = PaymentVerification(reference="ref_1")

        assert attempt.start() is True
        assert attempt.status == VerificationStatus.PROCESSING
        assert attempt.started_at is not None
        assert attempt.start() is False

    def test_succeed(self):
        attempt = PaymentVerification(reference="ref_1")
        attempt.start()

        assert attempt.succeed({"amount": 100}, ["ledger_update"]) is True
        assert attempt.status == VerificationStatus.SUCCESS
        assert attempt.data == {"amount": 100}
        assert attempt.incomplete_steps == ["ledger_update"]
        assert attempt.has_processed
        assert attempt.is_terminal

    def test_fail(self):
        attempt = PaymentVerification(reference="ref_1")
        attempt.start()

        assert attempt.fail(REASON_DECLINED) is True
        assert attempt.status == VerificationStatus.FAILED
        assert attempt.error == REASON_DECLINED
        assert attempt.data is None

    def test_terminal_transition_is_single_shot(self):
        attempt = PaymentVerification(reference="ref_1")
        attempt.start()
        attempt.succeed({"amount": 100})

        assert attempt.fail(REASON_DECLINED) is False
        assert attempt.succeed({"amount": 999}) is False
        assert attempt.status == VerificationStatus.SUCCESS
        assert attempt.data == {"amount": 100}

    def test_to_dict(self):
        attempt = PaymentVerification(reference="ref_1")
        attempt.start()
        attempt.fail(REASON_DECLINED)

        assert attempt.to_dict() == {
            "reference": "ref_1",
            "status": "failed",
            "reason": REASON_DECLINED,
            "payment": None,
            "incomplete_steps": [],
        }


class TestGatewayCallback:
    """Tests for GatewayCallback classification."""

    @pytest.mark.parametrize("reference", [None, "", "   "])
    def test_missing_reference(self, reference):
        assert not GatewayCallback(reference=reference).has_reference

    def test_only_failed_is_a_decline(self):
        assert GatewayCallback(reference="r", status="failed").is_declined
        assert not GatewayCallback(reference="r", status="success").is_declined
        assert not GatewayCallback(reference="r", status="abandoned").is_declined
        assert not GatewayCallback(reference="r").is_declined


class TestVerificationRegistry:
    """Tests for the in-process debounce registry."""

    def test_same_reference_returns_same_attempt(self):
        registry = VerificationRegistry(max_size=10)

        first = registry.get_or_create("learner_1", "ref_1")

        assert registry.get_or_create("learner_1", "ref_1") is first
        assert len(registry) == 1

    def test_discard(self):
        registry = VerificationRegistry(max_size=10)
        first = registry.get_or_create("learner_1", "ref_1")

        registry.discard("learner_1", "ref_1")
        registry.discard("learner_1", "never_seen")

        assert ("learner_1", "ref_1") not in registry
        assert registry.get_or_create("learner_1", "ref_1") is not first

    def test_evicts_oldest(self):
        registry = VerificationRegistry(max_size=2)
        registry.get_or_create("learner_1", "ref_1")
        registry.get_or_create("learner_1", "ref_2")
        registry.get_or_create("learner_1", "ref_1")
        registry.get_or_create("learner_1", "ref_3")

        assert len(registry) == 2
        assert ("learner_1", "ref_1") in registry
        assert ("learner_1", "ref_2") not in registry

    def test_callers_get_separate_attempts(self):
        """Another caller quoting the same reference never sees the first attempt."""
        registry = VerificationRegistry(max_size=10)
        first = registry.get_or_create("learner_1", "ref_1")
        first.start()

        other = registry.get_or_create("learner_2", "ref_1")

        assert other is not first
        assert other.start() is True
        assert len(registry) == 2
