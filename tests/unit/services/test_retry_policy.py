"""Unit tests for RetryPolicy"""

import pytest
from unittest.mock import MagicMock

from src.app.services.retry_policy import RetryPolicy, is_retryable
from src.domain.errors import AuthError, InvalidAmount, Rejected, TransportError


class TestRetryPolicySchedule:
    def test_default_policy_matches_invoice_defaults(self):
        policy = RetryPolicy()

        assert policy.max_attempts == 3
        assert policy.base_delay == 5.0
        assert policy.schedule() == [5.0, 10.0]

    def test_delays_double_from_base(self):
        policy = RetryPolicy(max_attempts=5, base_delay=2)

        assert policy.schedule() == [2, 4, 8, 16]
        assert policy.max_total_delay() == 30

    def test_single_attempt_has_no_delay(self):
        assert RetryPolicy(max_attempts=1).schedule() == []

    def test_invalid_parameters_rejected(self):
        with pytest.raises(ValueError):
            RetryPolicy(max_attempts=0)
        with pytest.raises(ValueError):
            RetryPolicy(base_delay=-1)

    def test_from_config_converts_milliseconds(self):
        config = MagicMock()
        config.INVOICE_MAX_RETRIES = 4
        config.INVOICE_BASE_RETRY_DELAY_MS = 250

        policy = RetryPolicy.from_config(config)

        assert policy.max_attempts == 4
        assert policy.base_delay == 0.25


class TestIsRetryable:
    def test_transport_error_is_retryable(self):
        assert is_retryable(TransportError("timeout"))

    def test_auth_error_is_not_retryable(self):
        assert not is_retryable(AuthError("bad key", 401))

    def test_rejection_follows_authority_flag(self):
        assert is_retryable(Rejected("busy", retryable=True))
        assert not is_retryable(Rejected("invalid GSTIN", retryable=False))

    def test_other_errors_are_not_retryable(self):
        assert not is_retryable(InvalidAmount("negative"))
