"""Tests for the job retry policy and job serialisation."""

import pytest
from notifications.queue.base import PROCESS_NOTIFICATION, Job, RetryPolicy


class TestRetryPolicy:
    def test_defaults(self):
        policy = RetryPolicy()
        assert policy.attempts == 3
        assert policy.backoff_ms == 1000

    @pytest.mark.parametrize("attempts_made,delay", [(0, 0.0), (1, 1.0), (2, 2.0), (3, 4.0)])
    def test_exponential_delay(self, attempts_made, delay):
        assert RetryPolicy().delay_for(attempts_made) == delay

    def test_should_retry_until_attempts_exhausted(self):
        policy = RetryPolicy(attempts=3)
        assert policy.should_retry(1)
        assert policy.should_retry(2)
        assert not policy.should_retry(3)

    def test_zero_backoff(self):
        assert RetryPolicy(backoff_ms=0).delay_for(2) == 0.0


class TestJob:
    def test_from_dict_restores_job(self):
        job = Job(name=PROCESS_NOTIFICATION, data={"notification_id": "n-1"}, attempts_made=2, failed_reason="boom")
        restored = Job.from_dict(job.to_dict())
        assert restored.id == job.id
        assert restored.name == PROCESS_NOTIFICATION
        assert restored.data == {"notification_id": "n-1"}
        assert restored.attempts_made == 2
        assert restored.failed_reason == "boom"
        assert restored.enqueued_at == job.enqueued_at
