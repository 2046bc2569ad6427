#!/usr/bin/env python3
import unittest

from gchat_proxy.errors import (
    AlertMissingLabels,
    AlertMissingStatus,
    EmptyAlerts,
    MissingStatus,
    PayloadValidationError,
)
from gchat_proxy.models import AlertBatch
from gchat_proxy.validation import validate_batch


def batch(status="firing", alerts=None):
    if alerts is None:
        alerts = [{"status": "firing", "labels": {"alertname": "TestAlert"}}]
    return AlertBatch.model_validate({"status": status, "alerts": alerts})


class TestValidateBatch(unittest.TestCase):
    def test_valid_payload(self):
        self.assertIsNone(validate_batch(batch()))

    def test_missing_status(self):
        with self.assertRaises(MissingStatus):
            validate_batch(batch(status=""))

    def test_missing_status_checked_before_alerts(self):
        with self.assertRaises(MissingStatus):
            validate_batch(batch(status="", alerts=[]))

    def test_empty_alerts(self):
        with self.assertRaises(EmptyAlerts):
            validate_batch(batch(alerts=[]))

    def test_alert_without_status(self):
        with self.assertRaises(AlertMissingStatus) as ctx:
            validate_batch(batch(alerts=[
                {"status": "firing", "labels": {"alertname": "ok"}},
                {"labels": {"alertname": "TestAlert"}},
            ]))
        self.assertEqual(ctx.exception.index, 1)

    def test_alert_without_labels(self):
        with self.assertRaises(AlertMissingLabels) as ctx:
            validate_batch(batch(alerts=[{"status": "firing", "labels": {}}]))
        self.assertEqual(ctx.exception.index, 0)

    def test_first_failing_alert_wins(self):
        with self.assertRaises(AlertMissingLabels) as ctx:
            validate_batch(batch(alerts=[
                {"status": "firing"},
                {"labels": {"alertname": "x"}},
            ]))
        self.assertEqual(ctx.exception.index, 0)

    def test_all_errors_share_base(self):
        for bad in (batch(status=""), batch(alerts=[]), batch(alerts=[{"labels": {"a": "b"}}])):
            with self.assertRaises(PayloadValidationError):
                validate_batch(bad)

    def test_validation_does_not_mutate(self):
        b = batch()
        before = b.model_dump()
        validate_batch(b)
        self.assertEqual(b.model_dump(), before)


if __name__ == '__main__':
    unittest.main()
