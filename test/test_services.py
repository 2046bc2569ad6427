#!/usr/bin/env python3
import json
import unittest
from unittest.mock import Mock, PropertyMock, patch

import requests
from prometheus_client import CollectorRegistry

from gchat_proxy.errors import EncodeError, RemoteRejected, TransportError
from gchat_proxy.metrics import PrometheusMetrics
from gchat_proxy.models import ChatMessage
from gchat_proxy.services import GoogleChatProvider, build_session

WEBHOOK_URL = "https://chat.googleapis.com/v1/spaces/AAA/messages?key=k&token=t"


def fake_response(status_code, text=""):
    resp = Mock(spec=requests.Response)
    resp.status_code = status_code
    resp.text = text
    return resp


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class TestGoogleChatProvider(unittest.TestCase):
    def setUp(self):
        self.session = Mock(spec=requests.Session)
        self.session.post.return_value = fake_response(200)
        self.metrics = PrometheusMetrics(CollectorRegistry())
        self.provider = GoogleChatProvider(
            WEBHOOK_URL,
            timeout=3,
            metrics=self.metrics,
            session_factory=lambda: self.session,
        )
        self.message = ChatMessage(text="FIRING Alert: HighCPU (1 alerts)")

    def provider_requests(self, outcome):
        return self.metrics.registry.get_sample_value(
            "alertmanager_gchat_provider_request_duration_seconds_count",
            {"provider": "google_chat", "status": outcome},
        )

    def test_posts_json_with_timeout(self):
        self.provider.send(self.message, "req-1")

        self.session.post.assert_called_once()
        args, kwargs = self.session.post.call_args
        self.assertEqual(args[0], WEBHOOK_URL)
        self.assertEqual(kwargs["headers"], {"Content-Type": "application/json"})
        self.assertEqual(kwargs["timeout"], 3)
        self.assertEqual(json.loads(kwargs["data"]), {"text": "FIRING Alert: HighCPU (1 alerts)", "cards": []})
        self.assertEqual(self.provider_requests("200"), 1.0)

    def test_remote_rejection(self):
        self.session.post.return_value = fake_response(400, "bad card")

        with self.assertRaises(RemoteRejected) as ctx:
            self.provider.send(self.message, "req-2")

        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(ctx.exception.body, "bad card")
        self.assertEqual(self.provider_requests("400"), 1.0)

    def test_redirect_is_rejection(self):
        self.session.post.return_value = fake_response(302)
        with self.assertRaises(RemoteRejected):
            self.provider.send(self.message, "req-3")

    def test_rejection_body_read_failure_ignored(self):
        resp = fake_response(503)
        type(resp).text = PropertyMock(side_effect=requests.exceptions.ChunkedEncodingError("boom"))
        self.session.post.return_value = resp

        with self.assertRaises(RemoteRejected) as ctx:
            self.provider.send(self.message, "req-4")
        self.assertEqual(ctx.exception.status_code, 503)
        self.assertEqual(ctx.exception.body, "")

    def test_transport_failures(self):
        for exc in (
            requests.exceptions.ConnectTimeout("timeout"),
            requests.exceptions.ConnectionError("refused"),
            requests.exceptions.SSLError("tls"),
            requests.exceptions.ChunkedEncodingError("truncated body"),
        ):
            self.session.post.side_effect = exc
            with self.assertRaises(TransportError) as ctx:
                self.provider.send(self.message, "req-5")
            self.assertIs(ctx.exception.__cause__, exc)
        self.assertEqual(self.provider_requests("error"), 4.0)

    def test_encode_failure(self):
        with patch.object(ChatMessage, "to_payload", return_value={"bad": object()}):
            with self.assertRaises(EncodeError):
                self.provider.send(self.message, "req-6")
        self.session.post.assert_not_called()

    def test_single_attempt(self):
        self.session.post.side_effect = requests.exceptions.ConnectionError("refused")
        with self.assertRaises(TransportError):
            self.provider.send(self.message, "req-7")
        self.assertEqual(self.session.post.call_count, 1)


class TestSessionPool(unittest.TestCase):
    def setUp(self):
        self.clock = FakeClock()
        self.sessions = []

        def factory():
            session = Mock(spec=requests.Session)
            session.post.return_value = fake_response(200)
            self.sessions.append(session)
            return session

        self.provider = GoogleChatProvider(
            WEBHOOK_URL, idle_timeout=90, session_factory=factory, clock=self.clock,
        )
        self.message = ChatMessage(text="x")

    def test_session_reused_across_requests(self):
        self.provider.send(self.message, "a")
        self.clock.now += 30
        self.provider.send(self.message, "b")
        self.assertEqual(len(self.sessions), 1)
        self.assertEqual(self.sessions[0].post.call_count, 2)

    def test_idle_session_recycled(self):
        self.provider.send(self.message, "a")
        self.clock.now += 91
        self.provider.send(self.message, "b")
        self.assertEqual(len(self.sessions), 2)
        self.sessions[0].close.assert_called_once()

    def test_close(self):
        self.provider.send(self.message, "a")
        self.provider.close()
        self.sessions[0].close.assert_called_once()

    def test_build_session_mounts_pool(self):
        session = build_session(pool_maxsize=7)
        adapter = session.get_adapter("https://chat.googleapis.com")
        self.assertEqual(adapter._pool_maxsize, 7)
        self.assertEqual(adapter.max_retries.total, 0)
        session.close()


if __name__ == '__main__':
    unittest.main()
