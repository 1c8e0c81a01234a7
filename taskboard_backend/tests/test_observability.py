import time
from datetime import datetime

from fastapi.testclient import TestClient

import taskboard.metrics

from conftest import FlakyClient, make_settings
from taskboard.main import create_app


def request_count(app, method, route, status_code):
    value = app.state.metrics.registry.get_sample_value(
        "http_requests_total",
        {"method": method, "route": route, "statusCode": str(status_code)},
    )
    return value or 0.0


class TestHealth:
    def test_health_ok_when_connected(self, client):
        started = time.monotonic()
        res = client.get("/health")
        elapsed = time.monotonic() - started

        assert res.status_code == 200
        body = res.json()
        assert body["status"] == "OK"
        assert body["dbStatus"] == "connected"
        datetime.fromisoformat(body["timestamp"].replace("Z", "+00:00"))
        assert elapsed < 1.0

    def test_health_unhealthy_when_connect_failed(self, offline_client):
        res = offline_client.get("/health")
        assert res.status_code == 503
        body = res.json()
        assert body["status"] == "Unhealthy"
        assert body["dbStatus"] == "disconnected"
        assert "timestamp" in body

    def test_health_unhealthy_after_shutdown(self, app):
        with TestClient(app) as c:
            assert c.get("/health").status_code == 200
        # Lifespan closed the connection; requests still work without it.
        res = TestClient(app).get("/health")
        assert res.status_code == 503

    def test_health_follows_database_after_startup(self):
        made = []

        def factory(url, **options):
            made.append(FlakyClient(url))
            return made[-1]

        app = create_app(make_settings(), client_factory=factory)
        with TestClient(app) as c:
            assert c.get("/health").status_code == 200

            made[0].reachable = False
            res = c.get("/health")
            assert res.status_code == 503
            assert res.json()["dbStatus"] == "disconnected"

            made[0].reachable = True
            res = c.get("/health")
            assert res.status_code == 200
            assert res.json()["dbStatus"] == "connected"


class TestMetrics:
    def test_metrics_exposition(self, client):
        res = client.get("/metrics")
        assert res.status_code == 200
        assert res.headers["content-type"].startswith("text/plain")
        assert "# HELP http_requests_total Total number of HTTP requests" in res.text
        assert "# TYPE http_requests_total counter" in res.text

    def test_counter_tracks_completed_requests(self, app, client):
        for _ in range(3):
            client.get("/health")
        client.get("/metrics")

        assert request_count(app, "GET", "/health", 200) == 3
        assert request_count(app, "GET", "/metrics", 200) == 1

        res = client.get("/metrics")
        assert 'http_requests_total{method="GET",route="/health",statusCode="200"} 3.0' in res.text

    def test_counter_uses_route_path_without_query(self, app, client):
        client.get("/complete-task?id=abc", follow_redirects=False)
        client.get("/complete-task?id=def", follow_redirects=False)
        assert request_count(app, "GET", "/complete-task", 302) == 2

    def test_counter_is_monotonic(self, app, client):
        previous = 0.0
        for _ in range(5):
            client.get("/health")
            current = request_count(app, "GET", "/health", 200)
            assert current >= previous + 1
            previous = current

    def test_counter_labels_not_found(self, app, client):
        res = client.get("/no-such-page")
        assert res.status_code == 404
        assert request_count(app, "GET", "/no-such-page", 404) == 1

    def test_unhandled_error_answers_500_and_is_counted(self, app):
        @app.get("/boom")
        def boom():
            raise RuntimeError("kaboom")

        with TestClient(app, raise_server_exceptions=False) as c:
            res = c.get("/boom")
        assert res.status_code == 500
        assert res.text == "Something broke!"
        assert request_count(app, "GET", "/boom", 500) == 1

    def test_metrics_serialization_failure(self, client, monkeypatch):
        def broken(registry):
            raise ValueError("collector exploded")

        monkeypatch.setattr(taskboard.metrics, "generate_latest", broken)
        res = client.get("/metrics")
        assert res.status_code == 500
        assert res.text == "collector exploded"
