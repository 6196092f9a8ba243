"""Tests for health check endpoints."""


class TestHealthEndpoints:
    def test_health_check(self, client):
        """Health endpoint should return 200 with status."""
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "version": "0.1.0"}

    def test_ready_when_backend_reachable(self, client):
        response = client.get("/api/ready")
        assert response.status_code == 200
        assert response.json() == {"status": "ready", "database": "connected"}

    def test_degraded_when_backend_unreachable(self, client, monitor):
        monitor.is_online = False
        response = client.get("/api/ready")
        assert response.json() == {"status": "degraded", "database": "unreachable"}

    def test_not_configured(self, client, monitor):
        monitor.is_configured = False
        response = client.get("/api/ready")
        assert response.json()["database"] == "not_configured"
