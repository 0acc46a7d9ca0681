"""
End-to-end test of a dashboard session against a mocked backend.

The backend is an httpx.MockTransport whose answer the test switches
between steps; refreshes are triggered explicitly so every step is
deterministic.
"""

import asyncio

import httpx
import pytest

from stopmonitor.dashboard import DashboardSession
from stopmonitor.models import AppConfig, BackendConfig, DashboardConfig
from stopmonitor.polling import StopsClient
from stopmonitor.rendering import render_dashboard_html


class FakeBackend:

    def __init__(self, payload):
        self.status = 200
        self.payload = payload
        self.requests = 0

    def __call__(self, request):
        self.requests += 1
        if self.status != 200:
            return httpx.Response(self.status, text="internal error")
        return httpx.Response(200, json=self.payload)


@pytest.mark.e2e
class TestDashboardWorkflow:

    @pytest.mark.asyncio
    async def test_poll_filter_fail_recover(self, timed_records):
        backend_config = BackendConfig(base_url="http://backend.test")
        config = AppConfig(
            backend=backend_config,
            dashboard=DashboardConfig(monitored_machine="M01", poll_interval_ms=60_000),
        )
        backend = FakeBackend({"stops": timed_records})
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(backend), base_url=backend_config.base_url)
        session = DashboardSession(config, client=StopsClient(backend_config, http_client=http_client))

        snapshots = []
        first = asyncio.Event()

        def on_views(views):
            snapshots.append(views)
            first.set()

        session.subscribe(on_views)
        async with session:
            await asyncio.wait_for(first.wait(), 2)

            views = session.views
            assert views.distribution.as_mapping() == {"Jam": 2, "Power": 1, "Desconhecido": 1}
            assert len(views.history) == 4
            assert views.error is None

            # Backend failure: error shown, data kept.
            backend.status = 500
            assert await session.refresh_now() is True
            failed = session.views
            assert failed.has_error
            assert failed.error.kind == "application"
            assert failed.distribution == views.distribution
            assert failed.history == views.history
            assert "Erro ao buscar dados" in render_dashboard_html(failed, include_plotlyjs=False)

            # Filter by clicking the Power slice.
            power_index = failed.distribution.labels.index("Power")
            filtered = session.handle_distribution_click(power_index)
            assert filtered.selected_reason == "Power"
            assert filtered.trend.durations == (10.5,)
            assert filtered.distribution == views.distribution
            assert filtered.has_error

            # Recovery with new data: error cleared, filter kept.
            backend.status = 200
            backend.payload = timed_records + [
                {"id": 6, "machine": "M01", "reason": "Power", "start_time": "2024-03-01T12:00:00",
                 "duration_minutes": 4},
            ]
            assert await session.refresh_now() is True
            recovered = session.views
            assert recovered.error is None
            assert recovered.selected_reason == "Power"
            assert recovered.trend.durations == (10.5, 4.0)
            assert [row.key for row in recovered.history.rows] == [6, 2]
            assert recovered.distribution.as_mapping()["Power"] == 2

            cleared = session.clear_filter()
            assert cleared.selected_reason is None
            assert len(cleared.history) == 5

        assert not session.is_running
        assert backend.requests == 3
        revisions = [v.revision for v in snapshots]
        assert revisions == sorted(revisions)
        await http_client.aclose()
