"""FastAPI server setup and routes"""
import time
import os
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, HTTPException
from config import Config
from app.dashboard import build_employee_dashboard
from app.poller import MetricsPoller, MetricsSnapshot
from metrics.models import format_value
from metrics.presentation import DisplayNames
from metrics.query import family_of, group_by_label, values_of
from logging_config import get_logger
from middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware


logger = get_logger(__name__)


class DashboardServer:
    """FastAPI server exposing the latest parsed metrics"""

    def __init__(self, config: Config, poller: Optional[MetricsPoller] = None):
        self.config = config
        self.app = FastAPI(
            title="Metrics Dashboard",
            version=config.service_version,
            docs_url=None,
            redoc_url=None,
            openapi_url=None,
            lifespan=self._lifespan
        )
        self.poller = poller or MetricsPoller(config)
        self.display_names = DisplayNames(config.display_names)
        self.hidden_users = config.hidden_users
        self.start_time = time.time()

        self._setup_middleware()
        self._setup_routes()

    def _setup_middleware(self):
        """Setup middleware (last added is executed first)"""
        if self.config.enable_request_logging:
            self.app.add_middleware(RequestLoggingMiddleware)
        self.app.add_middleware(SecurityHeadersMiddleware)

    def _require_snapshot(self) -> MetricsSnapshot:
        snapshot = self.poller.snapshot
        if snapshot is None:
            raise HTTPException(
                status_code=503,
                detail={"error": "No metrics available yet", "last_error": self.poller.last_error}
            )
        return snapshot

    def _setup_routes(self):
        """Setup FastAPI routes"""

        @self.app.get('/health')
        def health_check():
            """Health check endpoint"""
            last_success = self.poller.last_success_time
            age = time.time() - last_success if last_success > 0 else float('inf')
            is_healthy = age < self.config.poll_interval * 2

            health_data = {
                "status": "healthy" if is_healthy else "unhealthy",
                "last_poll_seconds_ago": round(age, 1) if age != float('inf') else None,
                "poll_interval": self.config.poll_interval,
                "total_polls": self.poller.poll_count,
                "poll_errors": self.poller.poll_errors,
                "last_error": self.poller.last_error
            }

            if not is_healthy:
                raise HTTPException(status_code=503, detail=health_data)

            return health_data

        @self.app.get('/status')
        def get_status():
            """Detailed status information"""
            snapshot = self.poller.snapshot
            poll_count = self.poller.poll_count

            return {
                "service": {
                    "name": self.config.service_name,
                    "version": self.config.service_version,
                    "uptime_seconds": round(time.time() - self.start_time, 1),
                    "hostname": os.uname().nodename
                },
                "polling": {
                    "metrics_url": self.config.metrics_url,
                    "interval_seconds": self.config.poll_interval,
                    "running": self.poller.is_running,
                    "total_polls": poll_count,
                    "poll_errors": self.poller.poll_errors,
                    "skipped_polls": self.poller.skipped_polls,
                    "success_rate": round((poll_count - self.poller.poll_errors) / max(poll_count, 1) * 100, 1),
                    "last_error": self.poller.last_error
                },
                "snapshot": {
                    "families": len(snapshot.families),
                    "samples": snapshot.samples_count,
                    "fetched_at": snapshot.fetched_at
                } if snapshot else None
            }

        @self.app.get('/api/metrics')
        def list_metrics():
            """All metric families of the latest snapshot"""
            snapshot = self._require_snapshot()
            return {
                "fetched_at": snapshot.fetched_at,
                "families": [family.to_dict() for family in snapshot.families]
            }

        @self.app.get('/api/metrics/{name}')
        def get_metric(name: str):
            """One metric family"""
            family = family_of(self._require_snapshot().families, name)
            if family is None:
                raise HTTPException(status_code=404, detail=f"Unknown metric: {name}")
            return family.to_dict()

        @self.app.get('/api/metrics/{name}/values')
        def get_metric_values(name: str):
            """Sample values of one metric family in source order"""
            values = values_of(self._require_snapshot().families, name)
            return {"name": name, "values": [format_value(value) for value in values]}

        @self.app.get('/api/metrics/{name}/by/{label}')
        def get_metric_by_label(name: str, label: str):
            """Sample values of one metric family summed per label value"""
            grouped = group_by_label(self._require_snapshot().families, name, label)
            return {
                "name": name,
                "label": label,
                "groups": {key: format_value(value) for key, value in grouped.items()}
            }

        @self.app.get('/api/dashboard/employees')
        def employee_dashboard():
            """Jira and Slack panels for the employee metrics page"""
            snapshot = self._require_snapshot()
            dashboard = build_employee_dashboard(
                snapshot.families,
                display_names=self.display_names,
                hidden_users=self.hidden_users
            )
            dashboard["fetched_at"] = snapshot.fetched_at
            return dashboard

        @self.app.post('/api/refresh')
        async def refresh():
            """Trigger a poll now unless one is already in flight"""
            polled = await self.poller.poll_once()
            return {
                "polled": polled,
                "skipped": not polled,
                "last_error": self.poller.last_error,
                "total_polls": self.poller.poll_count
            }

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI):
        """Start the poller on startup and stop it on shutdown"""
        logger.info(
            "Application startup initiated",
            service_name=self.config.service_name,
            service_version=self.config.service_version,
            metrics_url=self.config.metrics_url,
            poll_interval=self.config.poll_interval,
            event_type="server_startup"
        )
        self.poller.start()
        try:
            yield
        finally:
            logger.info("Shutting down metrics dashboard", event_type="server_shutdown")
            await self.poller.stop()

    def get_app(self) -> FastAPI:
        """Get the FastAPI application"""
        return self.app
