"""
Módulo de métricas Prometheus para monitoramento da aplicação.
"""
from prometheus_client import Counter, Histogram, Gauge, generate_latest, CONTENT_TYPE_LATEST
from time import time
from typing import Callable
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
import logging
import re

logger = logging.getLogger(__name__)

# Métricas de requisições HTTP
http_requests_total = Counter(
    'http_requests_total',
    'Total de requisições HTTP',
    ['method', 'endpoint', 'status_code']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'Duração das requisições HTTP em segundos',
    ['method', 'endpoint'],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0]
)

active_connections = Gauge(
    'active_connections',
    'Número de conexões ativas'
)

# Métricas de notificações
notifications_dispatched_total = Counter(
    'notifications_dispatched_total',
    'Total de tentativas de envio de notificações',
    ['channel', 'status']
)

reminder_job_runs_total = Counter(
    'reminder_job_runs_total',
    'Total de execuções dos jobs do agendador',
    ['job', 'status']
)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware para coletar métricas Prometheus das requisições HTTP."""

    async def dispatch(self, request: Request, call_next: Callable):
        # Ignora o endpoint de métricas para evitar loop
        if request.url.path == "/metrics":
            return await call_next(request)

        method = request.method
        normalized_endpoint = self._normalize_endpoint(request.url.path)

        start_time = time()
        active_connections.inc()

        try:
            response = await call_next(request)
            http_requests_total.labels(
                method=method,
                endpoint=normalized_endpoint,
                status_code=response.status_code
            ).inc()
            http_request_duration_seconds.labels(
                method=method,
                endpoint=normalized_endpoint
            ).observe(time() - start_time)
            return response

        except Exception:
            http_requests_total.labels(
                method=method,
                endpoint=normalized_endpoint,
                status_code=500
            ).inc()
            raise
        finally:
            active_connections.dec()

    def _normalize_endpoint(self, endpoint: str) -> str:
        """
        Normaliza endpoints removendo IDs para evitar alta cardinalidade.
        Ex: /api/notifications/<uuid>/read -> /api/notifications/{uuid}/read
        """
        endpoint = re.sub(r'/[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}', '/{uuid}', endpoint)
        endpoint = re.sub(r'/\d+', '/{id}', endpoint)
        return endpoint


def get_metrics():
    """Retorna as métricas no formato Prometheus."""
    return generate_latest()


def record_dispatch(channel: str, status: str):
    """Registra uma tentativa de envio."""
    notifications_dispatched_total.labels(channel=channel, status=status).inc()


def record_job_run(job: str, status: str):
    """Registra uma execução de job do agendador."""
    reminder_job_runs_total.labels(job=job, status=status).inc()


__all__ = [
    "CONTENT_TYPE_LATEST",
    "PrometheusMiddleware",
    "get_metrics",
    "record_dispatch",
    "record_job_run",
]
