"""Prometheus instruments for tool invocations and upstream calls."""

from __future__ import annotations

from typing import Tuple

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

PROM_REGISTRY = CollectorRegistry()
TOOL_COUNTER = Counter(
    "mcp_gateway_tool_invocations_total",
    "Count of tool invocations",
    labelnames=("tool", "status"),
    registry=PROM_REGISTRY,
)
TOOL_LATENCY = Histogram(
    "mcp_gateway_tool_latency_ms",
    "Latency of tool invocations in milliseconds",
    labelnames=("tool",),
    registry=PROM_REGISTRY,
    buckets=(10, 25, 50, 100, 250, 500, 1000, 2500, 5000, float("inf")),
)
UPSTREAM_COUNTER = Counter(
    "mcp_gateway_upstream_requests_total",
    "Count of upstream calls by HTTP status",
    labelnames=("upstream", "status"),
    registry=PROM_REGISTRY,
)
UPSTREAM_LATENCY = Histogram(
    "mcp_gateway_upstream_latency_ms",
    "Latency of upstream calls in milliseconds",
    labelnames=("upstream",),
    registry=PROM_REGISTRY,
    buckets=(25, 50, 100, 200, 400, 800, 1600, 3200, float("inf")),
)


def record_tool_invocation(tool_name: str, latency_ms: float, success: bool) -> None:
    status = "success" if success else "failure"
    TOOL_COUNTER.labels(tool=tool_name, status=status).inc()
    TOOL_LATENCY.labels(tool=tool_name).observe(latency_ms)


def record_upstream_call(upstream: str, status_code: int, latency_ms: float) -> None:
    # status 0 marks a call that never got a response
    UPSTREAM_COUNTER.labels(upstream=upstream, status=str(status_code)).inc()
    UPSTREAM_LATENCY.labels(upstream=upstream).observe(latency_ms)


def generate_prometheus_metrics() -> Tuple[bytes, str]:
    return generate_latest(PROM_REGISTRY), CONTENT_TYPE_LATEST
