import time

from prometheus_client import Counter, Histogram, REGISTRY


# we check if they are already registered to avoid errors during hot reloads or test runs
def get_or_create_metric(name, documentation, metric_type, **kwargs):
    try:
        return metric_type(name, documentation, **kwargs)
    except ValueError:
        return REGISTRY._names_to_collectors[name]


REQUESTS_TOTAL = get_or_create_metric(
    "lexical_requests_total",
    "Total requests",
    Counter,
    labelnames=["endpoint", "status"],
)

REQUEST_LATENCY_SECONDS = get_or_create_metric(
    "lexical_request_latency_seconds",
    "Request latency",
    Histogram,
    labelnames=["endpoint"],
)

LLM_FAILURES_TOTAL = get_or_create_metric(
    "lexical_llm_failures_total",
    "LLM calls that ended in an error, by category",
    Counter,
    labelnames=["category"],
)

ASSIGNMENT_BLOCKS_TOTAL = get_or_create_metric(
    "lexical_assignment_blocks_extracted_total",
    "Assignment blocks extracted from syllabi",
    Counter,
)

FLOWCHART_NODES_TOTAL = get_or_create_metric(
    "lexical_flowchart_nodes_generated_total",
    "Flowchart nodes returned by generate/refine",
    Counter,
)


def observe_request(endpoint: str, status: str, started: float) -> None:
    REQUESTS_TOTAL.labels(endpoint=endpoint, status=status).inc()
    REQUEST_LATENCY_SECONDS.labels(endpoint=endpoint).observe(time.time() - started)
