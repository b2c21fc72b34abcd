"""Prometheus metrics for the shopping agent."""

from prometheus_client import Counter, Histogram, Info

# Application info
app_info = Info("shopping_agent", "Shopping agent application info")
app_info.info({"version": "0.1.0", "name": "shopping-agent"})

# Task metrics
agent_tasks_total = Counter(
    "agent_tasks_total",
    "Total number of browser tasks executed",
    ["task_type", "status"],
)

agent_task_duration_seconds = Histogram(
    "agent_task_duration_seconds",
    "Time spent executing browser tasks",
    ["task_type"],
    buckets=[1.0, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0, 600.0],
)

# Shopping metrics
platform_searches_total = Counter(
    "platform_searches_total",
    "Total number of platform search attempts",
    ["platform", "outcome"],
)

products_extracted_total = Counter(
    "products_extracted_total",
    "Total number of product listings extracted",
    ["platform"],
)

# LLM metrics
llm_calls_total = Counter(
    "llm_calls_total",
    "Total number of intent classification calls",
    ["status"],
)

login_waits_total = Counter(
    "login_waits_total",
    "Times automation paused for a manual login",
    ["outcome"],
)
