"""Prometheus metrics for MailProbe.

Defines operational metrics for the mail pipeline and the GUID filter.
"""

from prometheus_client import Counter, Histogram

# GUID filter decisions
guid_filter_decisions_total = Counter(
    "mailprobe_guid_filter_decisions_total",
    "GUID filter decisions for saved mail",
    ["outcome"]  # outcome: accepted|no_token|not_found|lookup_error
)

delivery_delay_seconds = Histogram(
    "mailprobe_delivery_delay_seconds",
    "Delivery delay between first and last Received hop in seconds",
    buckets=[1, 5, 15, 30, 60, 120, 300, 600, 1800, 3600]
)

correlation_update_failures_total = Counter(
    "mailprobe_correlation_update_failures_total",
    "Failed writes of delivery data to correlation records"
)

# Pipeline metrics
messages_processed_total = Counter(
    "mailprobe_messages_processed_total",
    "Messages run through the pipeline",
    ["task", "status"]  # status: success|error
)

messages_stored_total = Counter(
    "mailprobe_messages_stored_total",
    "Messages handled by the mail store stage",
    ["status"]  # status: stored|ignored|error
)
