"""
Prometheus metrics for the ledger engine. Exposed at /metrics by main.py.
"""

from prometheus_client import Counter

SWAP_REQUEST_EVENTS = Counter(
    "swapshop_swap_request_events_total",
    "Swap request lifecycle events",
    ["event", "offer_kind"],
)

LEDGER_ENTRIES = Counter(
    "swapshop_ledger_entries_total",
    "Transactions appended to the points ledger",
    ["type"],
)

INVARIANT_VIOLATIONS = Counter(
    "swapshop_invariant_violations_total",
    "Ledger invariant violations (broken atomicity contract)",
)
