from prometheus_client import Counter, Histogram

ENHANCEMENT_TOTAL = Counter(
    "ie_enhancement_total",
    "Total idea enhancement requests by outcome",
    ["status"],  # success / timeout / credential / quota / configuration / unclassified
)

ENHANCEMENT_DURATION = Histogram(
    "ie_enhancement_duration_seconds",
    "Time spent waiting on the provider for an enhancement",
    ["status"],
    buckets=(0.5, 1, 2, 5, 10, 20, 30, 60),
)

LLM_INVOCATIONS = Counter(
    "ie_llm_invocations_total",
    "Total provider invocations",
    ["model"],
)

REJECTED_INPUTS = Counter(
    "ie_rejected_inputs_total",
    "Total ideas rejected by the input gate",
)
