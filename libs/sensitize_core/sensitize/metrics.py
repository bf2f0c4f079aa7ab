from __future__ import annotations

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    generate_latest,
)

# Single registry shared by every module of the engine
REG = CollectorRegistry(auto_describe=True)

# Scalars replaced by a masked string
MET_FIELDS_MASKED = Counter(
    "sensitize_fields_masked_total",
    "scalar values masked",
    ["strategy"],
    registry=REG,
)

# Rules or rule parameters dropped while loading configuration
MET_RULE_ERRORS = Counter(
    "sensitize_rule_errors_total",
    "rule configuration diagnostics",
    ["reason"],
    registry=REG,
)

# Documents handed to the text entry points, by outcome
MET_DOCUMENTS = Counter(
    "sensitize_documents_total",
    "documents processed",
    ["outcome"],
    registry=REG,
)


def metrics_text() -> tuple[bytes, str]:
    """Exposition payload and content type for a scrape endpoint owned by the caller."""
    return generate_latest(REG), CONTENT_TYPE_LATEST


__all__ = [
    "REG",
    "MET_FIELDS_MASKED",
    "MET_RULE_ERRORS",
    "MET_DOCUMENTS",
    "metrics_text",
]
