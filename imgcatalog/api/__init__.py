"""External API integrations - enrichment API client."""

from .enrichment_api import (
    EnrichmentAPI,
    EnrichmentAPIError,
    MockEnrichmentAPI,
    parse_model_output,
    DEFAULT_API_URL,
    DEFAULT_MODEL,
    DEFAULT_PROMPT,
)

__all__ = [
    "EnrichmentAPI",
    "EnrichmentAPIError",
    "MockEnrichmentAPI",
    "parse_model_output",
    "DEFAULT_API_URL",
    "DEFAULT_MODEL",
    "DEFAULT_PROMPT",
]
