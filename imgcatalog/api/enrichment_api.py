"""Enrichment API client for generating image descriptions and keywords.

This module provides a client to call an external vision model served
behind an Ollama-compatible generate endpoint. The model is asked for a
short description followed, after a blank line, by a keyword list.
"""

import base64
import hashlib
from typing import Optional

import requests

DEFAULT_API_URL = "http://localhost:11434"
DEFAULT_MODEL = "llava"
DEFAULT_TIMEOUT = 120.0
KEYWORDS_PREFIX = "Keywords: "

DEFAULT_PROMPT = (
    "Describe this image in one or two sentences. "
    "Then write a blank line, followed by a single line that starts with "
    "'Keywords: ' and lists relevant keywords separated by commas."
)


class EnrichmentAPIError(Exception):
    """Raised when the enrichment API call fails or returns an unusable response."""
    pass


def parse_model_output(raw: str) -> tuple[str, str]:
    """Split raw model output into (description, keywords).

    The output is split on the first blank line. The first part is the
    description, kept verbatim. The second part, if any, becomes the
    keyword list with a leading "Keywords: " removed.

    Args:
        raw: Text generated by the model

    Returns:
        Tuple of (description, keywords); a missing part is an empty string
    """
    parts = raw.split("\n\n", 1)
    description = parts[0]
    keywords = parts[1].strip() if len(parts) > 1 else ""
    if keywords.startswith(KEYWORDS_PREFIX):
        keywords = keywords[len(KEYWORDS_PREFIX):]
    return description, keywords


class EnrichmentAPI:
    """Client for the image description API.

    Expected API format:
        POST {base_url}/api/generate
        Request body: {"model": "<model_name>", "prompt": "<text>",
                       "images": ["<base64_encoded_image>"], "stream": false}
        Response: {"response": "<generated text>", ...}
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        model: str = DEFAULT_MODEL,
        prompt: str = DEFAULT_PROMPT,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
    ):
        """Initialize the enrichment API client.

        Args:
            base_url: Base URL of the generation API (e.g., 'http://localhost:11434')
            model: Name of the vision model to use
            prompt: Instruction sent along with every image
            timeout: Request timeout in seconds. None waits indefinitely.
        """
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.prompt = prompt
        self.timeout = timeout

    @property
    def generate_url(self) -> str:
        return f"{self.base_url}/api/generate"

    def build_payload(self, image_bytes: bytes) -> dict:
        """Build the JSON request body for one image."""
        return {
            "model": self.model,
            "prompt": self.prompt,
            "images": [base64.b64encode(image_bytes).decode("utf-8")],
            "stream": False,
        }

    def generate(self, image_bytes: bytes) -> str:
        """Send an image to the model and return its raw text output.

        Raises:
            EnrichmentAPIError: If the request fails, the status is not 2xx,
                or the response has no text field
        """
        try:
            response = requests.post(
                self.generate_url,
                json=self.build_payload(image_bytes),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise EnrichmentAPIError(f"Request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise EnrichmentAPIError(
                f"API error {response.status_code}: {response.text}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise EnrichmentAPIError(f"Malformed JSON response: {e}") from e

        if not isinstance(data, dict):
            raise EnrichmentAPIError("Malformed response: expected a JSON object")

        text = data.get("response")
        if not isinstance(text, str):
            raise EnrichmentAPIError("Malformed response: missing 'response' field")
        return text

    def analyze(self, image_bytes: bytes) -> tuple[str, str]:
        """Describe an image.

        Args:
            image_bytes: Raw bytes of the image file, sent unmodified

        Returns:
            Tuple of (description, keywords)

        Raises:
            EnrichmentAPIError: If the API call fails
        """
        return parse_model_output(self.generate(image_bytes))


class MockEnrichmentAPI(EnrichmentAPI):
    """Mock enrichment API for testing without a real server.

    Generates a deterministic description based on image content.
    """

    def __init__(self, model: str = "mock"):
        super().__init__(base_url="http://mock", model=model)
        self.calls = 0

    def generate(self, image_bytes: bytes) -> str:
        self.calls += 1
        digest = hashlib.sha256(image_bytes).hexdigest()
        return (
            f"An image of {len(image_bytes)} bytes ({digest[:12]}).\n\n"
            f"{KEYWORDS_PREFIX}mock, {self.model}, {digest[:6]}"
        )
