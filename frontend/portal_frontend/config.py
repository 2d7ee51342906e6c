"""
Environment-aware configuration for the project portal frontend.
"""
import os

DEFAULT_BACKEND_URL = "http://127.0.0.1:8000"

# Request timeout in seconds for backend calls
API_TIMEOUT = float(os.getenv("API_TIMEOUT", "15"))


def get_api_base_url() -> str:
    """
    Get the backend base URL.

    Priority:
    1. BACKEND_URL environment variable
    2. Local default (http://127.0.0.1:8000)

    Returns:
        Base URL with trailing slash removed

    Raises:
        ValueError: If the configured URL is not an http(s) URL
    """
    url = os.getenv("BACKEND_URL", "").strip() or DEFAULT_BACKEND_URL
    if not url.startswith(("http://", "https://")):
        raise ValueError(f"BACKEND_URL must start with http:// or https://. Got: {url}")
    return url.rstrip("/")
