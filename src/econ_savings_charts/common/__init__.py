from .retry import http_get_with_retries  # noqa: F401

__all__ = ["http_get_with_retries"]
