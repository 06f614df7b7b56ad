"""
Shared utilities
"""

from utils.retry import RetryPolicy, retry_with_backoff, is_rate_limit_error

__all__ = [
    "RetryPolicy",
    "retry_with_backoff",
    "is_rate_limit_error",
]
