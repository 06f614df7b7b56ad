"""
Custom exception hierarchy for the benchmark
"""

from typing import Optional


class BenchmarkException(Exception):
    """Base exception for benchmark errors"""
    pass


class ConfigurationError(BenchmarkException):
    """No usable provider configuration (missing credentials, unknown provider)"""
    pass


class FixtureIntegrityError(BenchmarkException):
    """Corpus or query fixtures are inconsistent"""
    pass


class DimensionMismatchError(BenchmarkException):
    """Vectors of different dimensionality were combined"""
    pass


class EmbeddingError(BenchmarkException):
    """Error during embedding generation"""
    pass


class ProviderError(EmbeddingError):
    """Non-transient failure reported by (or talking to) an embedding provider"""

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.body = body


class RateLimitedError(ProviderError):
    """Provider rejected the request because of a rate limit"""
    pass


class ProviderResponseError(ProviderError):
    """Provider answered 2xx but the body does not have the expected shape"""
    pass


class BenchmarkRunError(BenchmarkException):
    """A provider run failed; carries the phase that failed"""

    def __init__(self, provider: str, phase: str, cause: Exception):
        super().__init__(f"{provider}: {phase} embedding failed: {cause}")
        self.provider = provider
        self.phase = phase
        self.cause = cause


class ProviderTimeoutError(BenchmarkException):
    """A provider run exceeded its external deadline"""

    def __init__(self, provider: str, timeout: float):
        super().__init__(f"{provider}: benchmark run exceeded {timeout:.0f}s deadline")
        self.provider = provider
        self.timeout = timeout
