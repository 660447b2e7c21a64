class QuoteProviderError(RuntimeError):
    """Raised when the flight or lodging quote provider call fails (transport, status, payload)."""
