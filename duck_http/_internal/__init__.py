"""Internal modules for duck-http.

WARNING: This package contains system-level modules used by the Http
dispatcher. These are not intended for direct use in application code.

Modules:
    service - Request construction and completion routing
    transfer - Worker-thread httpx exchange
    http - Shared HTTP client configuration
    redaction - Header redaction for debug output
"""
