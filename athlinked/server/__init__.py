"""
AthLinked Server Package.

This package contains the web server implementation for AthLinked.
It includes the API definition, core service logic, and configuration.

Subpackages:
    api: FastAPI route definitions and endpoint logic.
    core: Configuration, constants and token/password security helpers.
    services: Business logic and the real-time connection manager.
    exception_handlers: Mapping of exceptions to JSON error envelopes.
    middleware: Request tracing middleware.
"""
