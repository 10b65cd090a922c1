"""AthLinked.

Backend for AthLinked, a social network for athletes, coaches, parents and
organizations.

High-level architecture
-----------------------

- ``athlinked.core``:

  - Logging and Logfire monitoring setup.
  - Domain exceptions shared by every layer.
  - SQLModel entities, async repositories and engine/session helpers.
  - Pydantic I/O schemas for the HTTP contract.

- ``athlinked.server``:

  - The FastAPI application, its routers and middleware.
  - Service classes holding the business rules (profiles, network, clips,
    messaging) and the WebSocket connection manager.

Typical workflow
----------------

Routers resolve the current user from the bearer token, build a service
around the request's ``AsyncSession`` and translate the service result into a
``{"success": ..., "data": ...}`` envelope. Services raise domain exceptions
which the registered exception handlers turn into ``{"success": false,
"message": ...}`` responses.
"""
