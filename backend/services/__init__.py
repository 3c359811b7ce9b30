"""
Services package - Business logic layer.

This package contains the roadside assistance core, operating on Django
models but decoupled from the HTTP/WebSocket layer.

Modules:
    - request_management: request store and lifecycle state machine
    - matching: mechanic ranking and accept dispatch
    - registry: wiring of the above into one container
"""
