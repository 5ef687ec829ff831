"""
NetPad MCP Proxy
================

Local proxy that lets code assistants (Cursor and other MCP clients) talk to
a NetPad server. It injects the stored NetPad API key into every request,
relays responses, and turns upstream failures into a small set of stable
error codes:

    - AUTH_ERROR               : NetPad rejected the API key (401/403)
    - NOT_FOUND                : NetPad resource or proxy endpoint not found
    - NETPAD_CONNECTION_ERROR  : NetPad could not be reached (502)

Any other upstream error is relayed unchanged.

Packages:
    - credentials : Stored NetPad URL, API key and port
    - forwarding  : Forwarder, normalizer, OpenAI translator and routes

Entry points:
    - netpad_proxy.main:create_app  : FastAPI application factory
    - netpad_proxy.cli:app          : ``netpad-mcp-proxy`` command line
"""

__version__ = "1.0.0"
