"""
Forwarding Package
==================

Forwards MCP requests from code assistants to a NetPad server.

Main Components:
----------------
- forwarder.py: RequestForwarder (URL/header building, body injection, one attempt)
- normalizer.py: Classifies call outcomes into the stable result taxonomy
- translator.py: NetPad tool descriptors -> OpenAI function descriptors
- routes.py: FastAPI router exposing the inbound MCP surface

Usage:
------
    from netpad_proxy.forwarding import router
    app.include_router(router)
"""

from .forwarder import RequestForwarder, create_upstream_client, inject_command_credentials
from .normalizer import normalize
from .routes import router
from .translator import translate_tools

__all__ = [
    "RequestForwarder",
    "create_upstream_client",
    "inject_command_credentials",
    "normalize",
    "router",
    "translate_tools",
]
