"""
X Post Publisher - HTTP server package.

Thin FastAPI layer over the x_oauth and publisher packages. Tokens are
held by the client and passed per request; the server keeps no sessions.
"""
from .server import PublisherServer
from .app import app, create_app

__version__ = "1.0.0"

__all__ = [
    'PublisherServer',
    'app',
    'create_app',
]
