"""
Ready-made request handlers.

    from webserver.handlers import StaticFileHandler

    server = WebServer("127.0.0.1:8080", 4, StaticFileHandler("./public"))
"""

from .static import StaticFileHandler

__all__ = ["StaticFileHandler"]
