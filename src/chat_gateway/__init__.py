"""
Chat Gateway - HTTP relay between browser chat clients and a pub/sub service.
"""

__version__ = "0.1.0"


def get_app():
    """Get the FastAPI application instance (lazy import to avoid initialization issues)."""
    from .main import app
    return app


__all__ = ["get_app", "__version__"]
