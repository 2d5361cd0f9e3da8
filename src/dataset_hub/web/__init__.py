from .pages import router, templates

__all__ = ["router", "templates"]
