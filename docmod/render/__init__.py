"""HTML site rendering for module documents."""

from .site import SiteRenderer, TemplateError

__all__ = ["SiteRenderer", "TemplateError"]
