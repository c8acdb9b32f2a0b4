"""
Helpers shared across groupcal.
"""
from groupcal.utils.uri import slugify, suggest_uri

__all__ = ["slugify", "suggest_uri"]
