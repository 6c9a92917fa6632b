"""
Business service layer
"""

from .auth_service import auth_service, AuthService
from .catalog_service import catalog_service, CatalogService
from .comment_service import comment_service, CommentService
from .library_service import library_service, LibraryService
from .affiliate_service import affiliate_service, AffiliateService

__all__ = [
    # Service classes
    "AuthService",
    "CatalogService",
    "CommentService",
    "LibraryService",
    "AffiliateService",
    # Global service instances
    "auth_service",
    "catalog_service",
    "comment_service",
    "library_service",
    "affiliate_service",
]
