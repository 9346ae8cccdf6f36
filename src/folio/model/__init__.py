"""Model package - Database and business logic"""
from .database import Database
from .article_model import (
    LAYER_NAMES, Article, ArticleModel, ArticleNotFoundError, ArticleValidationError,
    DuplicateArticleError,
)
from .engagement_model import (
    AnnotationModel, AnnotationNotFoundError, AnnotationPermissionError, ClapModel,
    EngagementValidationError,
)

__all__ = [
    'Database', 'LAYER_NAMES', 'Article', 'ArticleModel', 'ArticleNotFoundError',
    'ArticleValidationError', 'DuplicateArticleError', 'ClapModel', 'AnnotationModel',
    'AnnotationNotFoundError', 'AnnotationPermissionError', 'EngagementValidationError',
]
