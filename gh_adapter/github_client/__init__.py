"""GitHub provider: raw REST resources, pagination, normalization and facade."""

from .adapter import GitHubAdapter
from .auth import AuthenticationSelector
from .pagination import CancellationToken, ResultPager

__all__ = [
    "GitHubAdapter",
    "AuthenticationSelector",
    "CancellationToken",
    "ResultPager",
]
