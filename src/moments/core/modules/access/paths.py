"""Static classification of request paths for the edge gate."""

from dataclasses import dataclass
from enum import StrEnum


class PathClass(StrEnum):
    """How the edge gate treats a request path."""

    PUBLIC = "public"  # never gated
    STATIC = "static"  # never gated
    PROTECTED = "protected"  # requires a valid session


@dataclass(frozen=True)
class PathRule:
    """A pattern and the classification it yields.

    Exact rules match the path itself, with or without a trailing slash; prefix
    rules match any path that starts with the pattern.
    """

    pattern: str
    classification: PathClass
    prefix: bool = False

    def matches(self, path: str) -> bool:
        if self.prefix:
            return path.startswith(self.pattern)
        return path in (self.pattern, f"{self.pattern}/")


# Evaluated in order; the first matching rule wins
PATH_RULES: tuple[PathRule, ...] = (
    # Auth endpoints must stay reachable to establish a session
    PathRule("/api/auth/login", PathClass.PUBLIC),
    PathRule("/api/auth/logout", PathClass.PUBLIC),
    PathRule("/api/auth/status", PathClass.PUBLIC),
    PathRule("/api/auth/verify-token", PathClass.PUBLIC),
    PathRule("/api/health", PathClass.PUBLIC),
    PathRule("/health", PathClass.PUBLIC),
    # Framework-internal pages and crawler files
    PathRule("/docs", PathClass.PUBLIC),
    PathRule("/docs/", PathClass.PUBLIC, prefix=True),
    PathRule("/redoc", PathClass.PUBLIC),
    PathRule("/openapi.json", PathClass.PUBLIC),
    PathRule("/favicon.ico", PathClass.PUBLIC),
    PathRule("/robots.txt", PathClass.PUBLIC),
    PathRule("/sitemap.xml", PathClass.PUBLIC),
    # Static asset directories
    PathRule("/images/", PathClass.STATIC, prefix=True),
    PathRule("/icons/", PathClass.STATIC, prefix=True),
    PathRule("/uploads/", PathClass.STATIC, prefix=True),
    PathRule("/static/", PathClass.STATIC, prefix=True),
)


def classify_path(path: str, rules: tuple[PathRule, ...] = PATH_RULES) -> PathClass:
    """Classify a path by the first matching rule; unmatched paths are protected."""
    for rule in rules:
        if rule.matches(path):
            return rule.classification
    return PathClass.PROTECTED


def is_api_path(path: str) -> bool:
    """API paths get JSON error responses; everything else is navigational."""
    return path == "/api" or path.startswith("/api/")
