"""Path classification: which requests are served at all, and which are cacheable."""

import re

# Image, font, script, style, manifest and icon types
STATIC_EXTENSIONS = frozenset(
    {
        "png", "jpg", "jpeg", "gif", "webp", "avif", "svg", "ico",
        "woff", "woff2", "ttf", "otf", "eot",
        "js", "mjs", "css",
        "webmanifest",
    }
)

# API proxy, storage proxy, telemetry, framework assets, image assets
ALLOWED_GET_PREFIXES = ("/api", "/googleapis_storage", "/_axiom", "/_next", "/images")

CLEANUP_PATH = "/cleanup"
ALLOWED_POST_PREFIXES = ("/api",)

_SINGLE_SEGMENT_STATIC = re.compile(
    r"^/[^/]+\.(" + "|".join(sorted(STATIC_EXTENSIONS)) + r")$",
    re.IGNORECASE,
)


def has_prefix(path: str, prefix: str) -> bool:
    """Separator-bounded prefix match: ``/api`` matches ``/api`` and ``/api/x``, not ``/apix``."""
    return path == prefix or path.startswith(prefix + "/")


class PathClassifier:
    """Pure predicates over (path, method) pairs."""

    def __init__(
        self,
        get_prefixes: tuple[str, ...] = ALLOWED_GET_PREFIXES,
        post_prefixes: tuple[str, ...] = ALLOWED_POST_PREFIXES,
        cleanup_path: str = CLEANUP_PATH,
    ) -> None:
        self._get_prefixes = get_prefixes
        self._post_prefixes = post_prefixes
        self._cleanup_path = cleanup_path

    def is_allowed(self, path: str, method: str) -> bool:
        """Decide whether a request may be served at all.

        Args:
            path: URL path
            method: HTTP method

        Returns:
            True for the root, single-segment static files and allowed
            prefixes on GET; the cleanup trigger and API proxy on POST.
        """
        method = method.upper()
        if method == "GET":
            if path == "/":
                return True
            if _SINGLE_SEGMENT_STATIC.match(path):
                return True
            return any(has_prefix(path, prefix) for prefix in self._get_prefixes)

        if method == "POST":
            if path == self._cleanup_path:
                return True
            return any(has_prefix(path, prefix) for prefix in self._post_prefixes)

        return False

    def is_static_resource(self, path: str) -> bool:
        """True iff the last path segment carries an allowlisted extension."""
        segment = path.rsplit("/", 1)[-1]
        if "." not in segment:
            return False
        extension = segment.rsplit(".", 1)[-1].lower()
        return extension in STATIC_EXTENSIONS

    def is_cleanup_trigger(self, path: str, method: str) -> bool:
        return method.upper() == "POST" and path == self._cleanup_path
