"""Origin resolution: map an allowed path to an absolute upstream URL."""

from profile_mirror.config import Settings
from profile_mirror.entities import OriginTarget
from profile_mirror.services.path_classifier import has_prefix

API_PREFIX = "/api"
STORAGE_PREFIX = "/googleapis_storage"


def strip_prefix(prefix: str):
    """Path rewrite dropping ``prefix`` and its separator, keeping a leading "/"."""

    def rewrite(path: str) -> str:
        return "/" + path[len(prefix) + 1:]

    return rewrite


def _identity(path: str) -> str:
    return path


class OriginResolver:
    """Pure mapping from (path, referer) to an upstream URL.

    Restricted prefixes (API and storage proxies) are only reachable when
    the referer starts with this service's own base URL, so the mirror
    cannot be used as an open relay to those upstreams.

    Example:
        ```python
        resolver = OriginResolver(settings)
        resolver.resolve("/", None)
        # 'https://bento.me/someone'
        resolver.resolve("/api/v1/x", "https://mirror.example.com/")
        # 'https://api.bento.me/v1/x'
        ```
    """

    def __init__(self, config: Settings) -> None:
        """Initialize the resolver.

        Args:
            config: Provides the base URL, profile username and upstream hosts.
        """
        self._base_url = config.base_url
        self._restricted = (
            (API_PREFIX, OriginTarget(config.api_origin, strip_prefix(API_PREFIX))),
            (STORAGE_PREFIX, OriginTarget(config.storage_origin, strip_prefix(STORAGE_PREFIX))),
        )
        self._root = OriginTarget(config.mirror_origin, lambda _: f"/{config.profile_username}")
        self._default = OriginTarget(config.mirror_origin, _identity)

    def is_trusted_referer(self, referer: str | None) -> bool:
        return bool(referer) and referer.startswith(self._base_url)

    def resolve(self, path: str, referer: str | None) -> str | None:
        """Resolve the upstream URL for a path.

        Args:
            path: URL path (already allowed by the classifier)
            referer: Referer header of the incoming request

        Returns:
            Absolute upstream URL, or None if the request is rejected
        """
        # The referer check must run before any mapping of a restricted prefix
        for prefix, target in self._restricted:
            if has_prefix(path, prefix):
                if not self.is_trusted_referer(referer):
                    return None
                return target.url_for(path)

        if path == "/":
            return self._root.url_for(path)

        return self._default.url_for(path)
