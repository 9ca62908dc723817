"""redweave: typed, asynchronous access to the Reddit API.

The package decodes Reddit's ``{"kind": ..., "data": {...}}`` JSON into lazily
evaluated model objects, wraps listing endpoints in cursor-driven paginators,
and ships an httpx-based transport with retries, rate limiting and caching.

Logging is disabled until :func:`redweave.log_config.configure_logging` is
called.
"""

__version__ = "0.1.0"
__author__ = "redweave contributors"

from .log_config import logger

logger.disable("redweave")

# Import core modules for easy access
from . import (  # noqa: E402
    auth,
    client,
    codegen,
    config,
    endpoints,
    exceptions,
    listing,
    log_config,
    models,
    paginators,
    response,
    types,
)
from .client import RedditClient  # noqa: E402
from .listing import Listing  # noqa: E402
from .paginators import (  # noqa: E402
    ImportantUserPaginator,
    InboxPaginator,
    Paginator,
    SubredditPaginator,
    UserContributionPaginator,
)

__all__ = [
    "__version__",
    "__author__",
    "ImportantUserPaginator",
    "InboxPaginator",
    "Listing",
    "Paginator",
    "RedditClient",
    "SubredditPaginator",
    "UserContributionPaginator",
    "auth",
    "client",
    "codegen",
    "config",
    "endpoints",
    "exceptions",
    "listing",
    "log_config",
    "models",
    "paginators",
    "response",
    "types",
]
