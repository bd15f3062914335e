from .base import DrawResultsFeed, StaticDrawFeed
from .http_api import HttpJsonDrawFeed, HttpJsonDrawFeedConfig, parse_uint

__all__ = [
    "DrawResultsFeed",
    "HttpJsonDrawFeed",
    "HttpJsonDrawFeedConfig",
    "StaticDrawFeed",
    "parse_uint",
]
