"""Remote fetchers for interest suggestions."""

from interest_suggest.fetchers.base import InterestFetcher
from interest_suggest.fetchers.http_fetcher import HttpInterestFetcher

__all__ = ["InterestFetcher", "HttpInterestFetcher"]
