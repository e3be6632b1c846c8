"""Hacker News feed source."""

from daily_feed.sources.hn import HackerNewsClient, filter_valid_items
from daily_feed.sources.models import CandidateItem


__all__ = ["CandidateItem", "HackerNewsClient", "filter_valid_items"]
