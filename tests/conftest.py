"""
Shared fixtures for pagination tests
"""

import threading
from typing import Any, List, Optional

import pytest

from jquants_client.deadline import Deadline
from jquants_client.pagination import Page


class ScriptedFetcher:
    """
    Page fetcher replaying a fixed script of outcomes

    Each script entry is either a Page to return or an exception to raise.
    Every call records the pagination key it was given.
    """

    def __init__(self, script: List[Any]):
        self.script = list(script)
        self.keys: List[Optional[str]] = []
        self.page_fetched = threading.Event()

    @property
    def call_count(self) -> int:
        return len(self.keys)

    def __call__(self, pagination_key: Optional[str], deadline: Deadline) -> Page:
        self.keys.append(pagination_key)
        if not self.script:
            raise AssertionError("Fetcher called more times than scripted")
        outcome = self.script.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        self.page_fetched.set()
        return outcome


@pytest.fixture
def scripted_fetcher():
    return ScriptedFetcher
