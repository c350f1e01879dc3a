# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (C) 2024 Akshat Kotpalliwar
"""Pytest configuration and fixtures."""

import io
import sys
import pytest
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


class FakeCounter:
    """Counter handle with scripted raw and calculated values."""

    def __init__(self, raw=0, values=(), error=None):
        self.raw = raw
        self.values = list(values)
        self.error = error
        self.next_calls = 0

    @property
    def raw_value(self):
        if self.error is not None:
            raise self.error
        return self.raw

    def next_value(self):
        if self.error is not None:
            raise self.error
        self.next_calls += 1
        return self.values[self.next_calls - 1]


class FakeRegistry:
    """In-memory registry that records every lookup it receives."""

    def __init__(self, counters, instances=None):
        self.counters = counters
        self.instances = instances or {}
        self.calls = []
        self.opened = []

    def category_exists(self, category):
        self.calls.append(('category_exists', category))
        return any(known == category for known, _ in self.counters)

    def counter_exists(self, counter, category):
        self.calls.append(('counter_exists', counter, category))
        return (category, counter) in self.counters

    def instance_exists(self, instance, category):
        self.calls.append(('instance_exists', instance, category))
        return instance in self.instances.get(category, ())

    def open_counter(self, category, counter, instance=''):
        self.opened.append((category, counter, instance))
        return self.counters[(category, counter)]


@pytest.fixture
def processor_counter():
    return FakeCounter(raw=123456, values=[0.0, 42.5])


@pytest.fixture
def registry(processor_counter):
    """Registry with a processor counter, a memory counter and one spaced name."""
    return FakeRegistry(
        counters={
            ('Processor', '% Processor Time'): processor_counter,
            ('Memory', 'Available Bytes'): FakeCounter(raw=4096, values=[4096.0]),
            ('My Category', 'My Counter'): FakeCounter(raw=7, values=[7.0]),
        },
        instances={'Processor': ['_Total', '0', '1']},
    )


@pytest.fixture
def out():
    return io.StringIO()
