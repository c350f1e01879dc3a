"""
Counter registry contracts and counter handles
Copyright (C) 2024  Akshat Kotpalliwar

This library is free software; you can redistribute it and/or
modify it under the terms of the GNU Lesser General Public
License as published by the Free Software Foundation; either
version 2.1 of the License, or (at your option) any later version.

This library is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU
Lesser General Public License for more details.

You should have received a copy of the GNU Lesser General Public
License along with this library; if not, see <https://www.gnu.org/licenses/>.

Counter kinds:
- gauge: the value is the reading itself
- rate: change of a cumulative count per second between two samples
- timer: share (in percent) of a reference time spent in some state

Rate and timer values need two samples. A fresh handle has only one, so its
first calculated value is 0; callers that want a real reading take a second
sample later.
"""

from __future__ import annotations

import time
from collections import namedtuple
from typing import Callable, Dict, List, Optional, Protocol

from .errors import CounterReadError

GAUGE = 'gauge'
RATE = 'rate'
TIMER = 'timer'

CounterSample = namedtuple('CounterSample', ['raw', 'base'])

clock = time.monotonic


class CounterHandle(Protocol):
    @property
    def raw_value(self):
        ...

    def next_value(self):
        ...


class CounterRegistry(Protocol):
    def category_exists(self, category: str) -> bool:
        ...

    def counter_exists(self, counter: str, category: str) -> bool:
        ...

    def instance_exists(self, instance: str, category: str) -> bool:
        ...

    def open_counter(self, category: str, counter: str, instance: str = '') -> CounterHandle:
        ...


class CounterDefinition:
    """How to sample one named counter and turn samples into values."""

    __slots__ = ('name', 'kind', 'sampler', 'scale', 'clamp')

    def __init__(self, name, kind, sampler, scale=1.0, clamp=False):
        self.name = name
        self.kind = kind
        self.sampler = sampler
        self.scale = scale
        self.clamp = clamp

    def sample(self, instance: str) -> CounterSample:
        return self.sampler(instance)

    def calculate(self, previous: Optional[CounterSample], current: CounterSample):
        if self.kind == GAUGE:
            return current.raw
        if previous is None:
            return 0.0

        delta_base = current.base - previous.base
        if delta_base <= 0:
            return 0.0
        value = (current.raw - previous.raw) / delta_base * self.scale
        if self.clamp:
            value = min(max(value, 0.0), 100.0)
        return value


def gauge(name, read):
    """Counter whose value is ``read(instance)``."""
    return CounterDefinition(name, GAUGE, lambda instance: CounterSample(read(instance), None))


def rate(name, read):
    """Per-second counter over the cumulative count ``read(instance)``."""
    return CounterDefinition(
        name, RATE, lambda instance: CounterSample(read(instance), clock())
    )


def timer(name, sampler, clamp=True):
    """Percentage counter; ``sampler`` returns (part, total) in one reading."""
    return CounterDefinition(name, TIMER, sampler, scale=100.0, clamp=clamp)


class CounterCategory:
    """A named group of counter definitions sharing one instance list."""

    __slots__ = ('name', '_counters', '_list_instances')

    def __init__(self, name: str, counters: List[CounterDefinition],
                 list_instances: Optional[Callable[[], List[str]]] = None):
        self.name = name
        self._counters: Dict[str, CounterDefinition] = {
            counter.name.casefold(): counter for counter in counters
        }
        self._list_instances = list_instances

    @property
    def counter_names(self) -> List[str]:
        return [counter.name for counter in self._counters.values()]

    def find_counter(self, counter: str) -> Optional[CounterDefinition]:
        return self._counters.get(counter.casefold())

    def instances(self) -> List[str]:
        if self._list_instances is None:
            return []
        return list(self._list_instances())

    def find_instance(self, instance: str) -> Optional[str]:
        wanted = instance.casefold()
        for name in self.instances():
            if name.casefold() == wanted:
                return name
        return None


class PerformanceCounter:
    """
    Live handle on one counter of one instance.

    ``raw_value`` reads the counter without calculation. ``next_value()``
    takes a new sample and calculates against the sample taken by the
    previous ``next_value()`` call on the same handle.
    """

    __slots__ = ('category_name', 'counter_name', 'instance_name', '_definition', '_last_sample')

    def __init__(self, category_name, definition, instance_name=''):
        self.category_name = category_name
        self.counter_name = definition.name
        self.instance_name = instance_name
        self._definition = definition
        self._last_sample = None

    def _sample(self):
        try:
            return self._definition.sample(self.instance_name)
        except (LookupError, OSError) as exc:
            raise CounterReadError(self.category_name, self.counter_name, exc) from exc

    @property
    def raw_value(self):
        return self._sample().raw

    def next_value(self):
        sample = self._sample()
        value = self._definition.calculate(self._last_sample, sample)
        self._last_sample = sample
        return value

    def __repr__(self):
        return (
            f"PerformanceCounter({self.category_name!r}, {self.counter_name!r}, "
            f"{self.instance_name!r})"
        )
