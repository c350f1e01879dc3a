# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (C) 2024 Akshat Kotpalliwar

"""
Value-type modes: how a printable value is taken from a counter handle
"""

import time

from .registry import CounterHandle

# Rate counters need time between two samples to report anything but 0
NEXT2_DELAY_SECONDS = 1.0


def format_value(value) -> str:
    """Render a counter value as a plain decimal string."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def sample_raw(counter: CounterHandle) -> str:
    return format_value(counter.raw_value)


def sample_next(counter: CounterHandle) -> str:
    return format_value(counter.next_value())


def sample_next2(counter: CounterHandle) -> str:
    """Prime the counter, wait one second, report the second calculated value."""
    counter.next_value()
    time.sleep(NEXT2_DELAY_SECONDS)
    return format_value(counter.next_value())


SAMPLE_MODES = {
    'raw': sample_raw,
    'next': sample_next,
    'next2': sample_next2,
}
