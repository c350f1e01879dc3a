# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (C) 2024 Akshat Kotpalliwar

"""
Exceptions raised while resolving and reading a performance counter
"""


class CounterQueryError(Exception):
    """Base class for every failure the runner reports as a message."""

    exit_code = 1

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class ValidationError(CounterQueryError):
    """The invocation does not name a readable counter."""


class UsageError(ValidationError):
    exit_code = 2


class UnsupportedModeError(ValidationError):
    exit_code = 3

    def __init__(self, mode):
        super().__init__(f"'{mode}' is not a supported type")
        self.mode = mode


class CategoryNotFoundError(ValidationError):
    exit_code = 4

    def __init__(self, category):
        super().__init__(f"Performance counter category {category} does not exist")
        self.category = category


class CounterNotFoundError(ValidationError):
    exit_code = 5

    def __init__(self, category, counter):
        super().__init__(f"Performance counter {category}:{counter} does not exist")
        self.category = category
        self.counter = counter


class InstanceNotFoundError(ValidationError):
    exit_code = 6

    def __init__(self, category, counter, instance):
        super().__init__(
            f"There is no instance {instance} for performance counter {category}:{counter}"
        )
        self.category = category
        self.counter = counter
        self.instance = instance


class CounterReadError(CounterQueryError):
    """The host could not produce a value for a validated counter."""

    def __init__(self, category, counter, reason):
        super().__init__(f"Could not read performance counter {category}:{counter}: {reason}")
        self.category = category
        self.counter = counter
        self.reason = reason
