"""
Counter query runner for typeperf2
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

Protocol:
1. Normalize the arguments (a single token is re-split as a command line)
2. Check the mode, then category, counter and instance against the registry
3. Open the counter and sample it with the mode's function
4. Write the value to stdout without a newline

Every failure in steps 1-3 except tokenization is reported as one message
line on stdout. Tokenization errors propagate.
"""

import logging
import sys
from typing import Optional

from .cli import normalize_arguments, parse_arguments
from .config import RunnerConfig
from .counters import PsutilCounterRegistry
from .errors import (
    CategoryNotFoundError,
    CounterNotFoundError,
    CounterReadError,
    InstanceNotFoundError,
    UnsupportedModeError,
    ValidationError,
)
from .registry import CounterRegistry
from .sampling import SAMPLE_MODES

logger = logging.getLogger(__name__)


def query_counter(tokens, registry: Optional[CounterRegistry] = None) -> str:
    """Validate ``tokens`` against the registry and return the sampled value."""
    args = parse_arguments(tokens)

    sample = SAMPLE_MODES.get(args.mode)
    if sample is None:
        raise UnsupportedModeError(args.mode)

    if registry is None:
        registry = PsutilCounterRegistry()

    if not registry.category_exists(args.category):
        raise CategoryNotFoundError(args.category)
    if not registry.counter_exists(args.counter, args.category):
        raise CounterNotFoundError(args.category, args.counter)
    if args.instance and not registry.instance_exists(args.instance, args.category):
        raise InstanceNotFoundError(args.category, args.counter, args.instance)

    if args.instance:
        counter = registry.open_counter(args.category, args.counter, args.instance)
    else:
        counter = registry.open_counter(args.category, args.counter)
    return sample(counter)


def run_query(argv, registry: Optional[CounterRegistry] = None, out=None,
              config: Optional[RunnerConfig] = None) -> int:
    """Run one invocation and return the process exit status."""
    if out is None:
        out = sys.stdout
    if config is None:
        config = RunnerConfig()

    tokens = normalize_arguments(argv)
    logger.debug("Invocation: %r", tokens)

    try:
        value = query_counter(tokens, registry)
    except ValidationError as exc:
        logger.info("Rejected %r: %s", tokens, exc.message)
        print(exc.message, file=out)
        return exc.exit_code if config.strict_exit else 0
    except CounterReadError as exc:
        logger.warning("%s", exc.message)
        print(exc.message, file=out)
        return exc.exit_code

    out.write(value)
    out.flush()
    logger.debug("%r => %s", tokens, value)
    return 0
