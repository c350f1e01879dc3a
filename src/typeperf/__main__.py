"""
Main entry point for typeperf2 CLI
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
"""

import sys

from .config import RunnerConfig
from .log import configure_logging
from .runner import run_query


def main(argv=None):
    """Main entry point for typeperf2 CLI."""
    if argv is None:
        argv = sys.argv[1:]

    config = RunnerConfig.from_environ()
    configure_logging(config)

    try:
        returncode = run_query(argv, config=config)
    except KeyboardInterrupt:
        sys.exit(130)  # Standard exit code for SIGINT
    sys.exit(returncode)


if __name__ == "__main__":
    main()
