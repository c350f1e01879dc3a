"""
Command Line Interface for typeperf2
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

import argparse
import os
import shlex

from .errors import UsageError

USAGE = '''Usage:
typeperf2 <value type> <category> <counter> [instance]
    where type is any of:
        raw => the raw value of the counter
        next2 => the second calculated value
        next => the calculated value'''


def parse_arguments(tokens):
    """Apply the positional argument contract to already normalized tokens.

    Raises UsageError unless there are exactly three or four tokens.
    """
    tokens = list(tokens)
    if len(tokens) not in (3, 4):
        raise UsageError(USAGE)
    # positional only: "--" or "-1" are values, never options
    mode, category, counter, *rest = tokens
    return argparse.Namespace(
        mode=mode,
        category=category,
        counter=counter,
        instance=rest[0] if rest else '',
    )


def normalize_arguments(argv):
    """Re-split a single token that carries a whole command line."""
    argv = list(argv)
    if len(argv) == 1:
        return split_command_line(argv[0])
    return argv


def split_command_line(command_line, posix=None):
    """
    Split ``command_line`` into argument tokens honoring quotes.

    Windows rules are used on Windows (or when ``posix`` is False), shell
    rules everywhere else. Shell rules raise ValueError on an unterminated
    quote; that error is left to the caller.
    """
    if posix is None:
        posix = os.name != 'nt'
    if posix:
        return shlex.split(command_line)
    return _split_windows_command_line(command_line)


def _read_program_name(command_line):
    """Return (first token, index after it) using the program-name rules.

    The first token has no backslash or doubled-quote processing: a leading
    quote runs to the next quote, otherwise the token runs to the first space
    or tab. A leading space therefore yields an empty first token.
    """
    length = len(command_line)
    if command_line.startswith('"'):
        end = command_line.find('"', 1)
        if end == -1:
            return command_line[1:], length
        return command_line[1:end], end + 1

    end = 0
    while end < length and command_line[end] not in ' \t':
        end += 1
    return command_line[:end], end


def _split_windows_command_line(command_line):
    """
    Tokenize with the CommandLineToArgvW rules.

    The first token follows the program-name rules of _read_program_name,
    the rest the Microsoft C runtime argument rules. An empty line has no
    tokens (the Windows call would return the executable path instead).
    """
    if not command_line:
        return []

    first, i = _read_program_name(command_line)
    args = [first]
    current = []
    in_quotes = False
    have_token = False
    length = len(command_line)

    while i < length:
        char = command_line[i]

        if char == '\\':
            start = i
            while i < length and command_line[i] == '\\':
                i += 1
            count = i - start
            if i < length and command_line[i] == '"':
                # 2n backslashes + quote: n backslashes, quote is a delimiter
                # 2n+1 backslashes + quote: n backslashes and a literal quote
                current.append('\\' * (count // 2))
                if count % 2:
                    current.append('"')
                    i += 1
            else:
                current.append('\\' * count)
            have_token = True
            continue

        if char == '"':
            if in_quotes and i + 1 < length and command_line[i + 1] == '"':
                current.append('"')
                i += 2
                continue
            in_quotes = not in_quotes
            have_token = True
            i += 1
            continue

        if char in ' \t' and not in_quotes:
            if have_token:
                args.append(''.join(current))
                current = []
                have_token = False
            i += 1
            continue

        current.append(char)
        have_token = True
        i += 1

    if have_token:
        args.append(''.join(current))
    return args
