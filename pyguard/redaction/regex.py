# Licensed to the Apache Software Foundation (ASF) under one
# or more contributor license agreements.  See the NOTICE file
# distributed with this work for additional information
# regarding copyright ownership.  The ASF licenses this file
# to you under the Apache License, Version 2.0 (the
# "License"); you may not use this file except in compliance
# with the License.  You may obtain a copy of the License at
#
#   http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing,
# software distributed under the License is distributed on an
# "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY
# KIND, either express or implied.  See the License for the
# specific language governing permissions and limitations
# under the License.

"""Scanner for option/argument pairs in command lines and property listings.

Recognized syntax::

    --option=argument           --option argument         --option = argument
    -Dproperty=value            --J=-Dproperty=value      property=value (first token only)
    --option="quoted -argument"

A line is scanned token by token. Each candidate goes through four states,
PREFIX -> OPTION -> ASSIGNMENT -> ARGUMENT, each driven by its own small
expression exposed through :class:`Group`. An argument that follows blank-only
assignment may not itself look like the start of a new option, which is what
separates ``--flag --option=value`` into two pairs. An unterminated quote
runs to the end of the line.
"""

import dataclasses
import enum
import re
from typing import Iterator, Optional


class Group(enum.Enum):
    PREFIX = (1, r"--J=-D|-D|-{2,}")
    OPTION = (2, r'[^\s="\-][^\s="]*')
    ASSIGNMENT = (3, r"[ \t]*=[ \t]*|[ \t]+")
    ARGUMENT = (4, r'"[^"]*"\S*|"[^"]*$|\S+')

    def __init__(self, index, regex):
        self.index = index
        self.regex = regex
        self.pattern = re.compile(regex)


_WHITESPACE = re.compile(r"\s+")
_TOKEN = re.compile(r"\S+")


@dataclasses.dataclass(frozen=True)
class RedactionMatch:
    prefix: str
    option: str
    assignment: Optional[str]
    argument: Optional[str]
    start: int
    end: int

    @property
    def argument_start(self) -> int:
        if self.argument is None:
            return self.end
        return self.end - len(self.argument)

    def group(self, group: Group):
        return dataclasses.astuple(self)[group.index - 1]

    def text(self) -> str:
        return "".join(part for part in (self.prefix, self.option, self.assignment, self.argument) if part)


class SensitiveDataRegex:
    def finditer(self, line: str) -> Iterator[RedactionMatch]:
        """Yield every option/argument pair in ``line`` from left to right."""
        pos = 0
        length = len(line)
        first_token = True
        while pos < length:
            blank = _WHITESPACE.match(line, pos)
            if blank:
                pos = blank.end()
                continue
            at_boundary = pos == 0 or line[pos - 1].isspace()
            match = self._match_at(line, pos, allow_bare=first_token) if at_boundary else None
            first_token = False
            if match is None:
                pos = _TOKEN.match(line, pos).end()
                continue
            yield match
            pos = match.end

    def findall(self, line: str):
        return list(self.finditer(line))

    def match(self, line: str) -> Optional[RedactionMatch]:
        """Return the pair if the whole of ``line`` is exactly one option/argument pair."""
        match = self._match_at(line, 0, allow_bare=True)
        if match is not None and match.end == len(line):
            return match
        return None

    def _match_at(self, line, pos, allow_bare):
        prefix_match = Group.PREFIX.pattern.match(line, pos)
        if prefix_match:
            prefix = prefix_match.group()
            cursor = prefix_match.end()
        elif allow_bare:
            prefix = ""
            cursor = pos
        else:
            return None
        option_match = Group.OPTION.pattern.match(line, cursor)
        if option_match is None:
            return None
        option = option_match.group()
        cursor = option_match.end()
        assignment_match = Group.ASSIGNMENT.pattern.match(line, cursor)
        if assignment_match:
            assignment = assignment_match.group()
            argument_match = Group.ARGUMENT.pattern.match(line, assignment_match.end())
            if argument_match and self._accepts_argument(line, assignment, argument_match.start()):
                return RedactionMatch(prefix, option, assignment, argument_match.group(), pos, argument_match.end())
        return RedactionMatch(prefix, option, None, None, pos, cursor)

    @staticmethod
    def _accepts_argument(line, assignment, argument_start):
        if assignment.endswith("="):
            return True
        # after blanks the next token may be a new option instead of an argument
        prefix_match = Group.PREFIX.pattern.match(line, argument_start)
        if prefix_match is None:
            return True
        return Group.OPTION.pattern.match(line, prefix_match.end()) is None


_DEFAULT_REGEX = SensitiveDataRegex()


def get_regex() -> SensitiveDataRegex:
    return _DEFAULT_REGEX
