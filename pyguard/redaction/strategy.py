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

import logging
from abc import ABC, abstractmethod
from typing import Callable

from pyguard.redaction.regex import SensitiveDataRegex, get_regex

logger = logging.getLogger(__name__)


class RedactionStrategy(ABC):
    @abstractmethod
    def redact(self, line: str) -> str:
        pass


class RegexRedactionStrategy(RedactionStrategy):
    """Replaces the argument of every sensitive option with a fixed token.

    Prefix, option and assignment are kept verbatim, and the line is rebuilt by
    position so that text outside a sensitive argument is never altered, even if
    it happens to equal the sensitive value.
    """

    def __init__(self, is_sensitive: Callable[[str], bool], redacted: str, regex: SensitiveDataRegex = None):
        self._is_sensitive = is_sensitive
        self._redacted = redacted
        self._regex = regex or get_regex()

    def redact(self, line: str) -> str:
        if not line:
            return line
        pieces = []
        last = 0
        for match in self._regex.finditer(line):
            if match.argument is None or not self._is_sensitive(match.option):
                continue
            logger.debug("Redacting argument of option %s", match.option)
            pieces.append(line[last : match.argument_start])
            pieces.append(self._redacted)
            last = match.end
        if not pieces:
            return line
        pieces.append(line[last:])
        return "".join(pieces)
