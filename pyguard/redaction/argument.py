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

from typing import Iterable, List, Union

from pyguard.redaction.defaults import REDACTED, SENSITIVE_PREFIXES, SENSITIVE_SUBSTRINGS
from pyguard.redaction.dictionary import (
    CombinedSensitiveDictionary,
    SensitiveDataDictionary,
    SensitivePrefixDictionary,
    SensitiveSubstringDictionary,
)
from pyguard.redaction.strategy import RedactionStrategy, RegexRedactionStrategy


class ArgumentValueRedaction(SensitiveDataDictionary):
    """Redacts the values of sensitive options in command lines and property listings.

    The following format is expected:

    - Each option/argument pair is separated by spaces.
    - The option of each pair is preceded by ``--``, ``-D`` or ``--J=-D``; only the
      first pair on a line may omit it.
    - Arguments may be wrapped in double quotes.
    - Options and arguments are separated by ``=`` or any number of spaces.

    Examples::

        "--password=secret"
        "--user me --password secret"
        "-Dflag -Dopt=arg"
        "--classpath=."
        "password=secret"
    """

    def __init__(
        self,
        redacted: str = REDACTED,
        sensitive_data_dictionary: SensitiveDataDictionary = None,
        redaction_strategy: RedactionStrategy = None,
    ):
        if sensitive_data_dictionary is None:
            sensitive_data_dictionary = CombinedSensitiveDictionary(
                SensitivePrefixDictionary(SENSITIVE_PREFIXES),
                SensitiveSubstringDictionary(SENSITIVE_SUBSTRINGS),
            )
        self.redacted = redacted
        self._dictionary = sensitive_data_dictionary
        self._strategy = redaction_strategy or RegexRedactionStrategy(sensitive_data_dictionary.is_sensitive, redacted)

    def redact(self, value: Union[str, Iterable[str]]) -> str:
        """Redact a single line, or an iterable of lines joined with single spaces."""
        if value is None or isinstance(value, str):
            return self._strategy.redact(value)
        return self._strategy.redact(" ".join(value))

    def redact_each_in_list(self, lines: Iterable[str]) -> List[str]:
        return [self._strategy.redact(line) for line in lines]

    def redact_argument_if_necessary(self, option: str, argument: str) -> str:
        """Return the redaction token if ``option`` is sensitive, otherwise ``argument``."""
        if self.is_sensitive(option):
            return self.redacted
        return argument

    def is_sensitive(self, option: str) -> bool:
        return self._dictionary.is_sensitive(option)

    def get_redacted(self) -> str:
        return self.redacted
