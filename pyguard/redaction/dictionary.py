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

"""Option-name classifiers used to decide whether an argument value is sensitive."""

from abc import ABC, abstractmethod
from typing import Iterable


class SensitiveDataDictionary(ABC):
    @abstractmethod
    def is_sensitive(self, name: str) -> bool:
        """Return True if the argument value of option ``name`` must be redacted."""


class SensitiveSubstringDictionary(SensitiveDataDictionary):
    """Matches option names containing any of the given substrings."""

    def __init__(self, substrings: Iterable[str]):
        self._substrings = tuple(substrings)

    def is_sensitive(self, name: str) -> bool:
        if name is None:
            return False
        return any(substring in name for substring in self._substrings)


class SensitivePrefixDictionary(SensitiveDataDictionary):
    """Matches option names starting with any of the given prefixes.

    A prefix only matches at position 0: ``security-manager`` matches the
    prefix ``security-`` while ``gemfire.security-manager`` does not.
    """

    def __init__(self, prefixes: Iterable[str]):
        self._prefixes = tuple(prefixes)

    def is_sensitive(self, name: str) -> bool:
        if name is None:
            return False
        return name.startswith(self._prefixes)


class CombinedSensitiveDictionary(SensitiveDataDictionary):
    def __init__(self, *dictionaries: SensitiveDataDictionary):
        self._dictionaries = dictionaries

    def is_sensitive(self, name: str) -> bool:
        return any(dictionary.is_sensitive(name) for dictionary in self._dictionaries)
