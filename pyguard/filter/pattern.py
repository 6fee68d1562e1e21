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

from abc import ABC, abstractmethod

CATCH_ALL_REJECT = "!*"


class DelimitedStringBuilder:
    """Joins clauses with a delimiter, preserving insertion order.

    Blank clauses are ignored. No delimiter is written before the first clause,
    nor after text that already ends with the delimiter.
    """

    def __init__(self, initial_value: str = None, delimiter: str = ";"):
        self._delimiter = delimiter
        self._buffer = ""
        self.append(initial_value)

    def append(self, value: str) -> "DelimitedStringBuilder":
        if value is None or not value.strip():
            return self
        if self._buffer and not self._buffer.endswith(self._delimiter):
            self._buffer += self._delimiter
        self._buffer += value
        return self

    def __str__(self):
        return self._buffer

    def __repr__(self):
        return f"DelimitedStringBuilder({self._buffer!r})"


class FilterPattern(ABC):
    @abstractmethod
    def pattern(self) -> str:
        pass


# Types every sanctioned-serializables pattern accepts. Order is significant:
# the first matching clause decides.
SANCTIONED_DEPENDENCIES = (
    # core value types and pickle reconstructors
    "builtins.set",
    "builtins.frozenset",
    "builtins.bytearray",
    "builtins.complex",
    "builtins.range",
    "builtins.slice",
    "builtins.object",
    "copyreg._reconstructor",
    "_codecs.encode",
    "collections.OrderedDict",
    "collections.deque",
    "collections.Counter",
    "datetime.*",
    "decimal.Decimal",
    "fractions.Fraction",
    "uuid.UUID",
    "uuid.SafeUUID",
    "ipaddress.*",
    "pathlib.PurePath",
    "pathlib.PurePosixPath",
    "pathlib.PureWindowsPath",
    "pathlib.PosixPath",
    "pathlib.WindowsPath",
    # query language syntax trees
    "lark.**",
    # legacy admin and configuration types
    "pyguard.distributed.ConfigurationSnapshot",
    "pyguard.distributed.MemberIdentifier",
    "pyguard.distributed.DiskStoreId",
    # security exceptions exchanged by older members
    "ssl.SSLError",
    "ssl.SSLCertVerificationError",
    "ssl.SSLZeroReturnError",
    "cryptography.x509.**",
    "cryptography.exceptions.InvalidSignature",
)


class SanctionedSerializablesFilterPattern(FilterPattern):
    """Accept pattern seeded with the sanctioned dependencies.

    Extra clauses go after the dependencies, and the pattern always ends by
    rejecting everything else.
    """

    def __init__(self):
        self._builder = DelimitedStringBuilder(";".join(SANCTIONED_DEPENDENCIES))

    def append(self, clause: str) -> "SanctionedSerializablesFilterPattern":
        self._builder.append(clause)
        return self

    def pattern(self) -> str:
        return str(DelimitedStringBuilder(str(self._builder)).append(CATCH_ALL_REJECT))


MANAGEMENT_OPEN_TYPES = (
    "builtins.bool",
    "builtins.int",
    "builtins.float",
    "builtins.complex",
    "builtins.str",
    "builtins.bytes",
    "builtins.list",
    "builtins.tuple",
    "builtins.dict",
    "builtins.set",
    "builtins.frozenset",
    "datetime.date",
    "datetime.datetime",
    "datetime.timedelta",
    "datetime.timezone",
    "decimal.Decimal",
    "pyguard.filter.api.Status",
)


class ManagementFilterPattern(FilterPattern):
    """Accepts only the open data types exchanged over the management channel."""

    def pattern(self) -> str:
        builder = DelimitedStringBuilder()
        for open_type in MANAGEMENT_OPEN_TYPES:
            builder.append(open_type)
        return str(builder.append(CATCH_ALL_REJECT))
