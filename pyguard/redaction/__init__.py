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

from pyguard.redaction.argument import ArgumentValueRedaction
from pyguard.redaction.defaults import (  # noqa: F401
    REDACTED,
    SENSITIVE_PREFIXES,
    SENSITIVE_SUBSTRINGS,
)
from pyguard.redaction.dictionary import (  # noqa: F401
    CombinedSensitiveDictionary,
    SensitiveDataDictionary,
    SensitivePrefixDictionary,
    SensitiveSubstringDictionary,
)
from pyguard.redaction.regex import Group, RedactionMatch, SensitiveDataRegex  # noqa: F401
from pyguard.redaction.strategy import RedactionStrategy, RegexRedactionStrategy  # noqa: F401

_redaction = ArgumentValueRedaction()


def redact(value):
    """Redact the arguments of sensitive options in a line, or in lines joined by spaces."""
    return _redaction.redact(value)


def redact_each_in_list(lines):
    return _redaction.redact_each_in_list(lines)


def redact_argument_if_necessary(option, argument):
    return _redaction.redact_argument_if_necessary(option, argument)


def is_sensitive(option):
    return _redaction.is_sensitive(option)


def get_redacted():
    return _redaction.get_redacted()
