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

import pytest

from pyguard.redaction import is_sensitive
from pyguard.redaction.dictionary import (
    CombinedSensitiveDictionary,
    SensitivePrefixDictionary,
    SensitiveSubstringDictionary,
)


@pytest.mark.parametrize(
    "name",
    [
        "gemfire.security-password",
        "password",
        "other-password-option",
        "cluster-ssl-truststore-password",
        "security-username",
        "security-manager",
        "security-important-property",
        "javax.net.ssl.keyStorePassword",
        "javax.net.ssl.keyStoreType",
        "sysprop-secret-prop",
        "-Dsecurity-peer-auth-init",
        "--J=-Djavax.net.ssl.trustStore",
    ],
)
def test_sensitive_names(name):
    assert is_sensitive(name)


@pytest.mark.parametrize(
    "name",
    [
        "gemfire.security-manager",
        "cluster-ssl-enabled",
        "conserve-sockets",
        "username",
        "just-an-option",
        "PASSWORD",
        "",
        None,
    ],
)
def test_non_sensitive_names(name):
    assert not is_sensitive(name)


def test_prefix_only_matches_at_start():
    dictionary = SensitivePrefixDictionary(["security-"])
    assert dictionary.is_sensitive("security-manager")
    assert not dictionary.is_sensitive("gemfire.security-manager")


def test_substring_matches_anywhere():
    dictionary = SensitiveSubstringDictionary(["secret"])
    assert dictionary.is_sensitive("secret")
    assert dictionary.is_sensitive("my-secret-key")
    assert not dictionary.is_sensitive("Secret")


def test_combined_dictionary():
    dictionary = CombinedSensitiveDictionary(
        SensitivePrefixDictionary(["security-"]),
        SensitiveSubstringDictionary(["password"]),
    )
    assert dictionary.is_sensitive("security-manager")
    assert dictionary.is_sensitive("gemfire.password")
    assert not dictionary.is_sensitive("gemfire.security-manager")
    assert not CombinedSensitiveDictionary().is_sensitive("password")
