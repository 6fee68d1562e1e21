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

import pickle


class GuardError(Exception):
    pass


class UnsupportedFilterError(GuardError):
    """No deserialization guard mechanism is available in this interpreter."""


class FilterAlreadySetError(GuardError):
    """The process-wide serial filter has already been installed."""


class FilterConfigurationError(GuardError):
    """A sanctioned serializables contributor failed to produce its accept list."""


class MalformedPatternError(GuardError, ValueError):
    pass


class InvalidClassError(GuardError, pickle.UnpicklingError):
    """Raised by a filtering unpickler when a class is rejected."""

    def __init__(self, class_name, message=None):
        self.class_name = class_name
        super().__init__(message or f"Serialization filter rejected class {class_name}")

    def __reduce__(self):
        return type(self), (self.class_name, str(self))


ALREADY_SET_MESSAGE = "Serial filter can only be set once"
