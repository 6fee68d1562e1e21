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

"""Logging integration that scrubs sensitive option values out of log records.

Usage::

    import logging
    from pyguard.redaction.logging import install_redacting_filter

    install_redacting_filter(logging.getLogger("launcher"))
    logging.getLogger("launcher").info("Starting %s", "server --password=secret")
    # logs: Starting server --password=redacted
"""

import logging

from pyguard.redaction.argument import ArgumentValueRedaction


class RedactingFilter(logging.Filter):
    def __init__(self, name="", redaction: ArgumentValueRedaction = None):
        super().__init__(name)
        self._redaction = redaction or ArgumentValueRedaction()

    def filter(self, record: logging.LogRecord) -> bool:
        # render once with the original args, then drop them so handlers
        # never see the unredacted values
        try:
            message = record.getMessage()
        except (TypeError, ValueError):
            message = str(record.msg)
        record.msg = self._redaction.redact(message)
        record.args = None
        return True


def install_redacting_filter(logger: logging.Logger = None, redaction: ArgumentValueRedaction = None) -> RedactingFilter:
    """Attach a :class:`RedactingFilter` to ``logger`` and to each of its handlers.

    ``logger`` defaults to the root logger. Filters of a logger only see records
    created on that logger, so records propagated from child loggers are
    redacted by the handler filters. Handlers added later are not covered.
    """
    if logger is None:
        logger = logging.getLogger()
    redacting_filter = RedactingFilter(redaction=redaction)
    logger.addFilter(redacting_filter)
    for handler in logger.handlers:
        handler.addFilter(redacting_filter)
    return redacting_filter
