# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Logger helper for the tenant mailer.

The package never configures handlers, levels or formats. The host
application owns that (usually through ``logging.basicConfig()``), so
importing the mailer has no side effects on logging output.

Example:
    Typical usage in a module::

        from tenant_mailer.logger import get_logger

        logger = get_logger("TenantMailer.transport")
        logger.debug("Transport selected")
"""

import logging


def get_logger(name: str = "TenantMailer") -> logging.Logger:
    """Return the standard library logger registered under ``name``.

    Args:
        name: Logger name. Defaults to "TenantMailer", the parent of every
            logger used inside the package.

    Returns:
        A ``logging.Logger`` instance bound to the given name.
    """
    return logging.getLogger(name)
