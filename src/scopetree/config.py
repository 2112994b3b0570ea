"""
Runtime configuration for scopetree.

Values are read once from the environment at import time.
"""

import os


# Audit logging
LOG_LEVEL = os.getenv("SCOPETREE_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.getenv("SCOPETREE_LOG_FORMAT", "json").lower()  # json | console
LOG_MAX_FIELD_LENGTH = int(os.getenv("SCOPETREE_LOG_MAX_FIELD_LENGTH", "100"))

# Wire format
SEPARATOR = "."
WILDCARD = "*"
TUPLE_OPEN = "("
TUPLE_CLOSE = ")"
TUPLE_SEPARATOR = ","
