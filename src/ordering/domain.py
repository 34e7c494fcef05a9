"""Ordering bounded context: order lifecycle, pricing and access rules.

Turns requested line items into priced orders, governs status changes, and
decides who may read or mutate an order. Identity is verified upstream; this
context only consumes the subject id and role claims it is handed.
"""

import structlog
from protean.domain import Domain

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
