"""
Numbering app services layer.

DR (delivery receipt) and PO (purchase order) numbers are issued from
row-locked counters and recorded in their issuance tables.
"""

from .exceptions import (
    NumberingServiceError,
    DuplicateNumberError,
    IssuanceNotFoundError,
    MissingVoidReasonError,
    AlreadyVoidedError,
    InvalidNumberError,
)

from .counters import (
    CounterSpec,
    DR_COUNTER,
    PO_COUNTER,
    COUNTERS,
    get_counter,
)

from .allocator import (
    allocate,
    reserve,
    issue,
    void,
    release,
    peek_next,
    set_next,
    stats,
    format_number,
)


__all__ = [
    # Exceptions
    'NumberingServiceError',
    'DuplicateNumberError',
    'IssuanceNotFoundError',
    'MissingVoidReasonError',
    'AlreadyVoidedError',
    'InvalidNumberError',

    # Series
    'CounterSpec',
    'DR_COUNTER',
    'PO_COUNTER',
    'COUNTERS',
    'get_counter',

    # Allocation
    'allocate',
    'reserve',
    'issue',
    'void',
    'release',
    'peek_next',
    'set_next',
    'stats',
    'format_number',
]
