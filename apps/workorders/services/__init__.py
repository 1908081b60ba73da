"""
Work orders app services layer.

Conversion and material ordering draw DR and PO numbers from the numbering
services inside their own transactions.
"""

from .exceptions import (
    WorkOrdersServiceError,
    AlreadyConvertedError,
    WorkOrderExistsError,
    WorkOrderNotFoundError,
    NoOrderablePartsError,
)

from .conversion import (
    convert_estimate,
    reset_conversion,
)

from .material_ordering import (
    get_orderable_parts,
    order_material,
    receive_material,
)


__all__ = [
    # Exceptions
    'WorkOrdersServiceError',
    'AlreadyConvertedError',
    'WorkOrderExistsError',
    'WorkOrderNotFoundError',
    'NoOrderablePartsError',

    # Conversion
    'convert_estimate',
    'reset_conversion',

    # Material ordering
    'get_orderable_parts',
    'order_material',
    'receive_material',
]
