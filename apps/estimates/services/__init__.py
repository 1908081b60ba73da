"""
Estimates app services layer.

Pricing functions are pure and never raise on malformed part data.
State-changing operations run in transactions with the estimate row locked.
"""

from .exceptions import (
    EstimatesServiceError,
    EstimateNotFoundError,
    PartNotFoundError,
    DuplicateEstimateNumberError,
    InvalidEstimateNumberError,
)

from .dimensions import parse_dimension

from .part_details import (
    PartDetails,
    RushServiceDetails,
    details_for,
)

from .labor_minimums import (
    DEFAULT_LABOR_MINIMUMS,
    load_labor_minimums,
    part_size,
    part_width,
    select_labor_minimum,
)

from .part_pricing import (
    PartTotals,
    calculate_part_totals,
    apply_part_totals,
)

from .estimate_totals import (
    MinimumInfo,
    EstimateTotals,
    round_up_material,
    get_minimum_info,
    calculate_estimate_totals,
    compute_estimate_totals,
    recalculate_estimate,
    recalculate_all_estimates,
)

from .estimate_management import (
    split_part_data,
    get_estimate,
    create_estimate,
    update_estimate,
    delete_estimate,
    add_part,
    update_part,
    remove_part,
    duplicate_estimate,
    archive_old_estimates,
)


__all__ = [
    # Exceptions
    'EstimatesServiceError',
    'EstimateNotFoundError',
    'PartNotFoundError',
    'DuplicateEstimateNumberError',
    'InvalidEstimateNumberError',

    # Dimensions
    'parse_dimension',

    # Part details
    'PartDetails',
    'RushServiceDetails',
    'details_for',

    # Labor minimums
    'DEFAULT_LABOR_MINIMUMS',
    'load_labor_minimums',
    'part_size',
    'part_width',
    'select_labor_minimum',

    # Part pricing
    'PartTotals',
    'calculate_part_totals',
    'apply_part_totals',

    # Estimate totals
    'MinimumInfo',
    'EstimateTotals',
    'round_up_material',
    'get_minimum_info',
    'calculate_estimate_totals',
    'compute_estimate_totals',
    'recalculate_estimate',
    'recalculate_all_estimates',

    # Estimate management
    'split_part_data',
    'get_estimate',
    'create_estimate',
    'update_estimate',
    'delete_estimate',
    'add_part',
    'update_part',
    'remove_part',
    'duplicate_estimate',
    'archive_old_estimates',
]
