"""
Typed views over a part's ``form_data`` JSON.

Older records were written by a form that stored its inputs under
camelCase and underscore-prefixed keys; those are still accepted when
reading, but the snake_case keys take precedence.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from apps.estimates.coercion import normalize_flag, to_decimal
from apps.estimates.models import MaterialRounding, PartType

# Legacy per-type key holding the section size
LEGACY_SECTION_KEYS = {
    PartType.ANGLE_ROLL: '_angleSize',
    PartType.TUBE_ROLL: '_tubeSize',
    PartType.FLAT_BAR: '_barSize',
    PartType.CHANNEL_ROLL: '_channelSize',
    PartType.BEAM_ROLL: '_beamSize',
    PartType.TEE_BAR: '_teeSize',
}


@dataclass(frozen=True)
class PartDetails:
    section_size: str = ''
    cone_large_diameter: str = ''
    thickness: str = ''
    outer_diameter: str = ''
    width: str = ''
    material_rounding: str = MaterialRounding.NONE
    material_markup_percent: Optional[Decimal] = None


@dataclass(frozen=True)
class RushServiceDetails:
    expedite_enabled: bool = False
    # A preset percent ('10', '15', ...), 'custom_pct' or 'custom_amt'
    expedite_type: str = ''
    expedite_custom_amount: Decimal = Decimal('0')
    expedite_custom_percent: Decimal = Decimal('0')
    emergency_enabled: bool = False
    emergency_day: str = ''


def _form_data(part):
    data = getattr(part, 'form_data', None)
    return data if isinstance(data, dict) else {}


def _first(data, *keys):
    """First non-empty value among ``keys``."""
    for key in keys:
        value = data.get(key)
        if value not in (None, ''):
            return value
    return None


def _text(value):
    return '' if value is None else str(value).strip()


def details_for(part):
    """Build the detail record matching the part's type."""
    data = _form_data(part)

    if part.part_type == PartType.RUSH_SERVICE:
        return RushServiceDetails(
            expedite_enabled=normalize_flag(_first(data, 'expedite_enabled', '_expediteEnabled')),
            expedite_type=_text(_first(data, 'expedite_type', '_expediteType')),
            expedite_custom_amount=to_decimal(_first(data, 'expedite_custom_amount', '_expediteCustomAmt')),
            expedite_custom_percent=to_decimal(_first(data, 'expedite_custom_percent', '_expediteCustomPct')),
            emergency_enabled=normalize_flag(_first(data, 'emergency_enabled', '_emergencyEnabled')),
            emergency_day=_text(_first(data, 'emergency_day', '_emergencyDay')),
        )

    section_keys = ['section_size']
    legacy_key = LEGACY_SECTION_KEYS.get(part.part_type)
    if legacy_key:
        section_keys.append(legacy_key)

    rounding = _text(_first(data, 'material_rounding', '_materialRounding'))
    if rounding not in MaterialRounding.values:
        rounding = MaterialRounding.NONE

    return PartDetails(
        section_size=_text(_first(data, *section_keys)),
        cone_large_diameter=_text(_first(data, 'cone_large_diameter', '_coneLargeDia')),
        thickness=_text(_first(data, 'thickness')),
        outer_diameter=_text(_first(data, 'outer_diameter')),
        width=_text(_first(data, 'width')),
        material_rounding=rounding,
        material_markup_percent=to_decimal(
            _first(data, 'material_markup_percent', 'materialMarkupPercent'),
            default=None,
        ),
    )
