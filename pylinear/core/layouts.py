"""
Layout and capability string constants for pylinear.

This module is the SINGLE SOURCE OF TRUTH for layout tags and capability
strings. Import from here, never use raw strings.

Usage:
    from pylinear.core.layouts import CAPABILITY_VIEW_VALUES

    if v.supports(CAPABILITY_VIEW_VALUES):
        v.values()[:] *= 2.0   # writes through to storage
"""

# Vector layouts
LAYOUT_DENSE = 'dense'
LAYOUT_STRIDE = 'stride'
LAYOUT_MAP = 'map'
LAYOUT_VAR = 'var'

# Matrix layouts
LAYOUT_ROW_MAJOR = 'row_major'
LAYOUT_COL_MAJOR = 'col_major'
LAYOUT_STRIDED = 'strided'
LAYOUT_ROW_STRIPES = 'row_stripes'
LAYOUT_COL_STRIPES = 'col_stripes'
LAYOUT_MAPPED = 'mapped'

# values() returns an array aliasing the backing storage
CAPABILITY_VIEW_VALUES = 'view_values'

# Logical elements occupy one contiguous run of the backing array
CAPABILITY_CONTIGUOUS = 'contiguous'

__all__ = [
    'LAYOUT_DENSE',
    'LAYOUT_STRIDE',
    'LAYOUT_MAP',
    'LAYOUT_VAR',
    'LAYOUT_ROW_MAJOR',
    'LAYOUT_COL_MAJOR',
    'LAYOUT_STRIDED',
    'LAYOUT_ROW_STRIPES',
    'LAYOUT_COL_STRIPES',
    'LAYOUT_MAPPED',
    'CAPABILITY_VIEW_VALUES',
    'CAPABILITY_CONTIGUOUS',
]
