"""
Column role detection.

Picks the grouping key, the measure and the date column of a dataset from
column names when the caller does not name them. Every rule is listed here
in priority order; callers can override any role.
"""

import re
from dataclasses import dataclass
from typing import Optional

from analyzers.report import CATEGORICAL, DATETIME, NUMERIC

KEY_KEYWORDS = [
    'category', 'product', 'item', 'brand', 'segment',
    'region', 'area', 'zone', 'territory', 'location', 'customer',
]
PRIMARY_MEASURE_KEYWORDS = ['sales', 'revenue', 'amount', 'total', 'sale']
SECONDARY_MEASURE_KEYWORDS = ['profit', 'value', 'price', 'cost', 'quantity', 'qty', 'units']
QUANTITY_KEYWORDS = ['qty', 'quantity', 'unitsold', 'soldquantity', 'orderquantity']
UNIT_PRICE_KEYWORDS = ['unitprice', 'unitcost', 'priceperunit', 'price', 'rate', 'costperitem']
COST_KEYWORDS = ['totalcost', 'purchaseprice', 'cost']
DATE_KEYWORDS = ['orderdate', 'date', 'timestamp', 'time']


@dataclass(frozen=True)
class ColumnRoles:
    key_column: Optional[str] = None
    measure_column: Optional[str] = None
    date_column: Optional[str] = None
    quantity_column: Optional[str] = None
    unit_price_column: Optional[str] = None
    cost_column: Optional[str] = None

    @property
    def has_derived_measure(self):
        return (
            self.measure_column is None
            and self.quantity_column is not None
            and self.unit_price_column is not None
        )


def normalize_name(name):
    return re.sub(r'[\s_\-]', '', str(name).lower())


def match_column(columns, keywords, exclude=()):
    """First column matching the earliest keyword in the list"""
    for keyword in keywords:
        for column in columns:
            if column in exclude:
                continue
            if keyword in normalize_name(column):
                return column
    return None


def detect_roles(kinds, repeated=None, overrides=None):
    """
    Args:
        kinds: ordered mapping of column name -> column kind
        repeated: names of categorical columns whose values repeat
        overrides: optional mapping with 'key', 'measure' and/or 'date'

    Returns:
        ColumnRoles
    """
    overrides = overrides or {}
    repeated = set(repeated or ())

    categorical = [name for name, kind in kinds.items() if kind == CATEGORICAL]
    numeric = [name for name, kind in kinds.items() if kind == NUMERIC]
    dates = [name for name, kind in kinds.items() if kind == DATETIME]

    key_column = overrides.get('key') or match_column(categorical, KEY_KEYWORDS)
    if key_column is None:
        key_column = next((name for name in categorical if name in repeated), None)

    quantity_column = match_column(numeric, QUANTITY_KEYWORDS)
    unit_price_column = match_column(numeric, UNIT_PRICE_KEYWORDS, exclude={quantity_column})
    cost_column = match_column(numeric, COST_KEYWORDS, exclude={unit_price_column})

    # TotalCost and the like describe spend, not the measure
    cost_like = {name for name in numeric if match_column([name], COST_KEYWORDS)}
    measure_column = overrides.get('measure') or match_column(numeric, PRIMARY_MEASURE_KEYWORDS, exclude=cost_like)
    if measure_column is None and not (quantity_column and unit_price_column):
        measure_column = match_column(numeric, SECONDARY_MEASURE_KEYWORDS)
        if measure_column is None and numeric:
            measure_column = numeric[0]

    date_column = overrides.get('date') or match_column(dates, DATE_KEYWORDS)
    if date_column is None and dates:
        date_column = dates[0]

    return ColumnRoles(
        key_column=key_column,
        measure_column=measure_column,
        date_column=date_column,
        quantity_column=quantity_column,
        unit_price_column=unit_price_column,
        cost_column=cost_column if cost_column != measure_column else None,
    )
