import math
import numbers
import re
from datetime import date, datetime

import pandas as pd

# Spreadsheet serial day 25569 is 1970-01-01
SERIAL_EPOCH_OFFSET = 25569
MS_PER_DAY = 86400 * 1000
MAX_SERIAL_DAY = 2958465  # 9999-12-31

CURRENCY_PREFIX = re.compile(r'^[$€£₹¥]\s*')


def is_empty(value):
    """True for None, NaN/NA and blank strings"""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ''
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def to_number(value):
    """Parse a raw cell into a finite float, or None"""
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, numbers.Number):
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
    elif isinstance(value, str):
        text = CURRENCY_PREFIX.sub('', value.strip()).replace(',', '')
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None

    return number if math.isfinite(number) else None


def serial_to_timestamp(serial):
    """Convert a spreadsheet date serial to a Timestamp"""
    return pd.Timestamp((serial - SERIAL_EPOCH_OFFSET) * MS_PER_DAY, unit='ms')


def to_timestamp(value):
    """Parse a raw cell into a naive pandas Timestamp, or None"""
    if is_empty(value) or isinstance(value, bool):
        return None

    if isinstance(value, (datetime, date)):
        parsed = pd.Timestamp(value)
    else:
        serial = to_number(value)
        if serial is not None:
            if not 1 <= serial <= MAX_SERIAL_DAY:
                return None
            parsed = serial_to_timestamp(serial)
        elif isinstance(value, str):
            parsed = pd.to_datetime(value.strip(), errors='coerce')
        else:
            return None

    if parsed is None or pd.isna(parsed):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.tz_convert(None)
    return parsed


def normalize_label(value):
    """Categorical cell -> trimmed string label, or None"""
    if is_empty(value):
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()
