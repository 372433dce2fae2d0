import numpy as np

from analyzers.report import DateRange, Distribution, DistributionEntry, NumericStats


def compute_numeric_stats(values):
    """
    Descriptive statistics over a cleaned numeric array.

    Standard deviation is the population form (divide by n). Mode ties go to
    the value seen first. An empty array yields an all-zero record.
    """
    values = [float(value) for value in values]
    if not values:
        return NumericStats()

    data = np.asarray(values, dtype=float)
    total = float(data.sum())
    low, high = float(data.min()), float(data.max())
    # Summation rounding can push the mean just outside [min, max]
    mean = min(max(total / len(values), low), high)

    return NumericStats(
        count=len(values),
        sum=total,
        mean=mean,
        median=float(np.median(data)),
        mode=_first_mode(values),
        std=float(np.sqrt(np.mean((data - mean) ** 2))),
        min=low,
        max=high,
    )


def _first_mode(values):
    counts = {}
    for value in values:
        counts[value] = counts.get(value, 0) + 1
    # max() keeps the earliest key among equal counts
    return max(counts.items(), key=lambda item: item[1])[0]


def compute_distribution(labels):
    """Frequency of each label, most frequent first, ties in first-seen order"""
    counts = {}
    for label in labels:
        if label is None:
            continue
        counts[label] = counts.get(label, 0) + 1

    total = sum(counts.values())
    ordered = sorted(counts.items(), key=lambda item: -item[1])

    entries = [
        DistributionEntry(
            value=label,
            count=count,
            percentage=round(count / total * 100, 2) if total else 0.0,
        )
        for label, count in ordered
    ]
    return Distribution(entries=entries, total=total)


def compute_date_range(timestamps):
    """First/last observed date and the span between them"""
    valid = [stamp for stamp in timestamps if stamp is not None]
    if not valid:
        return DateRange()

    start, end = min(valid), max(valid)
    return DateRange(
        start=start.strftime('%Y-%m-%d'),
        end=end.strftime('%Y-%m-%d'),
        span_days=int((end.normalize() - start.normalize()).days),
        valid_count=len(valid),
    )
