import logging
from concurrent.futures import ThreadPoolExecutor

from analyzers.errors import TransformFailure
from utils.value_parsing import to_number

CLEAN = 'clean'
COMPUTE = 'compute'

OPERATIONS = {
    'multiply': lambda a, b: a * b,
    'subtract': lambda a, b: a - b,
}


def clean_values(values):
    """Coerce raw cells to floats, dropping anything non-numeric"""
    cleaned = []
    for value in values:
        number = to_number(value)
        if number is not None:
            cleaned.append(number)
    return cleaned


def compute_values(values1, values2, operation):
    """Elementwise operation on two equal-length arrays; invalid cells read as 0"""
    if operation not in OPERATIONS:
        raise ValueError(f"Unsupported operation: {operation}")
    if len(values1) != len(values2):
        raise ValueError(f"Length mismatch: {len(values1)} vs {len(values2)}")

    apply = OPERATIONS[operation]
    return [
        apply(to_number(a) or 0.0, to_number(b) or 0.0)
        for a, b in zip(values1, values2)
    ]


def _run(kind, payload):
    try:
        if kind == CLEAN:
            return clean_values(payload['values'])
        if kind == COMPUTE:
            return compute_values(payload['values1'], payload['values2'], payload['operation'])
        raise ValueError(f"Unknown transform kind: {kind}")
    except Exception as e:
        logging.error(f"Transform '{kind}' failed: {str(e)}")
        raise TransformFailure(str(e)) from e


class TransformExecutor:
    """
    Runs numeric array transforms on a thread pool.

    Each call is one task; the returned Future yields the resulting list or
    raises TransformFailure with the underlying message. Independent
    transforms can be submitted together and awaited jointly.
    """

    def __init__(self, max_workers=4):
        self.max_workers = max_workers
        self._pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix='transform')

    def run_transform(self, kind, payload):
        return self._pool.submit(_run, kind, payload)

    def clean(self, values):
        return self.run_transform(CLEAN, {'values': values})

    def compute(self, values1, values2, operation):
        return self.run_transform(COMPUTE, {
            'values1': values1,
            'values2': values2,
            'operation': operation,
        })

    def shutdown(self, wait=True):
        self._pool.shutdown(wait=wait)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()
