import os

from svreview.table import VariantCall, VariantTable

DATA_DIR = os.path.join(os.path.dirname(__file__), 'data')


def get_data(*paths):
    return os.path.join(DATA_DIR, *paths)


def mock_call(sample, chr1, bp1, chr2, bp2, **data):
    return VariantCall(sample, chr1, bp1, chr2, bp2, data=data)


def mock_table(*rows, column_names=None):
    """
    Args:
        rows: (sample, chr1, bp1, chr2, bp2) tuples, optionally followed by a dict of extra properties
    """
    calls = []
    for row in rows:
        data = row[5] if len(row) > 5 else {}
        calls.append(mock_call(*row[:5], **data))
    return VariantTable(calls, column_names=column_names)


# rows 0 and 2 describe the same event (within 5bp), every other row is on its own
EXAMPLE_ROWS = [
    ('s1', '1', 100, '5', 100),
    ('s1', '1', 5000, '5', 9000),
    ('s2', '1', 102, '5', 101),
    ('s2', '3', 100, '7', 100),
    ('s3', '2', 500, '2', 800),
]
