"""
reading the delimited call tables produced by analysis pipelines and writing tabbed outputs
"""
import os
import re
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from .constants import COLUMNS, DECISION, LIST_DELIM, REQUIRED_INPUT_COLUMNS, sort_columns
from .error import MalformedInputError
from .schemas import DEFAULTS
from .table import VariantCall, VariantTable
from .table_cluster import VariantTableCluster
from .util import logger

NA_VALUES = ['None', 'none', 'N/A', 'n/a', 'NA', 'null', 'NULL', 'Null', 'nan', '<NA>', 'NaN', '']


def split_collection(value, delimiter: str) -> Optional[List[str]]:
    """
    Example:
        >>> split_collection('a, b', ',')
        ['a', 'b']
    """
    if value is None:
        return None
    return [v.strip() for v in str(value).split(delimiter)]


def read_variant_table(
    filename: str,
    delimiter: str = DEFAULTS['input.csv_delimiter'],
    collection_delimiter: Optional[str] = DEFAULTS['input.collection_delimiter'],
) -> VariantTable:
    """
    reads a delimited file of SV calls into a raw table. Each row becomes a call, the columns
    other than the core columns are kept as additional properties

    Args:
        filename: path to the input file
        delimiter: the field delimiter
        collection_delimiter: any non-core column where at least one value contains this
            delimiter is treated as multi-valued and all of its values are split into lists

    Raises:
        MalformedInputError: a required column is missing

    Note:
        breakpoint positions are not validated here, malformed calls are reported by clustering
    """
    logger.info(f'loading: {filename}')
    try:
        df = pd.read_csv(
            filename,
            sep=delimiter,
            dtype={col: str for col in [COLUMNS.sample, COLUMNS.chr1, COLUMNS.chr2, COLUMNS.decision]},
            na_values=NA_VALUES,
            keep_default_na=False,
            skipinitialspace=True,
        )
    except pd.errors.EmptyDataError:
        logger.info(f'ignoring empty file: {filename}')
        return VariantTable([])

    for col in REQUIRED_INPUT_COLUMNS:
        if col not in df:
            raise MalformedInputError(f'missing required column: {col}', filename)

    if COLUMNS.decision not in df:
        df[COLUMNS.decision] = DECISION.NA
    else:
        df[COLUMNS.decision] = df[COLUMNS.decision].fillna(DECISION.NA)

    df = df.astype(object).where(pd.notnull(df), None)

    for col in [COLUMNS.chr1, COLUMNS.chr2]:
        df[col] = df[col].apply(lambda v: re.sub(r'^chr', '', v) if v is not None else v)

    if collection_delimiter:
        for col in df.columns:
            if col in REQUIRED_INPUT_COLUMNS or col == COLUMNS.decision:
                continue
            values = df[col]
            if any(isinstance(v, str) and collection_delimiter in v for v in values):
                df[col] = values.apply(lambda v: split_collection(v, collection_delimiter))

    calls = [VariantCall.from_dict(row) for row in df.to_dict('records')]
    logger.info(f'loaded {len(calls)} calls')
    return VariantTable(calls, column_names=[str(c) for c in df.columns])


def _format_cell(value):
    if isinstance(value, (list, tuple, set)):
        return LIST_DELIM.join([str(v) for v in value])
    return value


def output_tabbed_file(rows: Iterable[Dict[str, Any]], filename: str, header: Optional[List[str]] = None):
    rows = [{k: _format_cell(v) for k, v in row.items()} for row in rows]
    if header is None:
        header = []
        for row in rows:
            header.extend([c for c in row if c not in header])
        header = sort_columns(header)
    logger.info(f'writing: {filename}')
    df = pd.DataFrame.from_records(rows, columns=header)
    df = df.fillna('None')
    df.to_csv(filename, columns=header, index=False, sep='\t')


def write_cluster_outputs(table_cluster: VariantTableCluster, output: str) -> List[str]:
    """
    write the clustered table and the assignment of every raw call to its cluster

    Returns:
        the paths of the files written
    """
    clustered_output = os.path.join(output, 'clustered.tab')
    assignment_output = os.path.join(output, 'cluster_assignment.tab')
    clustered_rows = []
    assignment: Dict[int, int] = {}

    for index, row in enumerate(table_cluster.clustered_table):
        raw_indices = table_cluster.raw_indices(index)
        row[COLUMNS.cluster_key] = table_cluster.cluster_key(index)
        row[COLUMNS.cluster_size] = len(raw_indices)
        clustered_rows.append(row)
        for raw_index in raw_indices:
            assignment[raw_index] = index

    assignment_rows = []
    for raw_index, raw_row in enumerate(table_cluster.raw_table):
        index = assignment[raw_index]
        raw_row[COLUMNS.cluster_key] = table_cluster.cluster_key(index)
        raw_row[COLUMNS.clustered_index] = index
        assignment_rows.append(raw_row)

    output_tabbed_file(
        clustered_rows,
        clustered_output,
        header=table_cluster.clustered_table.column_names()
        + [COLUMNS.cluster_key, COLUMNS.cluster_size],
    )
    output_tabbed_file(
        assignment_rows,
        assignment_output,
        header=table_cluster.raw_table.column_names()
        + [COLUMNS.cluster_key, COLUMNS.clustered_index],
    )
    return [clustered_output, assignment_output]
