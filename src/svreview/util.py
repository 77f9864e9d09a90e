import logging
import os
import time
from glob import glob

from braceexpand import braceexpand

logger = logging.getLogger('svreview')


def bash_expands(*expressions):
    """
    expand a file glob expression, allowing bash-style brackets.

    Returns:
        list: a list of files

    Example:
        >>> bash_expands('./{test,doc}/*py')
        [...]
    """
    result = []
    for expression in expressions:
        eresult = []
        for name in braceexpand(expression):
            for fname in glob(name):
                eresult.append(fname)
        if not eresult:
            raise FileNotFoundError('The expression does not match any files', expression)
        result.extend(eresult)
    return [os.path.abspath(f) for f in result]


def filepath(path):
    try:
        file_list = bash_expands(path)
    except FileNotFoundError:
        raise TypeError('File does not exist', path)
    else:
        if len(file_list) > 1:
            raise TypeError('File pattern match multiple files and expected only one', path)
    return file_list[0]


def cast_boolean(input_value):
    value = str(input_value).lower()
    if value in ['t', 'true', '1', 'y', 'yes', '+']:
        return True
    elif value in ['f', 'false', '0', 'n', 'no', '-']:
        return False
    raise TypeError('casting to boolean failed', input_value)


def log_arguments(args):
    """
    output the parsed command line arguments, one per line
    """
    logger.info('arguments')
    for arg, val in sorted(vars(args).items()):
        logger.info(f' {arg} = {val!r}')


def mkdirp(dirname: str) -> str:
    """
    make a directory, and any missing parents, if it does not already exist
    """
    if not os.path.isdir(dirname):
        logger.info(f"creating output directory: '{dirname}'")
    os.makedirs(dirname, exist_ok=True)
    return dirname


def log_run_time(start_time: int):
    duration = int(time.time()) - start_time
    hours = duration - duration % 3600
    minutes = duration - hours - (duration - hours) % 60
    seconds = duration - hours - minutes
    logger.info('run time (hh/mm/ss): {}:{:02d}:{:02d}'.format(hours // 3600, minutes // 60, seconds))
    logger.info(f'run time (s): {duration}')
