#!python
import argparse
import logging
import platform
import sys
import time
from typing import Dict, List, Optional

from . import __version__
from . import config as _config
from . import util as _util
from .cluster import build_table_cluster
from .constants import DECISION, EXIT_ERROR, EXIT_OK, PROGNAME, SUBCOMMAND
from .error import OutOfRangeError
from .io import read_variant_table, write_cluster_outputs
from .progress import ProgressStore
from .table_cluster import VariantTableCluster
from .util import filepath


def create_parser(argv):
    parser = argparse.ArgumentParser(prog=PROGNAME, formatter_class=_config.CustomHelpFormatter)
    parser.add_argument(
        '-v',
        '--version',
        action='version',
        version='%(prog)s version ' + __version__,
        help='Outputs the version number',
    )
    subp = parser.add_subparsers(dest='command', help='specifies which subprogram to use')
    subp.required = True
    required = {}  # hold required argument group by subparser command name
    optional = {}  # hold optional argument group by subparser command name
    for command in SUBCOMMAND.values():
        subparser = subp.add_parser(
            command, formatter_class=_config.CustomHelpFormatter, add_help=False
        )
        required[command] = subparser.add_argument_group('required arguments')
        optional[command] = subparser.add_argument_group('optional arguments')
        optional[command].add_argument(
            '-h', '--help', action='help', help='show this help message and exit'
        )
        optional[command].add_argument('--log', help='redirect stdout to a log file', default=None)
        optional[command].add_argument(
            '--log_level',
            help='level of logging to output',
            choices=['INFO', 'DEBUG'],
            default='INFO',
        )
        optional[command].add_argument(
            '--config', '-c', help='path to the JSON config file', type=filepath, default=None
        )
        optional[command].add_argument(
            '--tolerance',
            type=int,
            default=None,
            help='overrides cluster.tolerance from the config',
        )
        optional[command].add_argument(
            '--same_sample',
            type=_util.cast_boolean,
            default=None,
            help='overrides cluster.same_sample from the config',
        )
        required[command].add_argument(
            '-n', '--input', help='path to the input call table', type=filepath, required=True
        )
        required[command].add_argument(
            '-w',
            '--work_dir',
            help='directory holding the saved review progress',
            required=True,
        )

    required[SUBCOMMAND.CLUSTER].add_argument(
        '-o', '--output', help='path to the output directory', required=True
    )
    required[SUBCOMMAND.DECIDE].add_argument(
        '--index', type=int, required=True, help='the clustered row to set the decision for'
    )
    required[SUBCOMMAND.DECIDE].add_argument(
        '--decision', type=_config.decision_type, required=True, help='the reviewer decision'
    )
    return parser, parser.parse_args(argv)


def load_session(args, config: Dict) -> VariantTableCluster:
    """
    read the raw calls, cluster them and apply any saved decisions
    """
    table = read_variant_table(
        args.input,
        delimiter=config['input.csv_delimiter'],
        collection_delimiter=config['input.collection_delimiter'],
    )
    _util.logger.info(
        f'computing clusters (tolerance={config["cluster.tolerance"]}, same_sample={config["cluster.same_sample"]})'
    )
    table_cluster = build_table_cluster(
        table,
        tolerance=config['cluster.tolerance'],
        same_sample=config['cluster.same_sample'],
    )
    _util.logger.info(f'clustered {len(table)} calls down to {len(table_cluster)} clusters')

    _util.mkdirp(args.work_dir)
    ProgressStore(args.work_dir, config['progress.filename']).load(table_cluster)
    return table_cluster


def summarize_decisions(table_cluster: VariantTableCluster) -> Dict[str, int]:
    counts = {decision: 0 for decision in DECISION.values()}
    for _, decision in table_cluster.decision_snapshot():
        counts[decision] = counts.get(decision, 0) + 1
    return counts


def main(argv: Optional[List[str]] = None) -> int:
    """
    sets up the parser and checks the validity of command line args
    loads the calls and redirects into the subcommand

    Args:
        argv: List of arguments, defaults to command line arguments
    """
    if argv is None:  # need to do at run time or patching will not behave as expected
        argv = sys.argv[1:]
    start_time = int(time.time())
    parser, args = create_parser(argv)

    log_conf = {
        'format': '{asctime} [{levelname}] {message}',
        'style': '{',
        'level': args.log_level,
    }

    original_logging_handlers = logging.root.handlers[:]
    for handler in original_logging_handlers:
        logging.root.removeHandler(handler)
    if args.log:  # redirect stdout AND stderr to a log file
        log_conf['filename'] = args.log
    logging.basicConfig(**log_conf)

    _util.logger.info(f'{PROGNAME}: {__version__}')
    _util.logger.info(f'hostname: {platform.node()}')
    _util.log_arguments(args)

    command = args.command
    exit_code = EXIT_OK
    try:
        try:
            config = _config.load_config(
                args.config,
                **{'cluster.tolerance': args.tolerance, 'cluster.same_sample': args.same_sample},
            )
        except ValueError as err:
            parser.error(str(err))

        table_cluster = load_session(args, config)

        if command == SUBCOMMAND.CLUSTER:
            _util.mkdirp(args.output)
            write_cluster_outputs(table_cluster, args.output)
        elif command == SUBCOMMAND.DECIDE:
            try:
                table_cluster.set_decision(args.index, args.decision)
            except OutOfRangeError as err:
                parser.error(str(err))
            _util.logger.info(
                f'set decision {args.decision} for {table_cluster.cluster_key(args.index)}'
            )
            store = ProgressStore(args.work_dir, config['progress.filename'])
            if not store.save(table_cluster):
                exit_code = EXIT_ERROR
        else:
            for decision, count in summarize_decisions(table_cluster).items():
                _util.logger.info(f'{decision}: {count}')

        _util.log_run_time(start_time)
    finally:
        for handler in logging.root.handlers[:]:
            logging.root.removeHandler(handler)
            handler.close()
        for handler in original_logging_handlers:
            logging.root.addHandler(handler)
    return exit_code


if __name__ == '__main__':
    sys.exit(main())
