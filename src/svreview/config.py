import argparse
import json
from typing import Dict, Optional

import jsonschema

from .constants import DECISION
from .schemas import validate
from .util import cast_boolean, filepath


def load_config(path: Optional[str] = None, **overrides) -> Dict:
    """
    read a JSON config file (if given), apply any overrides and fill in the defaults

    Args:
        path: path to the JSON config file
        overrides: settings which take precedence over the file. None values are ignored

    Raises:
        ValueError: the config does not conform to the schema
    """
    config: Dict = {}
    if path:
        with open(path, 'r') as fh:
            config = json.load(fh)
    config.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return validate(config)
    except jsonschema.ValidationError as err:
        raise ValueError(f'invalid config: {err.message}') from err


class CustomHelpFormatter(argparse.ArgumentDefaultsHelpFormatter):
    """
    subclass the default help formatter to stop default printing for required arguments
    """

    def _format_args(self, action, default_metavar):
        if action.metavar is None:
            action.metavar = get_metavar(action.type)
        return super(CustomHelpFormatter, self)._format_args(action, default_metavar)

    def _get_help_string(self, action):
        if action.required:
            return action.help
        return super(CustomHelpFormatter, self)._get_help_string(action)

    def add_arguments(self, actions):
        # sort the arguments alphanumerically so they print in the help that way
        actions = sorted(actions, key=lambda x: getattr(x, 'option_strings'))
        super(CustomHelpFormatter, self).add_arguments(actions)


def decision_type(value: str) -> str:
    """
    argparse type for reviewer decisions

    Example:
        >>> decision_type('accept')
        'accept'
    """
    if value not in DECISION.values():
        raise argparse.ArgumentTypeError(f'must be one of {DECISION.values()}')
    return value


def get_metavar(arg_type):
    """
    For a given argument type, returns the string to be used for the metavar argument in add_argument

    Example:
        >>> get_metavar(cast_boolean)
        '{True,False}'
    """
    if arg_type == cast_boolean:
        return '{True,False}'
    elif arg_type == int:
        return 'INT'
    elif arg_type == filepath:
        return 'FILEPATH'
    elif arg_type == decision_type:
        return '{' + ','.join(DECISION.values()) + '}'
    return None
