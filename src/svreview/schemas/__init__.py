import collections.abc
import json
import os
from typing import Dict

import jsonschema

SCHEMA_FILE = os.path.join(os.path.dirname(__file__), 'config.json')


class ImmutableDict(collections.abc.Mapping):
    def __init__(self, data):
        self._data = data

    def __getitem__(self, key):
        return self._data[key]

    def __len__(self):
        return len(self._data)

    def __iter__(self):
        return iter(self._data)


def load_schema() -> Dict:
    with open(SCHEMA_FILE, 'r') as fh:
        return json.load(fh)


def validate(config: Dict, set_default: bool = True) -> Dict:
    """
    check a config against the config schema, filling in the default for any missing top level property

    Raises:
        jsonschema.ValidationError: the config does not conform to the schema
    """
    schema = load_schema()
    jsonschema.validate(config, schema)
    if set_default:
        for key, prop in schema['properties'].items():
            if 'default' in prop:
                config.setdefault(key, prop['default'])
    return config


DEFAULTS = ImmutableDict(validate({}))
