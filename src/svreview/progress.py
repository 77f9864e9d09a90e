"""
persists reviewer decisions between sessions

Decisions are stored as JSON keyed by the stable cluster identity (see
:func:`~svreview.table_cluster.cluster_identity`) rather than by clustered row index so that
progress survives a change in the order of the raw input

.. code-block:: json

    {
      "decisions": {
        "sample1|1:100|5:100": "accept"
      },
      "version": 1
    }
"""
import contextlib
import json
import os
import threading
from typing import Dict

from shortuuid import uuid

from .constants import DECISION
from .error import PersistenceError
from .schemas import DEFAULTS
from .table_cluster import VariantTableCluster
from .util import logger

PROGRESS_VERSION = 1


class ProgressStore:
    """
    reads and writes the decision column of a table cluster to a file in the work directory
    """

    def __init__(self, work_dir: str, filename: str = DEFAULTS['progress.filename']):
        self.work_dir = work_dir
        self.filename = os.path.join(work_dir, filename)
        self._save_lock = threading.Lock()

    def read(self) -> Dict[str, str]:
        """
        Returns:
            the saved decisions by stable cluster key. Empty if nothing has been saved yet

        Raises:
            PersistenceError: the progress file exists but cannot be read or is not valid
        """
        if not os.path.exists(self.filename):
            return {}
        try:
            with open(self.filename, 'r') as fh:
                content = json.load(fh)
        except (OSError, ValueError) as err:
            raise PersistenceError(f'unable to read progress file {self.filename}: {err}') from err

        if not isinstance(content, dict) or not isinstance(content.get('decisions'), dict):
            raise PersistenceError(f'progress file {self.filename} has no decisions mapping')
        if content.get('version') != PROGRESS_VERSION:
            raise PersistenceError(
                f'unsupported progress file version {content.get("version")!r} in {self.filename}'
            )
        decisions = content['decisions']
        for key, decision in decisions.items():
            if decision not in DECISION.values():
                raise PersistenceError(
                    f'invalid decision {decision!r} for {key!r} in {self.filename}'
                )
        return decisions

    def load(self, table_cluster: VariantTableCluster) -> int:
        """
        apply previously saved decisions to the clustered table. Saved keys which no longer
        match any cluster are ignored

        Returns:
            the number of clustered rows which were given a saved decision

        Raises:
            PersistenceError: the progress file exists but cannot be read or is not valid
        """
        decisions = self.read()
        applied = 0
        for index, key in enumerate(table_cluster.cluster_keys()):
            if key in decisions:
                table_cluster.set_decision(index, decisions[key])
                applied += 1
        if decisions:
            logger.info(
                f'loaded {applied} decisions from {self.filename} ({len(decisions) - applied} unmatched)'
            )
        return applied

    @staticmethod
    def serialize(table_cluster: VariantTableCluster) -> str:
        decisions = dict(table_cluster.decision_snapshot())
        return json.dumps(
            {'decisions': decisions, 'version': PROGRESS_VERSION}, sort_keys=True, indent='  '
        ) + '\n'

    def _sync_directory(self):
        # flush the rename itself, not only the file content
        fd = os.open(os.path.dirname(self.filename) or os.curdir, os.O_RDONLY)
        try:
            os.fsync(fd)
        finally:
            os.close(fd)

    def save(self, table_cluster: VariantTableCluster) -> bool:
        """
        write the current decisions. The file is written to a temporary file and then moved over
        the previous progress file so an interrupted save leaves the previous state intact

        Returns:
            True if the progress was written, False on an I/O error
        """
        with self._save_lock:
            content = self.serialize(table_cluster)
            temp_file = f'{self.filename}.{uuid()}.tmp'
            logger.info(f'writing: {self.filename}')
            try:
                with open(temp_file, 'w') as fh:
                    fh.write(content)
                    fh.flush()
                    os.fsync(fh.fileno())
                os.replace(temp_file, self.filename)
                self._sync_directory()
            except OSError as err:
                logger.error(f'failed to save progress to {self.filename}: {err}')
                with contextlib.suppress(OSError):
                    os.remove(temp_file)
                return False
        return True
