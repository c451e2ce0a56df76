"""
JSON file store for the shared Document.

One file holds {events, groceries, settings}. Every request does a plain
read-modify-write with no locking; the last write to land wins.
"""

import json
import logging
import os

from .config import default_document

logger = logging.getLogger(__name__)


class DocumentStore:
    def __init__(self, path):
        self.path = path

    def init(self):
        """Create the data file with defaults if it does not exist yet."""
        if os.path.exists(self.path):
            return
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        self.write(default_document())
        logger.info("Created data file %s", self.path)

    def read(self):
        """Load the Document, substituting defaults if the file is missing or corrupt."""
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error("Error reading data file: %s", e)
            return default_document()
        if not isinstance(data, dict):
            logger.error("Data file does not hold a JSON object, using defaults")
            return default_document()
        # keep the three keys present even for hand-edited files
        defaults = default_document()
        for key in ('events', 'groceries', 'settings'):
            data.setdefault(key, defaults[key])
        return data

    def write(self, data):
        try:
            with open(self.path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            logger.error("Error writing data file: %s", e)
            raise

    def replace(self, key, value):
        """Replace one collection wholesale."""
        data = self.read()
        data[key] = value
        self.write(data)
