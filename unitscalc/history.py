# history.py
"""""
In-memory list of past calculations, newest first.

Each entry is a pair (input expression, result measurement). Entries are kept as trees and only
rendered to text on request, so changing the formatter precision re-renders the whole history.
"""""


class History:

    def __init__(self, limit=100):
        self.entries = []
        self.limit = 0
        self.resize(limit)

    def add(self, expression, result):
        """Insert a new entry on top and drop the oldest ones past the limit."""
        self.entries.insert(0, (expression, result))
        del self.entries[self.limit:]

    def resize(self, limit):
        limit = int(limit)
        if limit < 1:
            raise ValueError(f"History size must be at least 1, got {limit}")
        self.limit = limit
        del self.entries[self.limit:]

    def clear(self):
        self.entries.clear()

    def rows(self, formatter):
        """Return the entries as (expression text, result text) pairs."""
        return [(formatter.format(expression), formatter.format(result)) for expression, result in self.entries]

    def __len__(self):
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def __getitem__(self, index):
        return self.entries[index]
