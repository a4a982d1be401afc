"""Local cache of configuration entries.

One writer (the refresher) and any number of reader threads. Writes
build a fresh dict and publish it with a single reference swap, so a
reader holds either the old or the new mapping and never a partial one.
"""

import logging
from typing import Dict
from typing import Iterable
from typing import List
from typing import NamedTuple
from typing import Optional
from typing import Tuple

from configuse.entries import ConfigurationEntry


logger = logging.getLogger(__name__)


class AtomicRef:
    def __init__(self, x):
        self.value = {"": x}

    def get(self):
        return self.value[""]

    def set(self, x):
        self.value[""] = x


class Change(NamedTuple):
    kind: str
    key: str
    old_value: Optional[str]
    new_value: str

    @classmethod
    def new(cls, key, value):
        return cls(kind="new", key=key, old_value=None, new_value=value)

    @classmethod
    def changed(cls, key, old_value, new_value):
        return cls(kind="changed", key=key, old_value=old_value, new_value=new_value)


class Cache:
    def __init__(self):
        self.entries = AtomicRef({})

    def get(self, key: str) -> ConfigurationEntry:
        return self.entries.get().get(key, ConfigurationEntry.missing)

    def __contains__(self, key):
        return key in self.entries.get()

    def __len__(self):
        return len(self.entries.get())

    def keys(self):
        return list(self.entries.get().keys())

    def snapshot(self) -> Dict[str, str]:
        return {k: e.value for k, e in self.entries.get().items()}

    def reconcile(self, pairs: Iterable[Tuple[str, str]], first_load: bool = False) -> List[Change]:
        """Upserts fetched pairs and reports what changed.

        Keys missing from pairs are kept. "changed" notifications are not
        logged while first_load is set, but are still returned.
        """
        # TODO: opt-in pruning of keys missing from the latest fetch.
        current = self.entries.get()
        updated = dict(current)
        changes = []
        for key, value in pairs:
            entry = updated.get(key)
            if entry is None:
                logger.info(
                    "new configuration found. configurationKey: %s configuration value: %s",
                    key, value,
                    extra={"configuration_key": key},
                )
                updated[key] = ConfigurationEntry(key=key, value=value)
                changes.append(Change.new(key, value))
            elif entry.value != value:
                if not first_load:
                    logger.info(
                        "changed configuration value. configurationKey: %s -> new & old value: %s --- %s",
                        key, value, entry.value,
                        extra={"configuration_key": key},
                    )
                updated[key] = entry.with_value(value)
                changes.append(Change.changed(key, entry.value, value))
        if changes:
            self.entries.set(updated)
        return changes
