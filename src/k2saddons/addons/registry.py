"""AddonRegistry: lazily loaded, process-lifetime catalog of discovered addons."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from .loader import load_addons
from .models import Addon, AddonPrintInfo

if TYPE_CHECKING:
    from k2saddons.core.config import Config

logger = logging.getLogger(__name__)

AddonLoader = Callable[[Path], Sequence[Addon]]


class AddonRegistry:
    """Load addons once, on first access, and serve the cached catalog afterwards.

    Manifest changes made after the first load are not picked up unless
    ``refresh()`` is called explicitly.
    """

    def __init__(self, addons_dir: Path, loader: AddonLoader = load_addons):
        self.addons_dir = addons_dir
        self._loader = loader
        self._lock = threading.Lock()
        self._addons: tuple[Addon, ...] | None = None

    @classmethod
    def from_config(cls, config: Config) -> AddonRegistry:
        return cls(config.addons_dir)

    @property
    def is_loaded(self) -> bool:
        return self._addons is not None

    def all_addons(self) -> tuple[Addon, ...]:
        """Return all addons; load errors propagate and leave the cache empty."""
        with self._lock:
            if self._addons is None:
                logger.debug("Loading addons from %s", self.addons_dir)
                self._addons = tuple(self._loader(self.addons_dir))
            return self._addons

    def refresh(self) -> tuple[Addon, ...]:
        with self._lock:
            self._addons = None
        return self.all_addons()

    def get(self, name: str) -> Addon | None:
        return next((a for a in self.all_addons() if a.name == name), None)

    def names(self) -> list[str]:
        return [a.name for a in self.all_addons()]


def to_print_info(addons: Iterable[Addon]) -> list[AddonPrintInfo]:
    return [AddonPrintInfo(name=a.metadata.name, description=a.metadata.description) for a in addons]
