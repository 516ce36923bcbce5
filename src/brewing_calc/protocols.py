"""
Abstract protocols for the collaborators around the calculation core.

Catalog data and key-value storage are supplied from outside; these
protocols define what the catalog provider and the storage helpers
expect of them.
"""

from abc import abstractmethod
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from brewing_calc.models import HopFlavor

RawEntry = Mapping[str, Any]


@runtime_checkable
class CatalogSource(Protocol):
    """
    Protocol for systems that supply raw preset data.

    Entries may use any of the accepted field spellings; the catalog
    provider normalises them before use.
    """

    @abstractmethod
    def load_fermentables(self) -> list[RawEntry]:
        """
        Load raw fermentable entries.

        Returns:
            List of mappings, one per fermentable
        """
        ...

    @abstractmethod
    def load_hops(self) -> list[RawEntry]:
        """
        Load raw hop entries.

        Returns:
            List of mappings, one per hop variety
        """
        ...

    @abstractmethod
    def load_yeasts(self) -> list[RawEntry]:
        """
        Load raw yeast entries.

        Returns:
            List of mappings, one per yeast strain
        """
        ...

    @abstractmethod
    def load_styles(self) -> list[RawEntry]:
        """
        Load style guideline entries.

        Returns:
            List of mappings with a ``code`` and optional ranges
        """
        ...


@runtime_checkable
class HopFlavorLookup(Protocol):
    """Anything that can map hop names to flavor radars."""

    @abstractmethod
    def hop_flavor_map(self) -> dict[str, HopFlavor]:
        """
        Get flavor radars keyed by hop name.

        Returns:
            Mapping of hop name to HopFlavor
        """
        ...


@runtime_checkable
class KeyValueStore(Protocol):
    """
    Protocol for string key-value backends.

    Backends raise OSError when unavailable and QuotaExceededError when
    a write does not fit.
    """

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """
        Read a stored value.

        Args:
            key: Storage key

        Returns:
            Stored string, or None if the key is absent
        """
        ...

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """
        Write a value, replacing any existing one.

        Args:
            key: Storage key
            value: Serialised value
        """
        ...

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Remove a key; missing keys are ignored."""
        ...

    @abstractmethod
    def keys(self) -> list[str]:
        """List stored keys."""
        ...
