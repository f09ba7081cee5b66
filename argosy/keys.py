"""
Argosy key registry.

Every parameter is correlated with the tokenizer output through an internal key
(the tokenizer's destination name). The registry hands out those keys for one
provider instance and guarantees they never collide:

- omitted keys are minted from a per-registry counter ("key_0", "key_1", ...),
  skipping any value that is already taken;
- an explicit key already owned by another parameter raises DuplicateKeyError
  naming both the requesting parameter and the owner.

There is no removal: a registry lives and dies with its provider.
"""
import itertools
from contextlib import contextmanager

from .faults import DuplicateKeyError
from .utils import Unset


class KeyRegistry:
    """
    Per-provider allocation of unique internal keys.

    Example
        >>> registry = KeyRegistry()
        >>> registry.assign("--verbose")
        'key_0'
        >>> registry.assign("--name", "name")
        'name'
    """

    def __init__(self, prefix="key_"):
        if not isinstance(prefix, str):
            raise TypeError("KeyRegistry() 'prefix' must be a string")
        self._prefix = prefix
        self._counter = itertools.count()
        self._owners = {}

    def _allocate(self, long_name, key=Unset, /):
        if not isinstance(long_name, str):
            raise TypeError("key owner must be a string")
        if key is Unset:
            while (key := self._prefix + str(next(self._counter))) in self._owners:
                pass
            return key
        if not isinstance(key, str):
            raise TypeError("key must be a string")
        if (owner := self._owners.get(key, long_name)) != long_name:
            raise DuplicateKeyError(key=key, name=long_name, owner=owner)
        return key

    def assign(self, long_name, key=Unset, /):
        """
        Allocate (or validate) a key for long_name and record it.

        Raises
        - DuplicateKeyError: when the explicit key already belongs to another long name.
        """
        key = self._allocate(long_name, key)
        self._owners[key] = long_name
        return key

    @contextmanager
    def claim(self, long_name, key=Unset, /):
        """
        Allocate a key but record it only if the managed block succeeds.

        Used by declarations that still have to go through the tokenizer: when the
        block raises, the registry is left exactly as it was.
        """
        key = self._allocate(long_name, key)
        yield key
        self._owners[key] = long_name

    def owner(self, key, /):
        """
        Long name owning key, or None when the key is free.
        """
        return self._owners.get(key)

    def __contains__(self, key, /):
        return key in self._owners

    def __iter__(self):
        return iter(self._owners)

    def __len__(self):
        return len(self._owners)

    def __repr__(self):
        return f"key-registry({", ".join(f"{key}={owner!r}" for key, owner in self._owners.items())})"


__all__ = (
    "KeyRegistry",
)
