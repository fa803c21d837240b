"""Exceptions raised by the cache simulation core and its hosts."""


class CacheSimError(Exception):
    """Base class for every error raised by cachevis."""


class ConfigurationError(CacheSimError, ValueError):
    """A cache configuration failed validation."""


class NotPowerOfTwoError(ConfigurationError):
    pass


class CacheNotSmallerThanMemoryError(ConfigurationError):
    pass


class AssociativityMismatchError(ConfigurationError):
    pass


class ConfigurationMismatchError(CacheSimError, TypeError):
    """A controller was built for a configuration of a different mapping type."""


class LineIndexOutOfBoundsError(CacheSimError, IndexError):
    pass


class EmptyCandidateSetError(CacheSimError, RuntimeError):
    """Victim selection was asked to choose from nothing.

    Controllers only select a victim from a full, non-empty set.
    """


class InvalidAddressTextError(CacheSimError, ValueError):
    pass


class AddressOutOfRangeError(CacheSimError, ValueError):
    pass
