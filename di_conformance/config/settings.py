"""Settings implementation."""

from typing import Any, Mapping, Optional

from .base import BaseSettings

ENV_PREFIX = "DI_CONFORMANCE_"


class Settings(BaseSettings):
    """Run settings, a read-mostly mapping of dotted setting names."""

    def __init__(self, values: Optional[Mapping[str, Any]] = None):
        """Initialize a Settings object.

        Args:
            values: An optional dictionary of settings
        """
        self._values = dict(values) if values else {}

    @classmethod
    def from_environ(cls, environ: Mapping[str, str]) -> "Settings":
        """Collect `DI_CONFORMANCE_*` variables as settings.

        `DI_CONFORMANCE_KEY_SEED` becomes the `key.seed` setting.
        """
        return cls(
            {
                name[len(ENV_PREFIX) :].lower().replace("_", ".", 1): value
                for name, value in environ.items()
                if name.startswith(ENV_PREFIX)
            }
        )

    def get_value(self, *var_names, default=None):
        """Fetch a setting.

        Args:
            var_names: A list of variable name alternatives
            default: The default value to return if none are defined
        """
        for k in var_names:
            if k in self._values:
                return self._values[k]
        return default

    def __contains__(self, index):
        """Define 'in' operator."""
        return index in self._values

    def __iter__(self):
        """Iterate settings keys."""
        return iter(self._values)

    def __len__(self):
        """Fetch the length of the mapping."""
        return len(self._values)
