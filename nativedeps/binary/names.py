"""Naming helpers for per-binary dependency scopes."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Names:
    """Derives scope and task names from a binary name.

    ``Names("debug").with_prefix("cppCompile")`` is ``cppCompileDebug``.
    """

    base_name: str

    def with_prefix(self, prefix: str) -> str:
        if not self.base_name:
            return prefix
        return prefix + self.base_name[0].upper() + self.base_name[1:]

