"""Which file extensions each speech backend accepts."""

from pathlib import Path
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Mapping, Tuple, Union

DEFAULT_CAPABILITIES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("groq", (".flac", ".mp3", ".mp4", ".mpeg", ".mpga", ".m4a", ".ogg", ".wav", ".webm")),
    ("alibaba", (".flac", ".mp3", ".mp4", ".m4a", ".ogg", ".wav", ".webm")),
    ("openai", (".mp3", ".mp4", ".mpeg", ".mpga", ".m4a", ".ogg", ".wav", ".webm")),
)


def file_extension(filename: Union[str, Path]) -> str:
    """Lower-cased extension including the dot, or '' if there is none."""
    return Path(filename).suffix.lower()


class ProviderCapabilityMatrix:
    """Read-only provider to accepted-extension table.

    Unknown providers accept nothing, which forces conversion instead of an
    upload the backend would reject.
    """

    def __init__(self, table: Iterable[Tuple[str, Iterable[str]]] = DEFAULT_CAPABILITIES):
        entries: Dict[str, FrozenSet[str]] = {}
        for provider_id, extensions in table:
            entries[provider_id.lower()] = frozenset(ext.lower() for ext in extensions)
        self._table: Mapping[str, FrozenSet[str]] = MappingProxyType(entries)

    def providers(self) -> Tuple[str, ...]:
        return tuple(self._table)

    def accepted_extensions(self, provider_id: str) -> FrozenSet[str]:
        return self._table.get((provider_id or "").lower(), frozenset())

    def is_format_supported(self, filename: Union[str, Path], provider_id: str) -> bool:
        """Check whether ``provider_id`` accepts the extension of ``filename``."""
        return file_extension(filename) in self.accepted_extensions(provider_id)

    def with_provider(self, provider_id: str, extensions: Iterable[str]) -> "ProviderCapabilityMatrix":
        """Return a new matrix with ``provider_id`` added or replaced."""
        table = [(p, exts) for p, exts in self._table.items() if p != provider_id.lower()]
        table.append((provider_id, extensions))
        return ProviderCapabilityMatrix(table)

    def __contains__(self, provider_id: str) -> bool:
        return (provider_id or "").lower() in self._table

    def __repr__(self) -> str:
        return f"ProviderCapabilityMatrix(providers={list(self._table)})"


default_capabilities = ProviderCapabilityMatrix()
