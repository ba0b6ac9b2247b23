from typing import Iterator, List, Optional


class HistoryLog:
    """Every path a router has observed, in order, repeats included."""

    def __init__(self):
        self._paths: List[str] = []

    def append(self, path: str) -> None:
        self._paths.append(path)

    @property
    def last(self) -> Optional[str]:
        return self._paths[-1] if self._paths else None

    @property
    def previous(self) -> Optional[str]:
        """The path visited right before the latest one."""
        if len(self._paths) < 2:
            return None
        return self._paths[-2] or None

    def should_suppress(self, has_children: bool, path: str) -> bool:
        """
        Whether a has-children route's handlers should be skipped for path.

        Only an exact repeat of the immediately preceding path counts. Moving
        between two different child paths under the same parent is not
        suppressed.
        """
        if not has_children:
            return False
        return bool(self._paths) and self._paths[-1] == path

    def __len__(self) -> int:
        return len(self._paths)

    def __iter__(self) -> Iterator[str]:
        return iter(self._paths)

    def __getitem__(self, index):
        return self._paths[index]

    def __repr__(self) -> str:
        return f"HistoryLog({self._paths!r})"
