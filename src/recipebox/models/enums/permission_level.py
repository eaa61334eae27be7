import enum
from typing import Iterable, Optional


class PermissionLevel(str, enum.Enum):
    """
    Totally ordered access levels: ``view < edit < admin``.

    A higher level implies every lower one. Resource ownership is not a level; owners are always treated as
    holding ``admin``.
    """

    view = "view"
    edit = "edit"
    admin = "admin"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    def __lt__(self, other):
        if not isinstance(other, PermissionLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, PermissionLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, PermissionLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, PermissionLevel):
            return NotImplemented
        return self.rank >= other.rank


_RANKS = {PermissionLevel.view: 1, PermissionLevel.edit: 2, PermissionLevel.admin: 3}


def highest_level(levels: Iterable[Optional[PermissionLevel]]) -> Optional[PermissionLevel]:
    """Return the greatest of *levels*, ignoring ``None``. Returns ``None`` if nothing remains."""
    present = [level for level in levels if level is not None]
    return max(present, key=lambda level: level.rank) if present else None
