"""Structured profile identifiers.

Profiles are stored externally under a single string such as
``"availability-Asgard_Solar"``: the profile type and the entity name joined
by a separator. Inside tsrep that string is parsed once into a
:class:`ProfileName` and only serialized back when tables are exported.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from tsrep.exceptions import DataError

if TYPE_CHECKING:
    from collections.abc import Iterable

SEPARATOR = "-"


@dataclass(frozen=True, order=True)
class ProfileName:
    """Profile type and entity name of one profile.

    Attributes
    ----------
    profile_type : str
        Kind of profile, e.g. "availability", "demand" or "inflows".
    entity_name : str
        Asset or flow the profile belongs to, e.g. "Asgard_Solar".

    Examples
    --------
    >>> name = ProfileName.parse("availability-Asgard_Solar")
    >>> name.profile_type, name.entity_name
    ('availability', 'Asgard_Solar')
    >>> str(name)
    'availability-Asgard_Solar'
    """

    profile_type: str
    entity_name: str

    @classmethod
    def parse(cls, name: str, separator: str = SEPARATOR) -> ProfileName:
        """Split ``name`` at the first ``separator``.

        Raises
        ------
        DataError
            If ``name`` is not a string, has no separator, or either side of
            the separator is empty.
        """
        if not isinstance(name, str):
            raise DataError(f"profile name must be a string, got {name!r}")
        profile_type, sep, entity_name = name.partition(separator)
        if not sep:
            raise DataError(
                f"profile name {name!r} does not follow the "
                f"'<profile_type>{separator}<entity_name>' convention"
            )
        if not profile_type or not entity_name:
            raise DataError(
                f"profile name {name!r} has an empty profile type or entity name"
            )
        return cls(profile_type, entity_name)

    def __str__(self) -> str:
        return f"{self.profile_type}{SEPARATOR}{self.entity_name}"


def parse_profile_names(names: Iterable[str]) -> dict[str, ProfileName]:
    """Parse every distinct name, keyed by the original string."""
    return {name: ProfileName.parse(name) for name in dict.fromkeys(names)}
