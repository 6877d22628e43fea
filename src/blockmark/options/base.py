#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Base classes for converter options.

Every option set in blockmark is a frozen dataclass so that a configured
renderer or parser can be shared freely between calls and threads.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, replace
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class BaseOptions(CloneFrozenMixin):
    """Base class for all blockmark option sets.

    Subclasses define their settings as frozen dataclass fields carrying a
    ``help`` entry in the field metadata, which the command line reuses.

    """

    def __post_init__(self) -> None:
        """Validate field values; subclasses extend this."""
        pass
