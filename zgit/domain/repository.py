"""
Repository descriptor domain object for zgit.

A descriptor is one entry of the repository registry: a display name,
the working copy location, and an optional grouping tag.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, Union

from .tag import TagSelector, NoTag, Tag


@dataclass(frozen=True)
class RepositoryDescriptor:
    """A registered working copy."""
    name: str
    location: str
    tag: str = ""

    @classmethod
    def from_path(cls, location: Union[str, Path], tag: str = "") -> 'RepositoryDescriptor':
        """Build a descriptor named after the last component of ``location``."""
        path = Path(location)
        return cls(name=path.name, location=str(path), tag=tag)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RepositoryDescriptor':
        return cls(
            name=str(data.get('name') or ''),
            location=str(data.get('location') or ''),
            tag=str(data.get('tag') or ''),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'location': self.location,
            'tag': self.tag,
        }

    def matches(self, selector: Union[TagSelector, str, None]) -> bool:
        """
        Check whether this repository is selected by a tag filter.

        An empty filter selects everything. A non-empty filter selects only
        repositories whose tag is non-empty and exactly equal to it.
        """
        if selector is None:
            return True
        if isinstance(selector, str):
            selector = Tag(selector) if selector else NoTag()
        if isinstance(selector, NoTag):
            return True
        return bool(self.tag) and self.tag == selector.name
