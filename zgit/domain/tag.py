"""
Tag selector domain object for zgit.

Repositories can carry a single grouping tag. On the command line a tag is
selected with a leading ``@`` token, e.g. ``zgit @api status``.

The selector is a small sum type:
    NoTag()      - no filter, every repository is selected
    Tag("api")   - only repositories tagged exactly "api"
"""

from dataclasses import dataclass
from typing import Optional, Union

TAG_PREFIX = "@"


@dataclass(frozen=True)
class NoTag:
    """No tag filter."""

    @property
    def name(self) -> str:
        return ""

    def __bool__(self) -> bool:
        return False


@dataclass(frozen=True)
class Tag:
    """Filter on an exact tag name."""
    name: str

    def __bool__(self) -> bool:
        return bool(self.name)


TagSelector = Union[NoTag, Tag]


def parse_tag_prefix(token: Optional[str]) -> TagSelector:
    """
    Parse a command-line token as a tag selector.

    Only tokens of the form ``@name`` with a non-empty name are tags.
    Anything else, including ``""`` and a bare ``"@"``, yields NoTag.

    Examples:
        parse_tag_prefix("@api")  -> Tag("api")
        parse_tag_prefix("@")     -> NoTag()
        parse_tag_prefix("pull")  -> NoTag()
    """
    if not token or not token.startswith(TAG_PREFIX):
        return NoTag()
    name = token[len(TAG_PREFIX):]
    if not name:
        return NoTag()
    return Tag(name)


def is_tag_token(token: Optional[str]) -> bool:
    """True if ``token`` parses as a Tag."""
    return isinstance(parse_tag_prefix(token), Tag)
