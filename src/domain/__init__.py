"""Domain layer: blocks, errors and constants."""

from .blocks import (
    Block,
    Blockquote,
    BoldText,
    BulletList,
    CodeSpan,
    Header,
    InlineSpan,
    NumberedItem,
    NumberedList,
    Paragraph,
    PlainText,
    Separator,
    Table,
)
from .errors import ErrorCodes, ServiceError

__all__ = [
    "Block",
    "Blockquote",
    "BoldText",
    "BulletList",
    "CodeSpan",
    "Header",
    "InlineSpan",
    "NumberedItem",
    "NumberedList",
    "Paragraph",
    "PlainText",
    "Separator",
    "Table",
    "ErrorCodes",
    "ServiceError",
]
