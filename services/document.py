"""
Document tree for the School Marksheet System

Marksheets are described as a tree of immutable nodes and turned into PDF
by a single serializer (services.pdf_engine). Text is stored as plain
strings; escaping is the serializer's job.
"""

import base64
from dataclasses import dataclass
from typing import Tuple, Union


def _freeze(items):
    return tuple(items) if not isinstance(items, tuple) else items


@dataclass(frozen=True)
class Text:
    """A paragraph. style is one of the names known to the engine."""
    text: str
    style: str = 'body'


@dataclass(frozen=True)
class Image:
    """An inline image; the bytes travel with the document"""
    data: bytes
    mime_type: str
    width_mm: float = 26
    height_mm: float = 32

    @property
    def data_uri(self):
        encoded = base64.b64encode(self.data).decode('ascii')
        return f'data:{self.mime_type};base64,{encoded}'


@dataclass(frozen=True)
class Placeholder:
    """A bordered empty box with a label, used where an image is missing"""
    label: str
    width_mm: float = 26
    height_mm: float = 32


@dataclass(frozen=True)
class Spacer:
    height: float = 6


@dataclass(frozen=True)
class PageBreak:
    pass


@dataclass(frozen=True)
class Cell:
    content: Union[str, 'Text', 'Image', 'Placeholder', 'Table'] = ''
    bold: bool = False
    align: str = 'LEFT'


@dataclass(frozen=True)
class Row:
    cells: Tuple[Cell, ...]
    header: bool = False

    def __post_init__(self):
        object.__setattr__(self, 'cells', _freeze(self.cells))


@dataclass(frozen=True)
class Table:
    """A table. col_widths are fractions of the available width.

    style: 'grid' draws every cell border, 'box' only the outline,
    'plain' draws nothing.
    """
    rows: Tuple[Row, ...]
    col_widths: Tuple[float, ...]
    style: str = 'grid'

    def __post_init__(self):
        object.__setattr__(self, 'rows', _freeze(self.rows))
        object.__setattr__(self, 'col_widths', _freeze(self.col_widths))


Block = Union[Text, Image, Placeholder, Spacer, PageBreak, Table]


@dataclass(frozen=True)
class Document:
    blocks: Tuple[Block, ...]

    def __post_init__(self):
        object.__setattr__(self, 'blocks', _freeze(self.blocks))

    def split_pages(self):
        """Split on explicit page breaks, returning one Document per segment"""
        segments, current = [], []
        for block in self.blocks:
            if isinstance(block, PageBreak):
                segments.append(Document(tuple(current)))
                current = []
            else:
                current.append(block)
        segments.append(Document(tuple(current)))
        return segments

    def iter_text(self):
        """Yield every piece of text in reading order"""
        for block in self.blocks:
            yield from _iter_node_text(block)

    def contains_text(self, needle):
        return any(needle in text for text in self.iter_text())

    def images(self):
        return [node for node in _iter_nodes(self.blocks) if isinstance(node, Image)]


def _iter_nodes(nodes):
    for node in nodes:
        yield node
        if isinstance(node, Table):
            for row in node.rows:
                for cell in row.cells:
                    if not isinstance(cell.content, str):
                        yield from _iter_nodes((cell.content,))


def _iter_node_text(node):
    if isinstance(node, str):
        yield node
    elif isinstance(node, Text):
        yield node.text
    elif isinstance(node, Placeholder):
        yield node.label
    elif isinstance(node, Table):
        for row in node.rows:
            for cell in row.cells:
                yield from _iter_node_text(cell.content)
