"""
PDF document engine for the School Marksheet System

PdfEngine serializes a services.document tree into an A4 PDF with reportlab.
EnginePool hands engines out for the duration of a request and always takes
them back, including when rendering raises.
"""

import logging
import queue
import threading
from contextlib import contextmanager
from io import BytesIO
from xml.sax.saxutils import escape as xml_escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_LEFT, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.platypus import Image as RLImage
from reportlab.platypus import PageBreak as RLPageBreak
from reportlab.platypus import Paragraph, SimpleDocTemplate, TableStyle
from reportlab.platypus import Spacer as RLSpacer
from reportlab.platypus import Table as RLTable

from services.document import Image, PageBreak, Placeholder, Spacer, Table, Text
from services.errors import RenderFailure

logger = logging.getLogger(__name__)

# 15 CSS pixels (1/96 inch each) expressed in points
PAGE_MARGIN = 15 * 72 / 96
CELL_PADDING = 3

ACCENT = colors.HexColor('#4169E1')
ACCENT_LIGHT = colors.HexColor('#F0F8FF')

ALIGNMENTS = {'LEFT': TA_LEFT, 'CENTER': TA_CENTER, 'RIGHT': TA_RIGHT}


class PdfEngine:
    """Serializer from document nodes to reportlab flowables"""

    CUSTOM_FONT = 'ReportFont'

    def __init__(self, font_path=None):
        self.font_name, self.bold_font_name = self._register_font(font_path)
        self.styles = self._build_styles()
        self._cell_styles = {}

    def _register_font(self, font_path):
        if not font_path:
            return 'Helvetica', 'Helvetica-Bold'
        try:
            pdfmetrics.registerFont(TTFont(self.CUSTOM_FONT, font_path))
        except Exception as e:
            raise RenderFailure(f'Could not load report font {font_path}: {e}') from e
        logger.info("Registered report font %s", font_path)
        return self.CUSTOM_FONT, self.CUSTOM_FONT

    def _build_styles(self):
        base = getSampleStyleSheet()['Normal']

        def style(name, **kwargs):
            kwargs.setdefault('fontName', self.font_name)
            return ParagraphStyle(name, parent=base, **kwargs)

        return {
            'title': style('MarksheetTitle', fontName=self.bold_font_name, fontSize=16, leading=20,
                           alignment=TA_CENTER, textColor=colors.white),
            'subtitle': style('MarksheetSubtitle', fontSize=11, leading=14,
                              alignment=TA_CENTER, textColor=colors.white),
            'heading': style('MarksheetHeading', fontName=self.bold_font_name, fontSize=11, leading=14,
                             textColor=ACCENT, spaceBefore=2, spaceAfter=4),
            'body': style('MarksheetBody', fontSize=9, leading=11),
            'small': style('MarksheetSmall', fontSize=7.5, leading=9, alignment=TA_CENTER),
            'centered': style('MarksheetCentered', fontName=self.bold_font_name, fontSize=10, leading=12,
                              alignment=TA_CENTER),
            'placeholder': style('MarksheetPlaceholder', fontSize=9, leading=11,
                                 alignment=TA_CENTER, textColor=colors.grey),
        }

    def _cell_style(self, bold, align, header):
        key = (bold, align, header)
        if key not in self._cell_styles:
            self._cell_styles[key] = ParagraphStyle(
                'Cell-%s-%s-%s' % key,
                parent=self.styles['body'],
                fontName=self.bold_font_name if (bold or header) else self.font_name,
                alignment=ALIGNMENTS.get(align, TA_LEFT),
                textColor=colors.white if header else colors.black,
            )
        return self._cell_styles[key]

    @staticmethod
    def _paragraph(text, style):
        # Escape user data; keep explicit line breaks
        return Paragraph(xml_escape(str(text)).replace('\n', '<br/>'), style)

    @staticmethod
    def _calc_colwidths_from_fracs(total_width, fracs):
        s = float(sum(fracs)) or 1.0
        return [total_width * f / s for f in fracs]

    def build(self, document, title='Marksheet'):
        """Render a Document to PDF bytes. Any failure becomes RenderFailure."""
        buffer = BytesIO()
        try:
            doc = SimpleDocTemplate(
                buffer,
                pagesize=A4,
                leftMargin=PAGE_MARGIN,
                rightMargin=PAGE_MARGIN,
                topMargin=PAGE_MARGIN,
                bottomMargin=PAGE_MARGIN,
                title=title,
            )
            doc.build([self._flowable(block, doc.width) for block in document.blocks])
            return buffer.getvalue()
        except RenderFailure:
            raise
        except Exception as e:
            raise RenderFailure(f'PDF rendering failed: {e}') from e
        finally:
            buffer.close()

    def _flowable(self, node, width):
        if isinstance(node, Text):
            return self._paragraph(node.text, self.styles.get(node.style, self.styles['body']))
        if isinstance(node, Table):
            return self._table(node, width)
        if isinstance(node, Image):
            return RLImage(BytesIO(node.data), width=node.width_mm * mm, height=node.height_mm * mm,
                           kind='proportional')
        if isinstance(node, Placeholder):
            return self._placeholder(node)
        if isinstance(node, Spacer):
            return RLSpacer(1, node.height)
        if isinstance(node, PageBreak):
            return RLPageBreak()
        raise TypeError(f'Unsupported document node: {type(node).__name__}')

    def _placeholder(self, node):
        box = RLTable([[self._paragraph(node.label, self.styles['placeholder'])]],
                      colWidths=[node.width_mm * mm], rowHeights=[node.height_mm * mm])
        box.setStyle(TableStyle([
            ('BOX', (0, 0), (-1, -1), 1, ACCENT),
            ('BACKGROUND', (0, 0), (-1, -1), ACCENT_LIGHT),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ]))
        return box

    def _table(self, node, width):
        col_widths = self._calc_colwidths_from_fracs(width, node.col_widths)
        padding = 0 if node.style == 'plain' else CELL_PADDING
        data = []
        commands = [
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
            ('LEFTPADDING', (0, 0), (-1, -1), padding),
            ('RIGHTPADDING', (0, 0), (-1, -1), padding),
            ('TOPPADDING', (0, 0), (-1, -1), 2),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 2),
        ]
        for r, row in enumerate(node.rows):
            cells = []
            for c, cell in enumerate(row.cells):
                inner_width = col_widths[c] - 2 * padding
                if isinstance(cell.content, str):
                    cells.append(self._paragraph(cell.content, self._cell_style(cell.bold, cell.align, row.header)))
                else:
                    cells.append(self._flowable(cell.content, inner_width))
                if cell.align != 'LEFT':
                    commands.append(('ALIGN', (c, r), (c, r), cell.align))
            data.append(cells)
            if row.header:
                commands.append(('BACKGROUND', (0, r), (-1, r), ACCENT))

        if node.style == 'grid':
            commands += [
                ('BOX', (0, 0), (-1, -1), 0.75, colors.black),
                ('INNERGRID', (0, 0), (-1, -1), 0.5, colors.grey),
            ]
        elif node.style == 'box':
            commands.append(('BOX', (0, 0), (-1, -1), 0.75, colors.black))
        elif node.style == 'banner':
            commands += [
                ('BACKGROUND', (0, 0), (-1, -1), ACCENT),
                ('BOX', (0, 0), (-1, -1), 2, ACCENT),
                ('TOPPADDING', (0, 0), (-1, -1), 4),
                ('BOTTOMPADDING', (0, 0), (-1, -1), 4),
            ]

        repeat = 1 if node.rows and node.rows[0].header else 0
        table = RLTable(data, colWidths=col_widths, repeatRows=repeat)
        table.setStyle(TableStyle(commands))
        return table


class EnginePool:
    """A bounded set of engines with scoped checkout.

    Engines are created lazily up to ``size``. ``acquire`` is a context
    manager; the engine goes back to the pool on every exit path.
    """

    def __init__(self, size=1, font_path=None, factory=None):
        self.size = max(1, int(size))
        self._factory = factory or (lambda: PdfEngine(font_path))
        self._idle = queue.LifoQueue()
        self._lock = threading.Lock()
        self._created = 0

    @property
    def available(self):
        """Engines that could be handed out right now without waiting"""
        return self._idle.qsize() + (self.size - self._created)

    @contextmanager
    def acquire(self, timeout=None):
        engine = self._checkout(timeout)
        try:
            yield engine
        finally:
            self._idle.put(engine)

    def _checkout(self, timeout):
        try:
            return self._idle.get_nowait()
        except queue.Empty:
            pass

        with self._lock:
            if self._created < self.size:
                engine = self._factory()
                self._created += 1
                return engine

        try:
            return self._idle.get(timeout=timeout)
        except queue.Empty:
            raise RenderFailure('No document engine available') from None
