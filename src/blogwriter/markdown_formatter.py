# -*- coding: utf-8 -*-
"""
Markdown → HTML formatter for generated articles.

Single pass over the input lines. Each line is classified by an ordered
list of rules (first match wins); lists, tables and blockquotes are
accumulated across consecutive lines and flushed into one fragment when
a line that does not belong to them shows up, or at end of input.
The result is the concatenation of all fragments in input order.
"""

import html
import re
from typing import List, Optional, Tuple, Union


# ---------------------------------------------------------------------------
# Line patterns (matched against the trimmed line)
# ---------------------------------------------------------------------------

_FENCE_MARKER = '```'

_HEADING_RE = re.compile(r'^(#{1,4}) (.*)$')
_BLOCKQUOTE_RE = re.compile(r'^(>+)\s+(.*)$')
_TASK_ITEM_RE = re.compile(r'^- \[([ xX])\] (.*)$')
_UNORDERED_ITEM_RE = re.compile(r'^[-*]\s+(.*)$')
_ORDERED_ITEM_RE = re.compile(r'^\d+\.\s+(.*)$')
_HR_RE = re.compile(r'^(?:-{3,}|\*{3,}|_{3,})$')
_SEPARATOR_CELL_RE = re.compile(r'^[-:]*-[-:]*$')

# Left margin per indent level for list items, px
_UNORDERED_INDENT_PX = 24
_ORDERED_INDENT_PX = 16


# ---------------------------------------------------------------------------
# Inline elements
# ---------------------------------------------------------------------------

# Order matters: later patterns run over markup inserted by earlier ones,
# and bold has to be consumed before the single-asterisk italic rule.
_INLINE_RULES: List[Tuple['re.Pattern[str]', str]] = [
    (re.compile(r'!\[(.*?)\]\((.*?)\)'), r'<img src="\2" alt="\1" />'),
    (re.compile(r'\[(.*?)\]\((.*?)\)'), r'<a href="\2">\1</a>'),
    (re.compile(r'\*\*(.*?)\*\*'), r'<strong>\1</strong>'),
    (re.compile(r'\*(.*?)\*'), r'<em>\1</em>'),
    (re.compile(r'~~(.*?)~~'), r'<del>\1</del>'),
    (re.compile(r'`(.*?)`'), r'<code>\1</code>'),
]


def format_inline(text: str) -> str:
    """Apply image, link, bold, italic, strikethrough and code spans."""
    for pattern, replacement in _INLINE_RULES:
        text = pattern.sub(replacement, text)
    return text


def _escape_code(code: str) -> str:
    return code.replace('&', '&amp;').replace('<', '&lt;').replace('>', '&gt;')


def _split_cells(line: str) -> List[str]:
    return [cell.strip() for cell in line.split('|') if cell.strip()]


def _is_separator_row(cells: List[str]) -> bool:
    return bool(cells) and all(_SEPARATOR_CELL_RE.match(cell) for cell in cells)


# ---------------------------------------------------------------------------
# Open blocks
# ---------------------------------------------------------------------------

UNORDERED = 'unordered'
ORDERED = 'ordered'
TASK = 'task'


class _OpenList:
    def __init__(self, kind: str):
        self.kind = kind
        self.items: List[str] = []

    def render(self) -> str:
        tag = 'ol' if self.kind == ORDERED else 'ul'
        return f'<{tag}>{"".join(self.items)}</{tag}>'


class _OpenTable:
    def __init__(self, header: List[str]):
        self.header = header
        self.rows: List[List[str]] = []

    def render(self) -> str:
        head = ''.join(f'<th>{cell}</th>' for cell in self.header)
        body = ''.join(
            '<tr>' + ''.join(f'<td>{cell}</td>' for cell in row) + '</tr>'
            for row in self.rows
        )
        return f'<table><thead><tr>{head}</tr></thead><tbody>{body}</tbody></table>'


class _OpenBlockquote:
    def __init__(self):
        # (rendered content, nesting level)
        self.entries: List[Tuple[str, int]] = []

    def render(self) -> str:
        # Nesting level is recorded but all levels render as one block.
        content = '<br/>'.join(entry for entry, _level in self.entries)
        return f'<blockquote>{content}</blockquote>'


# ---------------------------------------------------------------------------
# Block formatter
# ---------------------------------------------------------------------------

class _BlockFormatter:
    """
    Line-by-line state machine behind format_markdown().

    At most one of list/table/blockquote is open at a time (``block``).
    The code fence is tracked separately: while it is open every line
    goes to the fence body untouched.
    """

    def __init__(self):
        self.fragments: List[str] = []
        self.block: Optional[Union[_OpenList, _OpenTable, _OpenBlockquote]] = None
        self.in_fence = False
        self.fence_language = ''
        self.fence_lines: List[str] = []

        self._rules = (
            self._heading,
            self._blockquote,
            self._table_row,
            self._task_item,
            self._unordered_item,
            self._ordered_item,
            self._fence_open,
            self._horizontal_rule,
            self._paragraph,
        )

    # --- state helpers -----------------------------------------------------

    def _flush(self) -> None:
        if self.block is not None:
            self.fragments.append(self.block.render())
            self.block = None

    def _emit(self, fragment: str) -> None:
        self._flush()
        self.fragments.append(fragment)

    def _open_list(self, kind: str) -> _OpenList:
        if isinstance(self.block, _OpenList) and self.block.kind == kind:
            return self.block
        self._flush()
        self.block = _OpenList(kind)
        return self.block

    def _close_fence(self) -> None:
        code = _escape_code('\n'.join(self.fence_lines))
        if self.fence_language:
            lang_attr = f' class="language-{html.escape(self.fence_language)}"'
        else:
            lang_attr = ''
        self.in_fence = False
        self.fence_language = ''
        self.fence_lines = []
        self.fragments.append(f'<pre><code{lang_attr}>{code}</code></pre>')

    # --- rules (called in order, first one returning True wins) ---------------

    def _heading(self, raw: str, line: str) -> bool:
        m = _HEADING_RE.match(line)
        if not m:
            return False
        level = len(m.group(1))
        self._emit(f'<h{level}>{m.group(2)}</h{level}>')
        return True

    def _blockquote(self, raw: str, line: str) -> bool:
        m = _BLOCKQUOTE_RE.match(line)
        if not m:
            return False
        if not isinstance(self.block, _OpenBlockquote):
            self._flush()
            self.block = _OpenBlockquote()
        level = len(m.group(1)) - 1
        self.block.entries.append((format_inline(m.group(2)), level))
        return True

    def _table_row(self, raw: str, line: str) -> bool:
        if not line.startswith('|'):
            return False
        cells = _split_cells(line)
        if not isinstance(self.block, _OpenTable):
            self._flush()
            self.block = _OpenTable(cells)
        elif not _is_separator_row(cells):
            self.block.rows.append(cells)
        return True

    def _task_item(self, raw: str, line: str) -> bool:
        m = _TASK_ITEM_RE.match(line)
        if not m:
            return False
        checked = ' checked' if m.group(1).lower() == 'x' else ''
        self._open_list(TASK).items.append(
            f'<li><input type="checkbox"{checked} disabled />{format_inline(m.group(2))}</li>'
        )
        return True

    def _unordered_item(self, raw: str, line: str) -> bool:
        m = _UNORDERED_ITEM_RE.match(line)
        if not m:
            return False
        indent = _indent_level(raw)
        content = format_inline(m.group(1).strip())
        self._open_list(UNORDERED).items.append(
            _list_item(content, indent, _UNORDERED_INDENT_PX)
        )
        return True

    def _ordered_item(self, raw: str, line: str) -> bool:
        m = _ORDERED_ITEM_RE.match(line)
        if not m:
            return False
        indent = _indent_level(raw)
        self._open_list(ORDERED).items.append(
            _list_item(m.group(1).strip(), indent, _ORDERED_INDENT_PX)
        )
        return True

    def _fence_open(self, raw: str, line: str) -> bool:
        if not line.startswith(_FENCE_MARKER):
            return False
        self._flush()
        self.in_fence = True
        self.fence_language = line[len(_FENCE_MARKER):].strip()
        self.fence_lines = []
        return True

    def _horizontal_rule(self, raw: str, line: str) -> bool:
        if not _HR_RE.match(line):
            return False
        self._emit('<hr />')
        return True

    def _paragraph(self, raw: str, line: str) -> bool:
        self._emit(f'<p>{format_inline(line)}</p>')
        return True

    # --- driver ------------------------------------------------------------

    def feed(self, raw: str) -> None:
        line = raw.strip()

        if self.in_fence:
            if line.startswith(_FENCE_MARKER):
                self._close_fence()
            else:
                self.fence_lines.append(raw)
            return

        if not line:
            # Blank lines end a list; tables and quotes survive them.
            if isinstance(self.block, _OpenList):
                self._flush()
            return

        for rule in self._rules:
            if rule(raw, line):
                return

    def finish(self) -> str:
        self._flush()
        if self.in_fence:
            self._close_fence()
        return ''.join(self.fragments)


def _indent_level(raw: str) -> int:
    return (len(raw) - len(raw.lstrip(' '))) // 2


def _list_item(content: str, indent: int, step_px: int) -> str:
    if indent > 0:
        return f'<li style="margin-left:{indent * step_px}px;">{content}</li>'
    return f'<li>{content}</li>'


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def format_markdown(text: str) -> str:
    """
    Convert article markdown to HTML.

    Handles: headings (# .. ####), paragraphs, unordered / ordered / task
    lists, pipe tables, fenced code blocks, blockquotes, horizontal rules
    and inline spans (images, links, bold, italic, strikethrough, code).

    Never raises: unterminated fences, header-only tables and other
    partial constructs are rendered with the closest matching rule.
    """
    if not text:
        return ''

    lines = text.split('\n')
    # A terminating newline does not start another line.
    if lines[-1] == '':
        lines.pop()

    formatter = _BlockFormatter()
    for raw in lines:
        formatter.feed(raw.rstrip('\r'))
    return formatter.finish()
