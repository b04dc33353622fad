"""
Text Transform
==============

Converts the blog body markup (``**bold**``, 4-space paragraph indents and
blank-line breaks) into an HTML fragment, and sanitizes it for display.

render() output must always go through sanitize() before it reaches a page;
render_safe() does both.
"""

import re

import nh3

PARAGRAPH_OPEN = '<p style="text-indent:2em; margin:0;">'
PARAGRAPH_CLOSE = '</p>'
LINE_BREAK = '<br/>'

_BOLD = re.compile(r'\*\*(.*?)\*\*')
# Only literal spaces count; the newline that starts the line is consumed too
_INDENT = re.compile(r'(?:^|\n) {4,}')
_PARAGRAPH = re.compile(
    re.escape(PARAGRAPH_OPEN)
    + r'(.*?)(?=' + re.escape(LINE_BREAK * 2) + '|' + re.escape(PARAGRAPH_OPEN) + r'|\Z)',
    re.DOTALL,
)

ALLOWED_TAGS = {'strong', 'b', 'p', 'br'}
ALLOWED_ATTRIBUTES = {'p': {'style'}}
ALLOWED_STYLE_PROPERTIES = {'text-indent', 'margin'}


def render(raw):
    """Transform blog markup into an (unsanitized) HTML fragment.

    Total over all strings: malformed markup such as an unpaired ``**`` is
    left as-is rather than rejected.
    """
    if not raw:
        return ''

    html = _BOLD.sub(r'<strong>\1</strong>', raw)
    html = _INDENT.sub(PARAGRAPH_OPEN, html)
    html = html.replace('\n\n', LINE_BREAK * 2)
    html = html.replace('\n', LINE_BREAK)
    html = _PARAGRAPH.sub(lambda m: PARAGRAPH_OPEN + m.group(1) + PARAGRAPH_CLOSE, html)
    return html


def sanitize(fragment):
    """Strip every tag and attribute outside the blog allow-list"""
    if not fragment:
        return ''
    return nh3.clean(
        fragment,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        filter_style_properties=ALLOWED_STYLE_PROPERTIES,
    )


def render_safe(raw):
    return sanitize(render(raw))
