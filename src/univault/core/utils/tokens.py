"""Shared markdown-it token utilities"""


HEADING_TAGS = {f'h{n}': n for n in range(1, 7)}


def heading_level(token) -> int | None:
    """Heading level (1-6) of a heading_open token; None for any other token."""
    if token.type != 'heading_open':
        return None
    return HEADING_TAGS.get(token.tag)


def inline_text(token) -> str:
    """Plain text of an inline token: text, code, and math children joined, markup dropped."""
    if not token.children:
        return token.content
    return ''.join(
        c.content for c in token.children
        if c.type in ('text', 'code_inline', 'math_inline', 'math_inline_double')
    )
