"""
Bracketed directives embedded in page text, e.g.

    [schedule slug="fall-2025-adult" hide_old="1"]

Each registered shortcode name maps to a handler taking the parsed attribute
dict and returning replacement text. Unregistered names are left as written.
"""
import re

_SHORTCODE_RE = re.compile(r'\[(?P<name>[A-Za-z][\w-]*)(?P<atts>(?:\s+[^\]]*)?)\s*/?\]')
_ATTR_RE = re.compile(
    r'''(?P<key>[\w-]+)\s*=\s*(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'|(?P<bare>[^\s"']+))'''
)

TRUTHY = {'1', 'true', 'yes', 'on'}


def parse_atts(text: str) -> dict:
    """Parse `key="value"` pairs; keys are lower-cased."""
    atts = {}
    for m in _ATTR_RE.finditer(text or ''):
        value = m.group('dq')
        if value is None:
            value = m.group('sq')
        if value is None:
            value = m.group('bare')
        atts[m.group('key').lower()] = value
    return atts


def shortcode_atts(defaults: dict, atts: dict) -> dict:
    """Merge user attributes over defaults, dropping unknown keys."""
    return {key: atts.get(key, default) for key, default in defaults.items()}


def is_truthy(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or '').strip().lower() in TRUTHY


def expand_shortcodes(content: str, handlers: dict) -> str:
    """Replace every registered shortcode in content with its handler output."""
    if not content or '[' not in content:
        return content or ''

    def _replace(m):
        handler = handlers.get(m.group('name').lower())
        if handler is None:
            return m.group(0)
        return handler(parse_atts(m.group('atts')))

    return _SHORTCODE_RE.sub(_replace, content)
