"""Terminal-safe output with ASCII fallback for non-UTF-8 consoles.

Detects the terminal encoding and replaces the icons used in progress bars,
summaries and reports so that legacy Windows consoles do not crash.
"""
import sys
import locale


# Unicode to ASCII icon mapping for non-UTF-8 terminals
ICON_MAP = {
    # Status icons
    '✓': '[OK]',
    '✔': '[OK]',
    '✅': '[OK]',
    '✗': '[FAIL]',
    '❌': '[FAIL]',
    '⚠️': '[WARN]',
    '⚠': '[WARN]',

    # Progress and structure
    '━': '=',
    '·': '-',
    '→': '->',
    '—': '-',
    '…': '...',
    '•': '*',

    # Report icons
    '🧹': '[cleaner]',
    '📊': '[stats]',
    '📁': '[dir]',
    '🏋️': '[heavy]',
    '📝': '[list]',
    'ℹ️': '[info]',
    '💾': '[save]',
    '🎯': '[target]',
}


def detect_terminal_encoding() -> str:
    """Detect the terminal's encoding.

    Returns:
        str: Terminal encoding ('utf-8', 'cp1252', 'ascii', etc.)
    """
    if hasattr(sys.stdout, 'encoding') and sys.stdout.encoding:
        return sys.stdout.encoding.lower()

    try:
        return locale.getpreferredencoding().lower()
    except (LookupError, ValueError):
        pass

    return 'ascii'


def is_utf8_capable() -> bool:
    """Check if the terminal can handle UTF-8 characters."""
    return detect_terminal_encoding().replace('_', '-') in ('utf-8', 'utf8')


def sanitize_for_terminal(text: str, force: bool = False) -> str:
    """Replace Unicode icons with ASCII equivalents when the terminal needs it.

    Args:
        text: Text potentially containing Unicode icons
        force: Sanitize even on a UTF-8 terminal

    Returns:
        str: Text safe for the current terminal
    """
    if not force and is_utf8_capable():
        return text

    sanitized = text
    for unicode_char, ascii_replacement in ICON_MAP.items():
        sanitized = sanitized.replace(unicode_char, ascii_replacement)

    return sanitized
