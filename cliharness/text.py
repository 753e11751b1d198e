"""
Text normalization for captured terminal output.

Strips ANSI/VT escape sequences so assertions can match plain strings.
"""

import re


# OSC: ESC ] ... terminated by BEL or ST (ESC \)
# CSI: ESC [ or 8-bit \x9b, parameter bytes, intermediate bytes, final byte
# Fe:  ESC followed by a single byte in @-Z, \, ], ^, _
ANSI_ESCAPE_RE = re.compile(
    r"""
    \x1b\][^\x07\x1b]*(?:\x07|\x1b\\)
    | (?:\x1b\[|\x9b)[0-?]*[ -/]*[@-~]
    | \x1b[@-Z\\-_]
    """,
    re.VERBOSE,
)


def strip_ansi(text: str) -> str:
    """
    Remove terminal control sequences from text.

    Plain text passes through unchanged, and stripping twice gives the same
    result as stripping once.

    Args:
        text: Captured text, possibly containing escape sequences

    Returns:
        Text with all escape sequences removed
    """
    if not text:
        return text

    # Removing one sequence can join the halves of another (ESC + "ESC[1m" + "[1m")
    while True:
        stripped = ANSI_ESCAPE_RE.sub("", text)
        if stripped == text:
            return stripped
        text = stripped
