import re

# Markdown tokens the model is told not to emit: bold, italic, underscore, backtick, heading
_MARKUP_PATTERN = re.compile(r"\*\*|\*|_|`|#")
_EXCESS_NEWLINES_PATTERN = re.compile(r"\n{3,}")


def sanitize_output(text: str) -> str:
    """Strip markup from model output and normalize blank lines.

    Idempotent: ``sanitize_output(sanitize_output(x)) == sanitize_output(x)``.
    """
    text = _MARKUP_PATTERN.sub("", text)
    text = _EXCESS_NEWLINES_PATTERN.sub("\n\n", text)
    return text.strip()
