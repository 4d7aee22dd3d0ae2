"""
Text helpers for delimited header and data lines.
"""

from typing import List, Sequence


def break_string_list(
    text: str,
    delimiters: str,
    skip_blanks: bool = False,
    allow_strings: bool = False,
    retain_quotes: bool = False,
    quote_chars: Sequence[str] = ('"',),
) -> List[str]:
    """
    Split a string on any of the delimiter characters.

    Args:
        text: String to split
        delimiters: Each character is a delimiter
        skip_blanks: Merge consecutive delimiters (drop empty, unquoted tokens)
        allow_strings: Treat quoted text as one token, delimiters included
        retain_quotes: Keep the quote characters in quoted tokens
        quote_chars: Characters that open and close a quoted string

    Returns:
        List of tokens; an empty string gives [""] unless skip_blanks is set
    """
    tokens: List[str] = []
    quoted_tokens: List[bool] = []
    current: List[str] = []
    quote = None
    was_quoted = False

    for ch in text:
        if quote is not None:
            if ch == quote:
                quote = None
                if retain_quotes:
                    current.append(ch)
            else:
                current.append(ch)
        elif allow_strings and ch in quote_chars:
            quote = ch
            was_quoted = True
            if retain_quotes:
                current.append(ch)
        elif ch in delimiters:
            tokens.append("".join(current))
            quoted_tokens.append(was_quoted)
            current = []
            was_quoted = False
        else:
            current.append(ch)

    tokens.append("".join(current))
    quoted_tokens.append(was_quoted)

    if skip_blanks:
        return [t for t, q in zip(tokens, quoted_tokens) if t != "" or q]
    return tokens


def remove_quotes(text: str) -> str:
    """Remove double quote characters from a string."""
    return text.replace('"', "")
