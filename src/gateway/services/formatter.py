# Author: Bradley R. Kinnard — whitespace is a feature

"""Local code formatting for /format. No provider call, just whitespace hygiene."""

INDENT = "    "


def _expand_leading_tabs(line: str) -> str:
    stripped = line.lstrip("\t")
    return INDENT * (len(line) - len(stripped)) + stripped


def format_code(code: str, language: str) -> str:
    """
    Trailing whitespace gone, leading tabs to 4 spaces (xml keeps its tabs),
    runs of blank lines collapsed to one, no blank lines at either end,
    exactly one trailing newline. Whitespace-only input formats to "".
    """
    out: list[str] = []
    for raw in code.splitlines():
        line = raw.rstrip()
        if language != "xml":
            line = _expand_leading_tabs(line)
        if not line and (not out or not out[-1]):
            continue  # leading blank or second blank in a row
        out.append(line)

    while out and not out[-1]:
        out.pop()

    return "\n".join(out) + "\n" if out else ""
