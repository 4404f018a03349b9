"""Turn raw model replies into paragraph-structured HTML.

The steps run in a fixed order and each one relies on the output of the one
before it:

1. inline markdown (bold, italic, headings, underline, strikethrough, code)
2. fenced code blocks -> 4-space indented text
3. list markers
4. keyword emoji annotations
5. blank-line runs -> one paragraph separator
6. split into trimmed, non-empty paragraphs
7. capitalize, indent and wrap each paragraph in ``<p>``
"""

import re

PLACEHOLDER = "<p>No response received.</p>"
PARAGRAPH_BREAK = "\n\n"
INDENT_CLASS = "indent-8"

_INLINE_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"\*\*(.*?)\*\*"), r"<strong>\1</strong>"),
    (re.compile(r"\*(.*?)\*"), r"<em>\1</em>"),
    (re.compile(r"#{1,6}[ \t]?"), ""),
    (re.compile(r"_{1,2}"), ""),
    (re.compile(r"~~"), ""),
    # Single backticks only; fences are handled separately
    (re.compile(r"(?<!`)`([^`\n]+)`(?!`)"), r"<code>\1</code>"),
]

_CODE_FENCE = re.compile(r"```(\w+)?\n(.*?)```", re.DOTALL)
_BULLET = re.compile(r"^[ \t]*[-*+][ \t]+", re.MULTILINE)
_NUMBERED = re.compile(r"^[ \t]*\d+\.[ \t]+", re.MULTILINE)
_BLANK_LINES = re.compile(r"(\n\s*)\n\s*")
_NUMBERED_ITEM = re.compile(r"^\d+\.\s")

# Ordered: earlier entries win where alternatives overlap
KEYWORD_EMOJIS: list[tuple[str, str]] = [
    ("important:|crucial:|key point", "🔑"),
    ("tip:|suggestion:|recommendation", "💡"),
    ("warning:|caution:|attention", "⚠️"),
    ("note:|notice", "📝"),
    ("example:|for example:|e.g.", "📌"),
    ("advantage:|benefit:|pro", "✅"),
    ("disadvantage:|limitation:|con", "❌"),
    ("question:|how to|what is", "❓"),
    ("success:|achievement:|completed", "🎯"),
    ("error:|problem:|issue", "❌"),
    ("info:|information", "ℹ️"),
]


def _keyword_fragment(keyword: str) -> str:
    # \b only makes sense next to a word character
    fragment = re.escape(keyword)
    if re.match(r"\w", keyword[0]):
        fragment = r"\b" + fragment
    if re.match(r"\w", keyword[-1]):
        fragment = fragment + r"\b"
    return fragment


_KEYWORDS = re.compile(
    "|".join(
        f"(?P<k{i}>" + "|".join(_keyword_fragment(k) for k in patterns.split("|")) + ")"
        for i, (patterns, _) in enumerate(KEYWORD_EMOJIS)
    ),
    re.IGNORECASE,
)

# A paragraph may open with annotation glyphs before its first letter
_LEADING_GLYPHS = "".join(sorted({ch for _, emoji in KEYWORD_EMOJIS for ch in emoji} | {"•"}))
_LEADING_LOWER = re.compile(rf"^([{re.escape(_LEADING_GLYPHS)}\s]*)([a-z])")


def _annotate(match: re.Match[str]) -> str:
    emoji = KEYWORD_EMOJIS[int(match.lastgroup[1:])][1]  # type: ignore[index]
    return f"{emoji} {match.group(0)}"


def _indent_code(match: re.Match[str]) -> str:
    return "    " + match.group(2).strip().replace("\n", "\n    ")


def _is_list_item(paragraph: str) -> bool:
    return paragraph.startswith("•") or bool(_NUMBERED_ITEM.match(paragraph))


def format_reply(text: str | None) -> str:
    if not text:
        return PLACEHOLDER

    formatted = text
    for pattern, replacement in _INLINE_RULES:
        formatted = pattern.sub(replacement, formatted)

    formatted = _CODE_FENCE.sub(_indent_code, formatted)

    formatted = _BULLET.sub("• ", formatted)
    formatted = _NUMBERED.sub(lambda m: m.group(0).strip() + " ", formatted)

    formatted = _KEYWORDS.sub(_annotate, formatted)

    formatted = _BLANK_LINES.sub(PARAGRAPH_BREAK, formatted)

    paragraphs = [p.strip() for p in formatted.split(PARAGRAPH_BREAK)]
    paragraphs = [p for p in paragraphs if p]
    if not paragraphs:
        return PLACEHOLDER

    html = []
    for index, paragraph in enumerate(paragraphs):
        paragraph = _LEADING_LOWER.sub(lambda m: m.group(1) + m.group(2).upper(), paragraph, count=1)
        if index > 0 and not _is_list_item(paragraph):
            html.append(f'<p class="{INDENT_CLASS}">{paragraph}</p>')
        else:
            html.append(f"<p>{paragraph}</p>")
    return "".join(html)
