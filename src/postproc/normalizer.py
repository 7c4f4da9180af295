# src/postproc/normalizer.py — v1
"""Response normalizer: turn raw model text into one usable completion fragment.

Cleaning is conditional on the context the request was generated for. An empty
return value means "no usable completion"; it is never an error.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable

from ollamacopilot.context.scanner import QUOTE_CHARS, open_quote, strip_line_comment
from ollamacopilot.core.models import ClassificationResult, FileCategory

logger = logging.getLogger(__name__)

_REASONING_BLOCK = re.compile(
    r"<(think|thinking|reasoning|thought)>[\s\S]*?</\1>", re.IGNORECASE
)
_REASONING_TAIL = re.compile(r"^[\s\S]*?</(?:think|thinking|reasoning|thought)>", re.IGNORECASE)
_UNCLOSED_REASONING = re.compile(r"<(?:think|thinking|reasoning|thought)>[\s\S]*$", re.IGNORECASE)
_WRAPPER_TAG = re.compile(
    r"</?(?:think|thinking|reasoning|thought|answer|code|completion|output|response|cursor)\b[^>]*>",
    re.IGNORECASE,
)
_CODE_FENCE = re.compile(r"```[\w+#.-]*[ \t]*\n?([\s\S]*?)(?:```|$)")

_LOG_MESSAGE_FILLER = re.compile(r"^.*?suggested message\s*:?\s*", re.IGNORECASE)
_LOG_ARGUMENT_FILLER = re.compile(r"^.*?suggested argument\s*:?\s*", re.IGNORECASE)
_STRING_FILLERS = (
    re.compile(r"^.*?suggested (?:completion|string|message)\s*:\s*", re.IGNORECASE),
    re.compile(r"^.*?\bexample\s*:\s*", re.IGNORECASE),
    re.compile(r"^.*?here'?s an?\b\s*:?\s*", re.IGNORECASE),
    re.compile(r"^.*?you could use\b\s*:?\s*", re.IGNORECASE),
)
_CODE_FILLER = re.compile(r"^.*?suggested code\s*:\s*", re.IGNORECASE)

_DECLARATION_OPEN = re.compile(r"(?:const|let|var)\s+\w+\s*(?::\s*[\w<>\[\]]+\s*)?=\s*\{")
_ASSIGNMENT_OPEN = re.compile(r"[\w.]+\s*=\s*\{")
_DECLARATION = re.compile(r"(?:const|let|var)\s+\w+\s*=")
_QUOTED_KEY = re.compile(r"[\"']([\w$]+)[\"']\s*:")
_PROPERTY_LINE = re.compile(r"^([A-Za-z_$][\w$]*(?:\s+[A-Za-z_$][\w$]*)*)\s*:\s*(.*?)\s*$")


def strip_reasoning(text: str) -> str:
    """Remove reasoning blocks and stray wrapper tags."""
    text = _REASONING_BLOCK.sub("", text)
    text = _REASONING_TAIL.sub("", text)
    text = _UNCLOSED_REASONING.sub("", text)
    return _WRAPPER_TAG.sub("", text)


def extract_code_fence(text: str) -> str:
    """Body of the first Markdown code fence, or the text unchanged."""
    if "```" not in text:
        return text
    match = _CODE_FENCE.search(text)
    return match.group(1) if match else text


def strip_wrapping_quotes(text: str) -> str:
    text = text.strip()
    if text[:1] in QUOTE_CHARS:
        text = text[1:]
    if text[-1:] in QUOTE_CHARS:
        text = text[:-1]
    return text


def _strip_fillers(text: str, fillers: Iterable[re.Pattern[str]]) -> str:
    for filler in fillers:
        text = filler.sub("", text, count=1)
    return text


def clean_log_message(text: str) -> str:
    text = strip_wrapping_quotes(text)
    text = _LOG_MESSAGE_FILLER.sub("", text, count=1)
    return strip_wrapping_quotes(text).strip()


def clean_log_arguments(text: str) -> str:
    text = _LOG_ARGUMENT_FILLER.sub("", text.strip(), count=1).strip()
    text = text.rstrip(";").rstrip()
    if text.startswith("(") and text.endswith(")"):
        text = text[1:-1].strip()
    while text.endswith(")") and text.count(")") > text.count("("):
        text = text[:-1].rstrip()
    quote = open_quote(text)
    if quote is not None and text.startswith(quote):
        text += quote
    return text.strip()


def clean_string_literal(text: str, line_prefix: str) -> str:
    text = strip_wrapping_quotes(text)
    text = _strip_fillers(text, _STRING_FILLERS)
    text = strip_wrapping_quotes(text)
    if line_prefix[-1:] in QUOTE_CHARS and text[-1:] in QUOTE_CHARS:
        text = text[:-1]
    return text.strip()


def clean_object_property(text: str, existing_properties: Iterable[str] = ()) -> str:
    """Reduce model output to a single new ``name: value,`` property line."""
    existing = set(existing_properties)
    text = _DECLARATION_OPEN.sub("", text)
    text = _ASSIGNMENT_OPEN.sub("", text)
    text = re.sub(r"^\s*\{\s*", "", text)
    text = re.sub(r"\s*\}\s*;?\s*$", "", text)

    text = re.sub(r"\"\s*:\s*\"", "\": \"", text)
    text = re.sub(r"\{\s+\}", "{}", text)
    text = re.sub(r"\(\s+\)", "()", text)
    text = re.sub(r"\[\s+\]", "[]", text)

    for raw_line in text.split("\n"):
        line = strip_line_comment(raw_line).strip()
        if not line or line.startswith(("/", "{", "}")):
            continue
        if _DECLARATION.search(line) or _ASSIGNMENT_OPEN.search(line):
            continue
        line = _QUOTED_KEY.sub(lambda m: f"{m.group(1)}:", line)
        match = _PROPERTY_LINE.match(line)
        if match is None:
            continue
        # "email email: x" collapses to its first token.
        name = match.group(1).split()[0]
        value = match.group(2).rstrip(",").rstrip()
        if not value or value.endswith(("{", "[", "(")) or name in existing:
            continue
        return f"{name}: {value},"
    return ""


def clean_code(text: str) -> str:
    return _CODE_FILLER.sub("", text, count=1).strip()


def clean_response(
    raw: str,
    classification: ClassificationResult,
    line_prefix: str,
    existing_properties: Iterable[str] = (),
) -> str:
    """Clean raw model output for the context it was generated in."""
    if not raw.strip():
        return ""

    text = strip_reasoning(raw)
    if classification.file_category is not FileCategory.MARKUP:
        text = extract_code_fence(text)

    if classification.in_log_call:
        if classification.in_string_literal:
            cleaned = clean_log_message(text)
        else:
            cleaned = clean_log_arguments(text)
    elif classification.in_string_literal:
        cleaned = clean_string_literal(text, line_prefix)
    elif classification.in_object_literal:
        cleaned = clean_object_property(text, existing_properties)
    else:
        cleaned = clean_code(text)

    if not cleaned.strip():
        logger.debug("No usable completion after cleaning")
        return ""
    return cleaned
