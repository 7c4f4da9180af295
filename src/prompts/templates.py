# src/prompts/templates.py — v1
"""Prompt template texts.

Every template ends with OUTPUT_CONTRACT: the response normalizer relies on
the model returning bare completion text.
"""

from __future__ import annotations

SYSTEM_PROMPT = (
    "You are a code completion assistant like GitHub Copilot. Provide direct, "
    "contextually relevant code completions. Focus on completing the current line "
    "or block while maintaining proper indentation. Never include explanations or "
    "comments. Respond only with the code completion itself."
)

OUTPUT_CONTRACT = (
    "Respond with the completion only: no explanations, no comments about the code, "
    "and do not repeat existing declarations."
)

# --- File categories ---

MARKDOWN = """Complete this {element} in Markdown.
Suggest appropriate content that follows Markdown formatting rules."""

HTML_TAG = """Complete this HTML tag.
Suggest appropriate attributes for this tag."""

HTML_ATTRIBUTE = """Complete this HTML attribute value.
Suggest an appropriate value for this attribute."""

HTML_CONTENT = """Complete this HTML content.
Suggest appropriate tags or content."""

CSS_PROPERTY = """Complete this CSS property value.
Property: {property}
Suggest an appropriate value for this CSS property."""

CSS_SELECTOR = """Complete this CSS selector.
Suggest an appropriate selector based on the context."""

CSS_RULE = """Complete this CSS rule.
Suggest appropriate properties and values."""

JSON = """Complete this {schema} content.
Suggest valid JSON that follows the {schema} schema.
Ensure proper formatting with correct commas and quotes."""

SQL = """Complete this {statement} statement.
Suggest appropriate SQL syntax for this {statement} operation.
Use proper SQL formatting with correct clauses and conditions."""

# --- Code headers ---

COMMENT_TO_CODE = """Generate code based on this comment in {language}:
"{comment}"
Implement a solution that addresses the comment's requirements.
Provide only the implementation code."""

IMPORT = """Complete this import statement in {language}.
Consider these identifiers that may need importing: {identifiers}
Suggest appropriate module paths based on the context."""

FUNCTION = """Complete this function declaration in {language}.
Function name: {name}
Purpose: {purpose}
Suggest appropriate parameters, return type, and function body."""

CLASS = """Complete this class declaration in {language}.
Class name: {name}
Suggest appropriate properties, methods, and constructor.
Follow standard patterns for {language} classes."""

CONTROL_STRUCTURE = """Complete this {structure} structure in {language}.
Suggest an appropriate body for this control structure.
Follow common {language} conventions for {structure} blocks."""

# --- Log calls and strings ---

LOG_MESSAGE = """Complete the string inside this logging call.
Provide a meaningful message based on the context.
Do not add closing quotes or parentheses."""

LOG_ARGUMENTS = """Complete the arguments of this logging call with appropriate values.
Consider logging these variables that appear to be in scope: {variables}
You can suggest string messages, variables, or expressions.
Do not add closing parentheses."""

STRING_LITERAL = """{purpose}
Do not include quotes in your response."""

STRING_PURPOSES: dict[str, str] = {
    "error": "Complete this error message with a descriptive error explanation.",
    "message": "Complete this message with appropriate text for user communication.",
    "url": "Complete this URL with a valid path structure.",
    "name": "Complete this name string with a realistic person name.",
    "email": "Complete this email with a valid email address format.",
    "phone": "Complete this phone number with a valid format.",
    "address": "Complete this address with a realistic street address.",
    "description": "Complete this description with appropriate descriptive text.",
    "title": "Complete this title with a concise and meaningful title.",
    "identifier": "Complete this ID with an appropriate identifier format.",
}

STRING_FOR_VARIABLE = "Complete this string with appropriate content for a variable named '{name}'."
STRING_GENERAL = "Complete this string with appropriate content based on the context."

# --- Object literals ---

OBJECT_PROPERTY = """Complete only the properties inside the object literal for '{name}'.
Do not repeat the variable declaration or object braces.
Do not suggest these existing properties: {existing}.
Use this exact indentation: "{indent}" for each property.
Start each property on a new line.
Include the property name, its value, and a trailing comma.
Consider the variable name and context when suggesting properties.
Provide only one property at a time.
Suggested properties you can use (choose one): {candidates}"""

USER_PROPERTIES = (
    "id", "name", "email", "username", "firstName", "lastName", "age",
    "address", "phone", "created", "updated", "isActive",
)
CONFIG_PROPERTIES = (
    "enabled", "value", "type", "description", "default", "options",
    "version", "path", "timeout",
)
TIME_PROPERTIES = ("created", "updated", "timestamp", "date", "time", "timezone", "duration")
GENERIC_PROPERTIES = ("id", "name", "type", "value", "description", "status", "enabled")

# --- Fallback ---

GENERIC = """Complete the following {language} code. {language_hint} {framework_hint}
Maintain the current indentation level ({indent_width} spaces).
Provide only the completion."""
