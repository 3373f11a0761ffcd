"""Pretty-printing of JSON and XML files into a sibling ``*_formatted`` copy."""

from __future__ import annotations

import json
import os
import re
from pathlib import Path
from typing import Iterator, Union

_FORMATTED_EXTENSIONS = {"json", "xml"}
_XML_INDENT = "    "
_XML_WHITESPACE = " \t\r\n"
_TAG_BODY = re.compile(r"""(?:[^>"']|"[^"]*"|'[^']*')*>""")
_ANGLE = re.compile(r"[<>]")
_NAME_SPLIT = re.compile(r"[ \t\r\n]")


class FormatError(Exception):
    """Raised when a file cannot be read, parsed or written during formatting."""


def _extension(file_path: Union[str, os.PathLike]) -> str:
    return Path(file_path).suffix[1:]


def needs_formatting(file_path: Union[str, os.PathLike]) -> bool:
    """Return True if the file's extension is ``json`` or ``xml``."""
    return _extension(file_path) in _FORMATTED_EXTENSIONS


def formatted_path(original_path: Union[str, os.PathLike]) -> Path:
    """Return the path of the formatted copy: ``<stem>_formatted.<ext>`` beside the original."""
    path = Path(original_path)
    if not path.stem:
        raise FormatError("Cannot determine file stem")
    return path.parent / f"{path.stem}_formatted.{_extension(path)}"


def _reject_constant(name: str) -> None:
    raise ValueError(f"invalid number {name}")


def format_json(content: str) -> str:
    """Return ``content`` re-indented with two spaces and keys sorted."""
    try:
        value = json.loads(content, parse_constant=_reject_constant)
    except ValueError as exc:
        raise FormatError(f"Failed to parse JSON: {exc}") from exc
    return json.dumps(value, indent=2, sort_keys=True, ensure_ascii=False)


def _xml_events(content: str) -> Iterator[tuple[str, str]]:
    """Yield ``(kind, raw_content)`` events from an XML document, checking end tags."""
    open_names: list[str] = []
    pos = 0
    length = len(content)
    while pos < length:
        if content[pos] != "<":
            end = content.find("<", pos)
            if end == -1:
                end = length
            text = content[pos:end].strip(_XML_WHITESPACE)
            if text:
                yield "text", text
            pos = end
        elif content.startswith("<!--", pos):
            end = content.find("-->", pos + 4)
            if end == -1:
                raise FormatError("XML parsing error: unclosed comment")
            yield "comment", content[pos + 4 : end]
            pos = end + 3
        elif content.startswith("<![CDATA[", pos):
            end = content.find("]]>", pos + 9)
            if end == -1:
                raise FormatError("XML parsing error: unclosed CDATA section")
            yield "cdata", content[pos + 9 : end]
            pos = end + 3
        elif content.startswith("<!", pos):
            if content[pos + 2 : pos + 9].upper() != "DOCTYPE":
                raise FormatError("XML parsing error: unrecognised markup declaration")
            depth = 1
            end = -1
            for match in _ANGLE.finditer(content, pos + 2):
                depth += 1 if match.group() == "<" else -1
                if depth == 0:
                    end = match.start()
                    break
            if end == -1:
                raise FormatError("XML parsing error: unclosed DOCTYPE")
            yield "doctype", content[pos + 9 : end].lstrip(_XML_WHITESPACE)
            pos = end + 1
        elif content.startswith("<?", pos):
            end = content.find("?>", pos + 2)
            if end == -1:
                raise FormatError("XML parsing error: unclosed processing instruction")
            yield "pi", content[pos + 2 : end]
            pos = end + 2
        elif content.startswith("</", pos):
            end = content.find(">", pos + 2)
            if end == -1:
                raise FormatError("XML parsing error: unclosed end tag")
            name = content[pos + 2 : end].rstrip(_XML_WHITESPACE)
            expected = open_names.pop() if open_names else ""
            if name != expected:
                raise FormatError(
                    f"XML parsing error: expecting </{expected}> but found </{name}>"
                )
            yield "end", name
            pos = end + 1
        else:
            match = _TAG_BODY.match(content, pos + 1)
            if match is None:
                raise FormatError("XML parsing error: unclosed tag")
            inner = content[pos + 1 : match.end() - 1]
            if inner.endswith("/"):
                yield "empty", inner[:-1]
            else:
                open_names.append(_NAME_SPLIT.split(inner, 1)[0])
                yield "start", inner
            pos = match.end()


def format_xml(content: str) -> str:
    """Return ``content`` with elements re-indented by four spaces per level."""
    out: list[str] = []
    depth = 0
    line_break = False

    def wrapped(markup: str) -> None:
        if line_break:
            out.append("\n" + _XML_INDENT * depth)
        out.append(markup)

    for kind, value in _xml_events(content):
        next_line_break = True
        if kind == "start":
            wrapped(f"<{value}>")
            depth += 1
        elif kind == "end":
            depth = max(depth - 1, 0)
            wrapped(f"</{value}>")
        elif kind == "empty":
            wrapped(f"<{value}/>")
        elif kind == "text":
            out.append(value)
            next_line_break = False
        elif kind == "cdata":
            out.append(f"<![CDATA[{value}]]>")
            next_line_break = False
        elif kind == "comment":
            wrapped(f"<!--{value}-->")
        elif kind == "pi":
            wrapped(f"<?{value}?>")
        elif kind == "doctype":
            wrapped(f"<!DOCTYPE {value}>")
        line_break = next_line_break

    return "".join(out)


def format_if_needed(file_path: str) -> str:
    """Write a formatted copy of a JSON or XML file and return the path to open."""
    if not needs_formatting(file_path):
        return file_path

    target = formatted_path(file_path)
    try:
        content = Path(file_path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise FormatError(f"Failed to read file: {file_path}") from exc

    if _extension(file_path) == "json":
        formatted = format_json(content)
    else:
        formatted = format_xml(content)

    try:
        target.write_text(formatted, encoding="utf-8")
    except OSError as exc:
        raise FormatError(f"Failed to write formatted file: {target}") from exc
    return str(target)