"""
Output file naming.

Generated chunk files and the optional imports manifest get their names from
templates with ``[placeholder]`` tokens:

    [name]     original file name without the ``.css`` extension
    [ext]      the extension, ``css``
    [part]     1-based chunk number
    [file]     the original file name, unchanged
    [suffix]   anything that followed ``.css`` in the original name
    [hash]     md5 hex digest of the chunk content (``[hash:8]`` truncates)

Unknown placeholders are left in place.
"""

import hashlib
import re
from typing import Any, Callable, Dict, Union

from css_split.core.base import NamingContext, OptionsError

DEFAULT_FILENAME = "[name]-[part].[ext][suffix]"
SPLIT_IMPORTS_NAME = "[name]-split.[ext]"

# Callable returned by normalize_imports; False means "no manifest"
ImportsName = Callable[[NamingContext], Union[str, bool]]

_FILE_RE = re.compile(r"^(?P<name>.*)\.(?P<ext>css)(?P<suffix>\..+)?$", re.IGNORECASE)
_PLACEHOLDER_RE = re.compile(r"\[(?P<key>[a-z]+)(?::(?P<length>\d+))?\]")


def file_parts(file: str) -> Dict[str, str]:
    """
    Split an asset name into its ``name``, ``ext`` and ``suffix`` parts.

    Names that do not end in ``.css`` keep their whole text as ``name``.
    """
    match = _FILE_RE.match(file)
    if not match:
        return {"name": file, "ext": "css", "suffix": ""}
    return {
        "name": match.group("name"),
        "ext": match.group("ext"),
        "suffix": match.group("suffix") or "",
    }


def content_hash(content: str) -> str:
    return hashlib.md5(content.encode("utf-8")).hexdigest()


def interpolate(template: str, context: NamingContext) -> str:
    """
    Resolve a filename template against a chunk.

    Args:
        template: Template such as ``[name]-[part].[ext]``
        context: Original file, chunk index and chunk content

    Returns:
        Concrete file name
    """
    values: Dict[str, Any] = dict(file_parts(context.file))
    values["part"] = str(context.part)
    values["file"] = context.file

    def replace(match: "re.Match") -> str:
        key = match.group("key")
        if key == "hash":
            digest = content_hash(context.content)
            length = match.group("length")
            return digest[:int(length)] if length else digest
        if key in values and match.group("length") is None:
            return values[key]
        return match.group(0)

    return _PLACEHOLDER_RE.sub(replace, template)


def names_each_chunk(template: str) -> bool:
    """Whether a filename template gives every chunk of a file its own name."""
    return any(
        match.group("key") == "hash"
        or (match.group("key") == "part" and match.group("length") is None)
        for match in _PLACEHOLDER_RE.finditer(template)
    )

def normalize_imports(imports: Any, preserve: bool = False) -> ImportsName:
    """
    Turn the ``imports`` option into a function naming the manifest.

    Args:
        imports: False/None (no manifest), True (default name) or a template
        preserve: Whether the original asset is kept next to the chunks

    Returns:
        Function of the original file's NamingContext returning the manifest
        name, or False when no manifest should be written

    Raises:
        OptionsError: If ``imports`` has any other type
    """
    if imports is None or imports is False:
        return lambda context: False
    if imports is True:
        if preserve:
            return lambda context: interpolate(SPLIT_IMPORTS_NAME, context)
        return lambda context: context.file
    if isinstance(imports, str):
        if not imports:
            return lambda context: False
        return lambda context: interpolate(imports, context)
    raise OptionsError(
        f"imports must be a boolean or a string, got {type(imports).__name__}"
    )
