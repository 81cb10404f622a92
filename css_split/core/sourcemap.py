"""
Source map (revision 3) codec.

Provides base64 VLQ encoding, decoding of existing maps into per-line segment
lists, a generator for new maps and lookup of original positions so that a
chunk's map can be composed through the map of the stylesheet it came from.

Lines and columns are 0-based throughout this module.
"""

import json
from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from css_split.core.base import SourceMapError

BASE64_CHARS = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
BASE64_VALUES = {char: index for index, char in enumerate(BASE64_CHARS)}

VLQ_SHIFT = 5
VLQ_CONTINUATION = 1 << VLQ_SHIFT
VLQ_MASK = VLQ_CONTINUATION - 1


def encode_vlq(value: int) -> str:
    """Encode a signed integer as a base64 VLQ string."""
    vlq = (-value << 1) | 1 if value < 0 else value << 1
    encoded = ""
    while True:
        digit = vlq & VLQ_MASK
        vlq >>= VLQ_SHIFT
        if vlq:
            digit |= VLQ_CONTINUATION
        encoded += BASE64_CHARS[digit]
        if not vlq:
            return encoded


def decode_vlq(segment: str) -> List[int]:
    """Decode a base64 VLQ string into the integers it holds."""
    values = []
    shift = 0
    value = 0
    for char in segment:
        try:
            digit = BASE64_VALUES[char]
        except KeyError:
            raise SourceMapError(f"Invalid base64 VLQ character: {char!r}") from None
        value += (digit & VLQ_MASK) << shift
        if digit & VLQ_CONTINUATION:
            shift += VLQ_SHIFT
            continue
        values.append(-(value >> 1) if value & 1 else value >> 1)
        shift = 0
        value = 0
    if shift:
        raise SourceMapError(f"Truncated base64 VLQ segment: {segment!r}")
    return values


@dataclass(frozen=True)
class Mapping:
    """One decoded segment of a source map."""

    generated_line: int
    generated_column: int
    source: Optional[str] = None
    original_line: Optional[int] = None
    original_column: Optional[int] = None
    name: Optional[str] = None


@dataclass
class SourceMap:
    """A decoded revision 3 source map."""

    file: Optional[str] = None
    sources: List[str] = field(default_factory=list)
    names: List[str] = field(default_factory=list)
    lines: List[List[Mapping]] = field(default_factory=list)
    sources_content: Optional[List[Optional[str]]] = None
    source_root: Optional[str] = None
    version: int = 3

    @classmethod
    def from_json(cls, data: Union[str, bytes, Dict[str, Any]]) -> "SourceMap":
        """Decode a map from its JSON text or an already loaded dict."""
        if isinstance(data, (str, bytes)):
            try:
                data = json.loads(data)
            except ValueError as e:
                raise SourceMapError(f"Source map is not valid JSON: {e}") from e
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SourceMap":
        """Decode a map from a dict with a ``mappings`` string."""
        if not isinstance(data, dict):
            raise SourceMapError(f"Source map must be an object, got {type(data).__name__}")
        if data.get("version", 3) != 3:
            raise SourceMapError(f"Unsupported source map version: {data.get('version')}")
        if "sections" in data:
            raise SourceMapError("Indexed source maps are not supported")

        source_root = data.get("sourceRoot") or None
        sources = [
            _join_root(source_root, source) if source is not None else ""
            for source in data.get("sources", [])
        ]
        names = list(data.get("names", []))
        lines = _decode_mappings(data.get("mappings", ""), sources, names)
        return cls(
            file=data.get("file"),
            sources=sources,
            names=names,
            lines=lines,
            sources_content=data.get("sourcesContent"),
            source_root=source_root,
        )

    def original_position_for(self, line: int, column: int) -> Optional[Mapping]:
        """
        Find the mapping covering a generated position.

        Returns the segment on ``line`` with the greatest generated column not
        after ``column``, or None when the position is unmapped.
        """
        if line < 0 or line >= len(self.lines):
            return None
        segments = self.lines[line]
        columns = [segment.generated_column for segment in segments]
        index = bisect_right(columns, column) - 1
        if index < 0:
            return None
        segment = segments[index]
        if segment.source is None:
            return None
        return segment

    def content_for(self, source: str) -> Optional[str]:
        """Return the embedded content of a source, when the map has it."""
        if not self.sources_content or source not in self.sources:
            return None
        index = self.sources.index(source)
        if index >= len(self.sources_content):
            return None
        return self.sources_content[index]

    def to_dict(self) -> Dict[str, Any]:
        """Encode the map back into its JSON-compatible dict form."""
        generator = SourceMapGenerator()
        for segments in self.lines:
            for segment in segments:
                generator.add(segment)
        for source in self.sources:
            content = self.content_for(source)
            if content is not None:
                generator.set_source_content(source, content)
        return generator.to_dict(self.file)

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


class SourceMapGenerator:
    """Accumulates mappings and encodes them into a revision 3 map."""

    def __init__(self):
        self._mappings: List[Mapping] = []
        self._sources: List[str] = []
        self._names: List[str] = []
        self._contents: Dict[str, str] = {}

    def add_mapping(
        self,
        generated_line: int,
        generated_column: int,
        source: Optional[str] = None,
        original_line: Optional[int] = None,
        original_column: Optional[int] = None,
        name: Optional[str] = None
    ) -> None:
        """Record that a generated position comes from an original one."""
        self.add(Mapping(
            generated_line, generated_column,
            source, original_line, original_column, name
        ))

    def add(self, mapping: Mapping) -> None:
        if mapping.source is not None and mapping.source not in self._sources:
            self._sources.append(mapping.source)
        if mapping.name is not None and mapping.name not in self._names:
            self._names.append(mapping.name)
        self._mappings.append(mapping)

    def set_source_content(self, source: str, content: str) -> None:
        if source not in self._sources:
            self._sources.append(source)
        self._contents[source] = content

    @property
    def sources(self) -> List[str]:
        return list(self._sources)

    def __len__(self) -> int:
        return len(self._mappings)

    def to_dict(self, file: Optional[str] = None) -> Dict[str, Any]:
        """Encode the accumulated mappings."""
        result: Dict[str, Any] = {
            "version": 3,
            "sources": list(self._sources),
            "names": list(self._names),
            "mappings": self._encode_mappings(),
        }
        if file is not None:
            result["file"] = file
        if self._contents:
            result["sourcesContent"] = [self._contents.get(s) for s in self._sources]
        return result

    def _encode_mappings(self) -> str:
        ordered = sorted(
            self._mappings,
            key=lambda m: (m.generated_line, m.generated_column)
        )
        source_index = {source: i for i, source in enumerate(self._sources)}
        name_index = {name: i for i, name in enumerate(self._names)}

        lines: List[str] = []
        previous = {"source": 0, "line": 0, "column": 0, "name": 0}
        current_line = 0
        segments: List[str] = []
        previous_generated_column = 0

        for mapping in ordered:
            while current_line < mapping.generated_line:
                lines.append(",".join(segments))
                segments = []
                previous_generated_column = 0
                current_line += 1

            encoded = encode_vlq(mapping.generated_column - previous_generated_column)
            previous_generated_column = mapping.generated_column
            if mapping.source is not None:
                index = source_index[mapping.source]
                encoded += encode_vlq(index - previous["source"])
                encoded += encode_vlq(mapping.original_line - previous["line"])
                encoded += encode_vlq(mapping.original_column - previous["column"])
                previous.update(
                    source=index,
                    line=mapping.original_line,
                    column=mapping.original_column,
                )
                if mapping.name is not None:
                    index = name_index[mapping.name]
                    encoded += encode_vlq(index - previous["name"])
                    previous["name"] = index
            segments.append(encoded)

        lines.append(",".join(segments))
        return ";".join(lines)


def _join_root(source_root: Optional[str], source: str) -> str:
    if not source_root:
        return source
    if source_root.endswith("/"):
        return source_root + source
    return source_root + "/" + source


def _decode_mappings(mappings: str, sources: List[str], names: List[str]) -> List[List[Mapping]]:
    lines: List[List[Mapping]] = []
    source = original_line = original_column = name = 0

    for line_number, line in enumerate(mappings.split(";")):
        generated_column = 0
        segments: List[Mapping] = []
        for raw in line.split(","):
            if not raw:
                continue
            values = decode_vlq(raw)
            if len(values) not in (1, 4, 5):
                raise SourceMapError(f"Invalid mapping segment {raw!r} on line {line_number}")
            generated_column += values[0]
            if len(values) == 1:
                segments.append(Mapping(line_number, generated_column))
                continue
            source += values[1]
            original_line += values[2]
            original_column += values[3]
            if not 0 <= source < len(sources):
                raise SourceMapError(f"Mapping refers to unknown source index {source}")
            mapped_name = None
            if len(values) == 5:
                name += values[4]
                if not 0 <= name < len(names):
                    raise SourceMapError(f"Mapping refers to unknown name index {name}")
                mapped_name = names[name]
            segments.append(Mapping(
                line_number, generated_column,
                sources[source], original_line, original_column, mapped_name
            ))
        segments.sort(key=lambda m: m.generated_column)
        lines.append(segments)
    return lines


def compose(mapping: Mapping, through: SourceMap) -> Optional[Mapping]:
    """
    Trace a mapping back through another map.

    ``mapping`` points into the text that ``through`` was generated for; the
    result points at ``through``'s original sources, keeping the generated
    position of ``mapping``.
    """
    if mapping.original_line is None:
        return None
    original = through.original_position_for(mapping.original_line, mapping.original_column)
    if original is None:
        return None
    return Mapping(
        mapping.generated_line,
        mapping.generated_column,
        original.source,
        original.original_line,
        original.original_column,
        original.name or mapping.name,
    )


def load_map(data: Union[None, str, bytes, Dict[str, Any], SourceMap]) -> Optional[SourceMap]:
    """Coerce whatever a host asset hands over into a SourceMap."""
    if data is None or isinstance(data, SourceMap):
        return data
    return SourceMap.from_json(data)


