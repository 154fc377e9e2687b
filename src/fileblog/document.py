"""Post file parser: YAML front matter + body.

File layout::

    ---
    title: Hello
    tags: [intro]
    ---
    Body text...

The metadata block starts three characters after the first ``---`` and ends
at the next ``---``. Fewer than two delimiters, an empty block, or a block
that is not a YAML mapping is a ParseError.

Usage:
    doc = parse_document(Path("posts/hello.md"), extension=".md")
    if doc is not None:
        print(doc.url, doc["title"])
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator

import yaml

from fileblog.errors import ParseError, ReadError

DELIMITER = "---"

# Reserved keys added to every document on top of its metadata.
BODY_KEY = "body"
URL_KEY = "url"


class _FrontMatterLoader(yaml.SafeLoader):
    """SafeLoader that keeps timestamps as plain strings.

    Dates stay JSON-serializable, so a cached index compares equal to a
    scanned one, and ISO dates still sort correctly as strings.
    """


_FrontMatterLoader.yaml_implicit_resolvers = {
    first: [
        (tag, regexp)
        for tag, regexp in resolvers
        if tag != "tag:yaml.org,2002:timestamp"
    ]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


@dataclass
class Document:
    """A parsed post: free-form metadata plus ``body`` and ``url``.

    Metadata values are whatever YAML produced (str, int, float, bool,
    list, dict or None). ``body`` and ``url`` are readable through the same
    mapping interface as the metadata fields.
    """

    url: str
    body: str = ""
    meta: dict[str, Any] = field(default_factory=dict)

    def __getitem__(self, key: str) -> Any:
        if key == BODY_KEY:
            return self.body
        if key == URL_KEY:
            return self.url
        return self.meta[key]

    def __contains__(self, key: object) -> bool:
        return key in (BODY_KEY, URL_KEY) or key in self.meta

    def __iter__(self) -> Iterator[str]:
        yield from self.meta
        yield BODY_KEY
        yield URL_KEY

    def get(self, key: str, default: Any = None) -> Any:
        try:
            return self[key]
        except KeyError:
            return default

    def to_dict(self) -> dict[str, Any]:
        """Return metadata with ``body`` and ``url`` as regular keys."""
        data = dict(self.meta)
        data[BODY_KEY] = self.body
        data[URL_KEY] = self.url
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Document:
        """Inverse of ``to_dict()``. Raises KeyError if ``url`` is missing."""
        meta = dict(data)
        url = meta.pop(URL_KEY)
        body = meta.pop(BODY_KEY, "")
        return cls(url=str(url), body=str(body), meta=meta)


def split_front_matter(content: str) -> tuple[str, str]:
    """Split *content* into ``(metadata_block, body)``.

    Raises:
        ParseError: if ``---`` occurs fewer than two times.
    """
    first = content.find(DELIMITER)
    if first == -1:
        raise ParseError("No '---' metadata delimiter found.")

    start = first + len(DELIMITER)
    end = content.find(DELIMITER, start)
    if end == -1:
        raise ParseError("Metadata block is not closed (missing second '---').")

    return content[start:end], content[end + len(DELIMITER):]


def parse_metadata(block: str) -> dict[str, Any]:
    """Deserialize a metadata block into a mapping.

    Raises:
        ParseError: on invalid YAML, an empty block, or a non-mapping result.
    """
    try:
        data = yaml.load(block, Loader=_FrontMatterLoader)  # noqa: S506
    except yaml.YAMLError as exc:
        raise ParseError(f"Invalid YAML in metadata block: {exc}") from exc

    if data is None:
        raise ParseError("Metadata block is empty.")
    if not isinstance(data, dict):
        raise ParseError(
            f"Metadata block must be a mapping, got {type(data).__name__}."
        )
    return _str_keys(data)


def _str_keys(value: Any) -> Any:
    """Stringify mapping keys at every depth, as JSON will on a cache write."""
    if isinstance(value, dict):
        return {str(k): _str_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_str_keys(v) for v in value]
    return value


def slug_for(filename: str, extension: str) -> str:
    """Return *filename* with a trailing *extension* removed."""
    if extension and filename.endswith(extension):
        return filename[: -len(extension)]
    return filename


def parse_document(
    path: Path,
    extension: str,
    published_key: str = "published",
) -> Document | None:
    """Parse the post file at *path*.

    Returns:
        The Document, or None if the published field is present and falsy.

    Raises:
        ReadError: if the file cannot be read.
        ParseError: if the metadata block is missing or invalid. The message
            names the file.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ReadError(f"Cannot read post '{path}': {exc}") from exc

    try:
        block, body = split_front_matter(content)
        meta = parse_metadata(block)
    except ParseError as exc:
        raise ParseError(f"{path.name}: {exc}") from exc

    if published_key in meta and not meta[published_key]:
        return None

    # Derived fields win over same-named metadata keys.
    meta.pop(BODY_KEY, None)
    meta.pop(URL_KEY, None)

    return Document(url=slug_for(path.name, extension), body=body, meta=meta)
