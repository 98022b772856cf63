"""Tokenizer and parser for PDF object syntax.

Parses the dictionaries and arrays found in QDF object bodies. Dictionaries
remember where each entry came from in the source text, so callers can copy
untouched entries verbatim or replace a single value in place without
re-serializing the whole object.
"""

from dataclasses import dataclass, field
from typing import Any, NamedTuple

WHITESPACE = b"\x00\t\n\x0c\r ".decode("latin-1")
DELIMITERS = "()<>[]{}/%"


class PdfSyntaxError(ValueError):
    """Raised when object text cannot be tokenized or parsed."""

    def __init__(self, message: str, position: int):
        self.position = position
        super().__init__(f"{message} at offset {position}")


class Name(str):
    """A PDF name, stored without the leading slash."""

    def __repr__(self) -> str:
        return f"Name({str(self)!r})"


class Reference(NamedTuple):
    """An indirect reference "obj_id generation R"."""

    obj_id: int
    generation: int = 0


@dataclass(frozen=True)
class PdfString:
    """A literal or hex string, kept as written."""

    raw: str


@dataclass(frozen=True)
class Keyword:
    """A bare keyword such as obj, endobj or stream."""

    value: str


@dataclass(frozen=True)
class Token:
    kind: str
    value: Any
    start: int
    end: int


@dataclass(frozen=True)
class EntrySpan:
    """Source offsets of one dictionary entry.

    Attributes:
        key_start: Offset of the key's slash
        value_start: Offset of the first character of the value
        value_end: Offset just past the value
    """

    key_start: int
    value_start: int
    value_end: int


@dataclass
class PdfDict:
    """An ordered PDF dictionary with source spans.

    Attributes:
        entries: Parsed values by key, in source order
        spans: Source offsets of each entry
        start: Offset of the opening "<<"
        end: Offset just past the closing ">>"
    """

    entries: dict[Name, Any] = field(default_factory=dict)
    spans: dict[Name, EntrySpan] = field(default_factory=dict)
    start: int = 0
    end: int = 0

    def __contains__(self, key: str) -> bool:
        return key in self.entries

    def __getitem__(self, key: str) -> Any:
        return self.entries[Name(key)]

    def get(self, key: str, default: Any = None) -> Any:
        return self.entries.get(Name(key), default)

    def keys(self):
        return self.entries.keys()


class Lexer:
    """Split PDF object text into tokens.

    Token kinds: "dict_open", "dict_close", "array_open", "array_close",
    "name", "number", "string", "keyword".
    """

    def __init__(self, text: str, position: int = 0):
        self.text = text
        self.position = position

    def _skip_whitespace_and_comments(self) -> None:
        text = self.text
        while self.position < len(text):
            char = text[self.position]
            if char in WHITESPACE:
                self.position += 1
            elif char == "%":
                while self.position < len(text) and text[self.position] not in "\r\n":
                    self.position += 1
            else:
                break

    def peek(self) -> Token | None:
        saved = self.position
        try:
            return self.next_token()
        finally:
            self.position = saved

    def next_token(self) -> Token | None:
        self._skip_whitespace_and_comments()
        text = self.text
        start = self.position
        if start >= len(text):
            return None

        char = text[start]
        if text.startswith("<<", start):
            self.position = start + 2
            return Token("dict_open", "<<", start, self.position)
        if text.startswith(">>", start):
            self.position = start + 2
            return Token("dict_close", ">>", start, self.position)
        if char == "[":
            self.position = start + 1
            return Token("array_open", "[", start, self.position)
        if char == "]":
            self.position = start + 1
            return Token("array_close", "]", start, self.position)
        if char == "/":
            return self._read_name(start)
        if char == "(":
            return self._read_literal_string(start)
        if char == "<":
            return self._read_hex_string(start)
        if char in "+-.0123456789":
            return self._read_number(start)
        if char in DELIMITERS:
            raise PdfSyntaxError(f"unexpected delimiter {char!r}", start)
        return self._read_keyword(start)

    def _read_regular(self, start: int) -> int:
        end = start
        text = self.text
        while end < len(text) and text[end] not in WHITESPACE and text[end] not in DELIMITERS:
            end += 1
        return end

    def _read_name(self, start: int) -> Token:
        end = self._read_regular(start + 1)
        raw = self.text[start + 1:end]
        # #xx escapes
        name = ""
        i = 0
        while i < len(raw):
            if raw[i] == "#" and len(raw[i + 1:i + 3]) == 2:
                try:
                    name += chr(int(raw[i + 1:i + 3], 16))
                    i += 3
                    continue
                except ValueError:
                    pass
            name += raw[i]
            i += 1
        self.position = end
        return Token("name", Name(name), start, end)

    def _read_number(self, start: int) -> Token:
        end = self._read_regular(start)
        raw = self.text[start:end]
        self.position = end
        try:
            if "." in raw:
                return Token("number", float(raw), start, end)
            return Token("number", int(raw), start, end)
        except ValueError:
            raise PdfSyntaxError(f"invalid number {raw!r}", start) from None

    def _read_literal_string(self, start: int) -> Token:
        text = self.text
        depth = 0
        i = start
        while i < len(text):
            char = text[i]
            if char == "\\":
                i += 2
                continue
            if char == "(":
                depth += 1
            elif char == ")":
                depth -= 1
                if depth == 0:
                    self.position = i + 1
                    return Token("string", PdfString(text[start:i + 1]), start, i + 1)
            i += 1
        raise PdfSyntaxError("unterminated string", start)

    def _read_hex_string(self, start: int) -> Token:
        end = self.text.find(">", start)
        if end < 0:
            raise PdfSyntaxError("unterminated hex string", start)
        self.position = end + 1
        return Token("string", PdfString(self.text[start:end + 1]), start, end + 1)

    def _read_keyword(self, start: int) -> Token:
        end = self._read_regular(start)
        self.position = end
        return Token("keyword", Keyword(self.text[start:end]), start, end)


class Parser:
    """Build Python values from lexer tokens.

    Values map as follows: dictionaries to PdfDict, arrays to list, names to
    Name, numbers to int or float, "n g R" to Reference, true/false to bool,
    null to None, strings to PdfString and any other keyword to Keyword.
    """

    def __init__(self, text: str, position: int = 0):
        self.lexer = Lexer(text, position)

    @property
    def position(self) -> int:
        return self.lexer.position

    def parse_value(self) -> tuple[Any, int, int]:
        """Parse one value.

        Returns:
            (value, start, end) with source offsets of the value
        """
        token = self.lexer.next_token()
        if token is None:
            raise PdfSyntaxError("unexpected end of text", self.lexer.position)
        return self._value_from(token)

    def _value_from(self, token: Token) -> tuple[Any, int, int]:
        if token.kind == "dict_open":
            return self._parse_dict(token)
        if token.kind == "array_open":
            return self._parse_array(token)
        if token.kind == "number":
            return self._maybe_reference(token)
        if token.kind in ("name", "string"):
            return token.value, token.start, token.end
        if token.kind == "keyword":
            word = token.value.value
            if word == "true":
                return True, token.start, token.end
            if word == "false":
                return False, token.start, token.end
            if word == "null":
                return None, token.start, token.end
            return token.value, token.start, token.end
        raise PdfSyntaxError(f"unexpected {token.value!r}", token.start)

    def _maybe_reference(self, first: Token) -> tuple[Any, int, int]:
        if not isinstance(first.value, int):
            return first.value, first.start, first.end
        saved = self.lexer.position
        second = self.lexer.next_token()
        if second is not None and second.kind == "number" and isinstance(second.value, int):
            third = self.lexer.next_token()
            if third is not None and third.kind == "keyword" and third.value.value == "R":
                return Reference(first.value, second.value), first.start, third.end
        self.lexer.position = saved
        return first.value, first.start, first.end

    def _parse_array(self, open_token: Token) -> tuple[list, int, int]:
        items = []
        while True:
            token = self.lexer.next_token()
            if token is None:
                raise PdfSyntaxError("unterminated array", open_token.start)
            if token.kind == "array_close":
                return items, open_token.start, token.end
            value, _, _ = self._value_from(token)
            items.append(value)

    def _parse_dict(self, open_token: Token) -> tuple[PdfDict, int, int]:
        result = PdfDict(start=open_token.start)
        while True:
            token = self.lexer.next_token()
            if token is None:
                raise PdfSyntaxError("unterminated dictionary", open_token.start)
            if token.kind == "dict_close":
                result.end = token.end
                return result, open_token.start, token.end
            if token.kind != "name":
                raise PdfSyntaxError("dictionary key must be a name", token.start)
            value, value_start, value_end = self.parse_value()
            result.entries[token.value] = value
            result.spans[token.value] = EntrySpan(token.start, value_start, value_end)


def parse_dict(text: str, position: int = 0) -> PdfDict:
    """Parse the first dictionary at or after position.

    Raises:
        PdfSyntaxError: If the text at position is not a dictionary
    """
    parser = Parser(text, position)
    value, start, _ = parser.parse_value()
    if not isinstance(value, PdfDict):
        raise PdfSyntaxError("expected a dictionary", start)
    return value
