"""
Streaming decoder for compressed manifest archives.

A catalog is a gzip-compressed tar file whose root holds one JSON member.
Two layouts exist in the wild and both are accepted, detected from the
first token of the member:

    [ {manifest}, {manifest}, ... ]
    { "namespace": "core", "manifests": [ {manifest}, ... ] }

The archive is read in tar streaming mode and the JSON array is decoded one
element at a time, so a catalog never has to fit in memory. Callers stop
whenever they are satisfied; ``close()`` (or leaving the ``with`` block)
releases the member, decompression and file handles.
"""

import codecs
import io
import json
import logging
import tarfile
import zlib
from contextlib import contextmanager, ExitStack
from pathlib import Path
from typing import Iterator, Optional, Union

from ..domain import PackageManifest
from ..exit_codes import (
    ArchiveError,
    CorruptArchiveError,
    DecodeError,
    MissingFileError,
    NoStructuredMemberError,
    UnexpectedTokenError,
    UnreadableArchiveError,
)

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024

_WHITESPACE = ' \t\n\r'


def member_name(member: tarfile.TarInfo) -> str:
    """Member name with any leading './' removed."""
    name = member.name
    while name.startswith('./'):
        name = name[2:]
    return name


def is_structured_member(member: tarfile.TarInfo) -> bool:
    """A regular ``*.json`` file at the archive root."""
    name = member_name(member)
    return member.isreg() and '/' not in name and name.endswith('.json')


@contextmanager
def translate_archive_errors(path: Union[str, Path]):
    """Re-raise low level tar/gzip/text failures as archive errors."""
    try:
        yield
    except ArchiveError:
        raise
    except UnicodeDecodeError as e:
        raise DecodeError(f"invalid UTF-8 in archive member: {e}", str(path)) from e
    except RecursionError as e:
        raise DecodeError("JSON nested too deeply", str(path)) from e
    except (tarfile.TarError, EOFError, zlib.error, OSError) as e:
        raise CorruptArchiveError(f"failed to read archive: {e}", str(path)) from e


@contextmanager
def open_archive(path: Union[str, Path]) -> Iterator[tarfile.TarFile]:
    """
    Open a ``.tar.gz`` catalog in streaming mode.

    Raises:
        MissingFileError: The path does not exist
        UnreadableArchiveError: The path cannot be opened (permissions, a directory)
        CorruptArchiveError: The gzip or tar framing is invalid
    """
    path = str(path)
    try:
        fileobj = open(path, 'rb')
    except FileNotFoundError as e:
        raise MissingFileError(path) from e
    except OSError as e:
        raise UnreadableArchiveError(path, e) from e

    with fileobj:
        with translate_archive_errors(path):
            tar = tarfile.open(fileobj=fileobj, mode='r|gz')
        with tar:
            yield tar


class _TokenReader:
    """Pull-style JSON reader over a UTF-8 byte stream.

    Only the pieces the manifest layouts need: peeking at and consuming
    structural characters, and decoding one complete value at a time.
    Bytes are decoded incrementally, so a character split across two
    reads is kept until its remaining bytes arrive.
    """

    def __init__(self, stream: io.BufferedIOBase, path: str, chunk_size: int = CHUNK_SIZE):
        self._stream = stream
        self._path = path
        self._chunk_size = chunk_size
        self._text = codecs.getincrementaldecoder('utf-8')()
        self._buffer = ''
        self._pos = 0
        self._eof = False
        self._decoder = json.JSONDecoder()

    def _fill(self) -> bool:
        while not self._eof:
            data = self._stream.read(self._chunk_size)
            if not data:
                self._eof = True
            chunk = self._text.decode(data, final=self._eof)
            if chunk:
                # Drop what has already been consumed
                self._buffer = self._buffer[self._pos:] + chunk
                self._pos = 0
                return True
        return False

    def peek(self) -> str:
        """Next non-whitespace character, or '' at end of input."""
        while True:
            buffer = self._buffer
            pos = self._pos
            while pos < len(buffer) and buffer[pos] in _WHITESPACE:
                pos += 1
            self._pos = pos
            if pos < len(buffer):
                return buffer[pos]
            if not self._fill():
                return ''

    def expect(self, char: str) -> None:
        got = self.peek()
        if got != char:
            raise UnexpectedTokenError(repr(char), got or 'end of input', self._path)
        self._pos += 1

    def value(self):
        """Decode the next complete JSON value."""
        if not self.peek():
            raise DecodeError("unexpected end of JSON input", self._path)
        while True:
            try:
                value, end = self._decoder.raw_decode(self._buffer, self._pos)
            except json.JSONDecodeError as e:
                if self._fill():
                    continue
                raise DecodeError(f"malformed JSON: {e.msg}", self._path) from e
            except RecursionError as e:
                raise DecodeError("JSON nested too deeply", self._path) from e
            # A number or literal may continue in the next chunk
            if end == len(self._buffer) and not isinstance(value, (dict, list, str)) and self._fill():
                continue
            self._pos = end
            return value


class ManifestDecoder:
    """
    Incremental reader over the manifests in one catalog archive.

    Usage:
        with ManifestDecoder(path) as decoder:
            print(decoder.namespace)
            for manifest in decoder:
                ...

    ``has_more()`` and ``decode_next()`` expose the same walk explicitly.
    ``namespace`` is '' for the bare-array layout.

    Raises (from the constructor or while iterating):
        MissingFileError, UnreadableArchiveError, CorruptArchiveError,
        NoStructuredMemberError, DecodeError, UnexpectedTokenError
    """

    def __init__(self, path: Union[str, Path], chunk_size: int = CHUNK_SIZE):
        self.path = str(path)
        self.namespace = ''
        self.member: Optional[str] = None
        self._stack = ExitStack()
        self._reader: Optional[_TokenReader] = None
        self._started = False

        try:
            self._open(chunk_size)
        except BaseException:
            self._stack.close()
            raise

    def _open(self, chunk_size: int) -> None:
        tar = self._stack.enter_context(open_archive(self.path))

        with translate_archive_errors(self.path):
            member = next((m for m in tar if is_structured_member(m)), None)
            if member is None:
                raise NoStructuredMemberError(self.path)
            self.member = member_name(member)

            # Stream-mode members cannot seek, which rules out TextIOWrapper
            raw = self._stack.enter_context(tar.extractfile(member))
            self._reader = _TokenReader(raw, self.path, chunk_size)
            self._read_preamble()

        logger.debug(f"Opened {self.path} (member {self.member}, namespace {self.namespace!r})")

    def _read_preamble(self) -> None:
        """Consume tokens up to and including the manifest array's '['."""
        reader = self._reader
        first = reader.peek()

        if first == '[':
            reader.expect('[')
            return

        if first != '{':
            raise UnexpectedTokenError("'[' or '{'", first or 'end of input', self.path)

        reader.expect('{')
        self._expect_key('namespace')
        namespace = reader.value()
        if not isinstance(namespace, str):
            raise UnexpectedTokenError('string for namespace', namespace, self.path)
        self.namespace = namespace
        reader.expect(',')
        self._expect_key('manifests')
        reader.expect('[')

    def _expect_key(self, key: str) -> None:
        reader = self._reader
        if reader.peek() != '"':
            raise UnexpectedTokenError(f"'{key}' key", reader.peek() or 'end of input', self.path)
        got = reader.value()
        if got != key:
            raise UnexpectedTokenError(f"'{key}' key", got, self.path)
        reader.expect(':')

    @property
    def closed(self) -> bool:
        return self._reader is None

    def _check_open(self) -> None:
        if self.closed:
            raise ValueError(f"decoder for {self.path} is closed")

    def has_more(self) -> bool:
        """True while the manifest array has elements left."""
        self._check_open()
        with translate_archive_errors(self.path):
            char = self._reader.peek()
        if char == ']':
            return False
        if not char:
            raise DecodeError("unexpected end of input inside manifest array", self.path)
        return True

    def decode_next(self) -> PackageManifest:
        """Decode the next manifest in the array."""
        self._check_open()
        with translate_archive_errors(self.path):
            if self._started:
                self._reader.expect(',')
            if self._reader.peek() in (']', ','):
                raise UnexpectedTokenError('manifest object', self._reader.peek(), self.path)
            value = self._reader.value()

        if not isinstance(value, dict):
            raise UnexpectedTokenError('manifest object', value, self.path)
        self._started = True

        try:
            return PackageManifest.from_dict(value)
        except ValueError as e:
            raise DecodeError(f"failed to decode manifest: {e}", self.path) from e

    def __iter__(self) -> 'ManifestDecoder':
        return self

    def __next__(self) -> PackageManifest:
        if not self.has_more():
            raise StopIteration
        return self.decode_next()

    def close(self) -> None:
        """Release the member stream, decompressor and file handle."""
        self._reader = None
        self._stack.close()

    def __enter__(self) -> 'ManifestDecoder':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
