"""Recursive character text chunker.

Splits long text into bounded, overlapping chunks, preferring natural break
points (paragraphs, lines, sentences, words) before falling back to a hard
character cut. Chunks are contiguous substrings of the source text, so the
original can be rebuilt by dropping the overlap between neighbours.
"""

from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Sequence, Tuple

from pdf_summarizer.utils.logging import get_logger

LOGGER = get_logger(__name__)

DEFAULT_CHUNK_SIZE = 4000
DEFAULT_CHUNK_OVERLAP = 200

# Paragraph, line, sentence, word, hard cut
DEFAULT_SEPARATORS: Tuple[str, ...] = ("\n\n", "\n", ". ", " ", "")


@dataclass(frozen=True)
class Chunk:
    """A contiguous slice of the source text.

    Attributes:
        index: Zero-based sequence number within the source
        text: Chunk content
        start: Offset of the first character in the source text
        end: Offset one past the last character in the source text
    """

    index: int
    text: str
    start: int
    end: int


class TextChunker:
    """Splits text into chunks of at most ``chunk_size`` characters.

    Adjacent chunks share up to ``chunk_overlap`` trailing characters of the
    previous chunk so context is not lost at chunk boundaries.
    """

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        chunk_overlap: int = DEFAULT_CHUNK_OVERLAP,
        separators: Sequence[str] = DEFAULT_SEPARATORS,
    ):
        """Initialize the chunker.

        Args:
            chunk_size: Maximum characters per chunk
            chunk_overlap: Maximum characters shared by adjacent chunks
            separators: Break points tried in priority order

        Raises:
            ValueError: If the size/overlap combination is unusable
        """
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if chunk_overlap < 0 or chunk_overlap >= chunk_size:
            raise ValueError(
                f"chunk_overlap ({chunk_overlap}) must be >= 0 and smaller than chunk_size ({chunk_size})"
            )

        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.separators = tuple(separators)

    def split(self, text: str) -> List[str]:
        """Split text into ordered chunk strings."""
        return [chunk.text for chunk in self.split_chunks(text)]

    def split_chunks(self, text: str) -> List[Chunk]:
        """Split text into ordered ``Chunk`` records.

        Args:
            text: Source text

        Returns:
            List of chunks in ascending ``index`` order; empty for empty text
        """
        if not text:
            return []

        if len(text) <= self.chunk_size:
            return [Chunk(index=0, text=text, start=0, end=len(text))]

        pieces = self._split_recursive(text, self.separators)
        chunks = self._merge(pieces)

        LOGGER.debug(
            f"Split {len(text)} characters into {len(chunks)} chunks",
            extra={"chunk_size": self.chunk_size, "chunk_overlap": self.chunk_overlap},
        )
        return chunks

    def _split_recursive(self, text: str, separators: Sequence[str]) -> List[str]:
        """Break text into pieces no longer than ``chunk_size``.

        Uses the first separator present in the text; oversized pieces are
        split again with the separators that follow it.
        """
        separator = ""
        remaining: Sequence[str] = ()
        for i, candidate in enumerate(separators):
            if candidate == "" or candidate in text:
                separator = candidate
                remaining = separators[i + 1:]
                break

        pieces: List[str] = []
        for piece in self._split_keeping_separator(text, separator):
            if len(piece) <= self.chunk_size:
                pieces.append(piece)
            elif remaining:
                pieces.extend(self._split_recursive(piece, remaining))
            else:
                pieces.extend(self._hard_cut(piece))
        return pieces

    def _split_keeping_separator(self, text: str, separator: str) -> List[str]:
        # The separator stays attached to the piece it terminates so that
        # "".join(pieces) == text.
        if separator == "":
            return self._hard_cut(text)

        parts = text.split(separator)
        pieces = [part + separator for part in parts[:-1]]
        pieces.append(parts[-1])
        return [piece for piece in pieces if piece]

    def _hard_cut(self, text: str) -> List[str]:
        return [text[i:i + self.chunk_size] for i in range(0, len(text), self.chunk_size)]

    def _merge(self, pieces: List[str]) -> List[Chunk]:
        """Greedily pack pieces into chunks, carrying an overlap tail forward."""
        chunks: List[Chunk] = []
        window: Deque[Tuple[int, str]] = deque()
        window_len = 0
        position = 0

        for piece in pieces:
            if window and window_len + len(piece) > self.chunk_size:
                chunks.append(self._make_chunk(len(chunks), window))
                # Drop from the front until the tail fits the overlap budget
                # and leaves room for the incoming piece.
                while window and (
                    window_len > self.chunk_overlap
                    or window_len + len(piece) > self.chunk_size
                ):
                    _, dropped = window.popleft()
                    window_len -= len(dropped)

            window.append((position, piece))
            window_len += len(piece)
            position += len(piece)

        if window:
            chunks.append(self._make_chunk(len(chunks), window))

        return chunks

    @staticmethod
    def _make_chunk(index: int, window: Deque[Tuple[int, str]]) -> Chunk:
        start = window[0][0]
        text = "".join(piece for _, piece in window)
        return Chunk(index=index, text=text, start=start, end=start + len(text))


def split_text(
    text: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    chunk_overlap: int = DEFAULT_CHUNK_OVERLAP,
) -> List[str]:
    """Split text with a throwaway ``TextChunker``."""
    return TextChunker(chunk_size=chunk_size, chunk_overlap=chunk_overlap).split(text)


def merge_chunks(chunks: Sequence[Chunk]) -> str:
    """Rebuild the source text from chunks by dropping overlapping prefixes."""
    if not chunks:
        return ""

    parts = [chunks[0].text]
    covered_until = chunks[0].end
    for chunk in chunks[1:]:
        parts.append(chunk.text[covered_until - chunk.start:])
        covered_until = chunk.end
    return "".join(parts)
