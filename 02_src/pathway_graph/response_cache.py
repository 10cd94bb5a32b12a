"""On-disk cache of raw generator responses and a keyword index over them."""

import logging
import re
import time
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Union

logger = logging.getLogger(__name__)

_UNSAFE_CHARS_RE = re.compile(r"[^a-z0-9]", re.IGNORECASE)
_BLANK_LINE_RE = re.compile(r"\n\s*\n")


def cache_filename(topic: str) -> str:
    safe_topic = _UNSAFE_CHARS_RE.sub("_", topic or "pathway").lower()
    timestamp = int(time.time() * 1000)
    return f"{safe_topic}_{timestamp}_{uuid.uuid4().hex[:8]}.txt"


def save_raw_response(text: str, topic: str, directory: Union[str, Path]) -> Path:
    """Writes ``text`` to a new file under ``directory`` and returns its path.

    The file name carries a random token so parallel calls for the same topic
    never overwrite each other.
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / cache_filename(topic)
    with path.open("x", encoding="utf-8") as handle:
        handle.write(text)
    logger.info("Raw response saved to %s", path)
    return path


@dataclass
class Chunk:
    id: str
    text: str
    metadata: Dict[str, Any] = field(default_factory=dict)


class ChunkIndex:
    """Blank-line chunks of a cached response with case-insensitive keyword search."""

    def __init__(self, chunks: List[Chunk]) -> None:
        self.chunks = chunks

    @classmethod
    def from_text(cls, text: str, source: str = "") -> "ChunkIndex":
        pieces = [piece for piece in _BLANK_LINE_RE.split(text) if piece.strip()]
        chunks = [
            Chunk(id=f"chunk-{index}", text=piece, metadata={"source": source, "index": index})
            for index, piece in enumerate(pieces)
        ]
        return cls(chunks)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ChunkIndex":
        path = Path(path)
        index = cls.from_text(path.read_text(encoding="utf-8"), source=str(path))
        logger.debug("Indexed %d chunk(s) from %s", len(index.chunks), path)
        return index

    def search(self, query: str, limit: int = 5) -> List[Chunk]:
        needle = query.lower()
        if not needle:
            return []
        return [chunk for chunk in self.chunks if needle in chunk.text.lower()][:limit]

    def __len__(self) -> int:
        return len(self.chunks)
