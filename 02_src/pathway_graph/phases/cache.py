"""Raw response caching phase."""

import logging
import os
from typing import Any, Dict

from dotenv import load_dotenv

from ..pipeline import PipelinePhase
from ..response_cache import ChunkIndex, save_raw_response

logger = logging.getLogger(__name__)


class ResponseCachePhase(PipelinePhase):
    phase_name = "cache"

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        load_dotenv()
        cache_dir = context.get("cache_dir") or os.getenv("PATHWAY_CACHE_DIR")
        if not cache_dir:
            logger.debug("No cache directory configured; raw response not saved")
            return {"cache_output": {}}

        raw_text = str(context.get("raw_text") or "")
        path = save_raw_response(raw_text, str(context.get("topic", "")), cache_dir)
        chunk_count = len(ChunkIndex.from_file(path))
        return {"cache_output": {"path": str(path), "chunk_count": chunk_count}}
