"""CLI entrypoint helpers for pathway pipeline run."""

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from .phases import (
    PathwayGenerationPhase,
    PathwayRecoveryPhase,
    ResponseCachePhase,
    ValidationAndQAPhase,
)
from .pipeline import PipelinePhase, PipelineRunner

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
TIMESPANS = ("daily", "weekly", "monthly", "custom")
COMPLEXITIES = ("beginner", "intermediate", "advanced")


def build_default_phases(
    seed: Optional[int] = None,
    reassign: bool = False,
    model: Any = None,
) -> List[PipelinePhase]:
    return [
        PathwayGenerationPhase(model=model),
        ResponseCachePhase(),
        PathwayRecoveryPhase(seed=seed, reassign=reassign),
        ValidationAndQAPhase(),
    ]


def run_pipeline(
    topic: str,
    timespan: str = "weekly",
    custom_days: Optional[int] = None,
    complexity: str = "intermediate",
    input_path: str = "",
    cache_dir: str = "",
    seed: Optional[int] = None,
    reassign: bool = False,
    model: Any = None,
) -> Dict[str, Any]:
    initial_context: Dict[str, Any] = {
        "topic": topic,
        "timespan": timespan,
        "custom_days": custom_days,
        "complexity": complexity,
        "input_path": input_path,
        "cache_dir": cache_dir,
    }
    if input_path:
        initial_context["raw_text"] = Path(input_path).read_text(encoding="utf-8", errors="replace")

    runner = PipelineRunner(phases=build_default_phases(seed=seed, reassign=reassign, model=model))
    final_context = runner.run(initial_context)
    return {
        "graph": final_context["graph"].to_json(),
        "meta": {
            "topic": topic,
            "timespan": timespan,
            "custom_days": custom_days,
            "complexity": complexity,
            "input_path": input_path,
            "generation_report": final_context.get("generation_report", {}),
            "cache_output": final_context.get("cache_output", {}),
            "recovery_report": final_context.get("recovery_report", {}),
            "validation_report": final_context.get("validation_report", {}),
            "phase_trace": final_context.get("phase_trace", []),
        },
    }


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a learning pathway graph and save JSON artifact.")
    parser.add_argument("--topic", default="", help="Topic of the learning pathway.")
    parser.add_argument("--timespan", choices=TIMESPANS, default="weekly")
    parser.add_argument(
        "--custom-days",
        type=int,
        default=None,
        help="Number of days, used with --timespan custom.",
    )
    parser.add_argument("--complexity", choices=COMPLEXITIES, default="intermediate")
    parser.add_argument(
        "--input-path",
        default="",
        help="Optional path to a saved raw model response; skips the model call.",
    )
    parser.add_argument(
        "--cache-dir",
        default="",
        help="Directory for raw responses (defaults to PATHWAY_CACHE_DIR, unset disables caching).",
    )
    parser.add_argument(
        "--output-path",
        default="03_data/pathways/pathway_artifact.json",
        help="Where to save resulting pathway artifact JSON.",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for generated ids.")
    parser.add_argument(
        "--reassign-ids",
        action="store_true",
        help="Replace every node and edge id with a freshly generated one.",
    )
    parser.add_argument("--log-level", default="INFO", choices=("DEBUG", "INFO", "WARNING", "ERROR"))
    args = parser.parse_args(argv)
    if not args.topic and not args.input_path:
        parser.error("either --topic or --input-path is required")
    return args


def main(argv: List[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format=LOG_FORMAT)
    artifact = run_pipeline(
        topic=args.topic,
        timespan=args.timespan,
        custom_days=args.custom_days,
        complexity=args.complexity,
        input_path=args.input_path,
        cache_dir=args.cache_dir,
        seed=args.seed,
        reassign=args.reassign_ids,
    )
    output_path = Path(args.output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(artifact, ensure_ascii=False, indent=2), encoding="utf-8")
    print(f"Pathway artifact saved to: {output_path.resolve()}")
    print(
        "Counts:",
        f"nodes={len(artifact['graph']['nodes'])}",
        f"edges={len(artifact['graph']['edges'])}",
        f"strategy={artifact['meta']['recovery_report'].get('strategy')}",
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
