import argparse
import json
import logging
import os
import random
import sys
import uuid as _uuid
from pathlib import Path

from config.settings import get_settings
from pipelines.runner import Pipeline, RunContext
from pipelines.steps import BuildProfiles, ValidateProfiles, ScoreProfiles
from services.errors import InputValidationError
from services.reporting import print_summary
from utils.logging_setup import init_logging


def _load_input(path):
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if isinstance(data, list):
        return [], data
    if isinstance(data, dict):
        return list(data.get("items") or []), list(data.get("profiles") or [])
    raise InputValidationError("Input must be a JSON array of profiles or an object with 'profiles'/'items'")


def cmd_rank(args):
    if not os.getenv("RUN_ID"):
        os.environ["RUN_ID"] = _uuid.uuid4().hex
    try:
        results, profiles = _load_input(args.input)
    except (OSError, ValueError) as e:
        # InputValidationError and JSONDecodeError are both ValueErrors
        print(f"Cannot read input: {e}", file=sys.stderr)
        sys.exit(2)

    ctx = RunContext(criteria=args.criteria, results=results, profiles=profiles)
    rng = random.Random(args.seed) if args.seed is not None else None
    pipeline = Pipeline([
        BuildProfiles(),
        ValidateProfiles(),
        ScoreProfiles(rng=rng),
    ])
    try:
        ctx = pipeline.run(ctx)
    except InputValidationError as e:
        print(f"Invalid input: {e}", file=sys.stderr)
        sys.exit(2)

    ranked = ctx.ranked[: args.limit] if args.limit else ctx.ranked
    payload = json.dumps([p.model_dump() for p in ranked], indent=2, ensure_ascii=False)
    output_path = None
    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(payload, encoding="utf-8")
        print_summary(args.criteria, ranked, ctx.meta, output_path)
    else:
        print(payload)


def cmd_serve(args):
    from relay_server import create_app
    app = create_app()
    logging.getLogger(__name__).info(f"Relay listening on {args.host}:{args.port}")
    app.run(host=args.host, port=args.port)


def main():
    settings = get_settings()
    init_logging(settings.log_level)
    parser = argparse.ArgumentParser(description="Lead relevance and relay CLI")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_rank = sub.add_parser("rank", help="Score and rank profiles against comma-separated criteria")
    p_rank.add_argument("--criteria", "-c", required=True, help='Comma-separated criteria, e.g. "Python, Berlin"')
    p_rank.add_argument("--input", "-i", required=True, help="JSON file: array of profiles, or object with 'profiles' and/or 'items' (search results)")
    p_rank.add_argument("--output", "-o", help="Write ranked JSON here and print a summary instead")
    p_rank.add_argument("--seed", type=int, default=None, help="Seed the tie-breaking jitter for reproducible output")
    p_rank.add_argument("--limit", type=int, default=None, help="Keep only the top N profiles")
    p_rank.set_defaults(func=cmd_rank)

    p_serve = sub.add_parser("serve", help="Run the CORS relay HTTP server")
    p_serve.add_argument("--host", default=settings.relay_host)
    p_serve.add_argument("--port", type=int, default=settings.relay_port)
    p_serve.set_defaults(func=cmd_serve)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
