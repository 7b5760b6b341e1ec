import argparse
import logging
import os
import sys
from collections.abc import Sequence

from contentkit.api.deps import Settings, configure_logging
from contentkit.rules.loader import load_rules
from contentkit.services.bootstrap import seed_demo
from contentkit.services.engine import ContentEngine

logger = logging.getLogger("cli")


def get_engine(settings: Settings, backend: str) -> ContentEngine:
    if not settings.rules_path.exists():
        logger.error("Rules file %s not found.", settings.rules_path)
        sys.exit(1)

    rules = load_rules(settings.rules_path)
    return ContentEngine.create(
        rules=rules,
        backend=backend,  # type: ignore[arg-type]
        db_path=settings.db_path,
    )


def handle_serve(args: argparse.Namespace) -> None:
    import uvicorn

    # The app reads its settings from the environment at startup
    os.environ["CONTENTKIT_BACKEND"] = args.backend
    uvicorn.run("contentkit.api.main:app", host=args.host, port=args.port)


def handle_promote_due(engine: ContentEngine, args: argparse.Namespace) -> None:
    promoted = engine.promote_due()
    print(f"Promoted {len(promoted)} entries.")


def handle_types(engine: ContentEngine, args: argparse.Namespace) -> None:
    types = engine.schemas.list()
    if not types:
        print("No content types.")
        return
    for t in types:
        print(f"{t.slug}\t{t.display_name}\t{len(t.fields)} fields")


def handle_seed(engine: ContentEngine, args: argparse.Namespace) -> None:
    content_type = seed_demo(engine)
    print(f"Content type '{content_type.slug}' ready ({content_type.id}).")


def main(argv: Sequence[str] | None = None) -> None:
    settings = Settings()

    parser = argparse.ArgumentParser(prog="contentkit", description="contentkit CLI")
    parser.add_argument(
        "--backend",
        choices=["memory", "sqlite"],
        default=settings.backend,
        help="Storage backend (default from CONTENTKIT_BACKEND)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # serve
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    # promote-due
    subparsers.add_parser("promote-due", help="Publish scheduled entries that are due")

    # types
    subparsers.add_parser("types", help="List content types")

    # seed
    subparsers.add_parser("seed", help="Create the demo 'product' content type")

    args = parser.parse_args(argv)
    configure_logging(settings.log_level)

    if args.command == "serve":
        handle_serve(args)
        return

    engine = get_engine(settings, args.backend)

    if args.command == "promote-due":
        handle_promote_due(engine, args)
    elif args.command == "types":
        handle_types(engine, args)
    elif args.command == "seed":
        handle_seed(engine, args)


if __name__ == "__main__":
    main()
