"""
Command-line entry points.

  banana-studio serve                      # run the API with uvicorn
  banana-studio generate "a cat" --image ref.png --download out/
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys
from pathlib import Path

from banana_studio.client.session import GenerationSession, SessionState
from banana_studio.core.config import get_settings
from banana_studio.utils.file_handler import load_attachment

DEFAULT_API_BASE = os.environ.get("BANANA_STUDIO_API_BASE", "http://127.0.0.1:7000")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="banana-studio", description="Prompt-to-image studio")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("serve", help="Run the API server")

    gen = sub.add_parser("generate", help="Submit one generation to a running server")
    gen.add_argument("prompt", help="Text prompt")
    gen.add_argument("--image", action="append", type=Path, default=[], help="Reference image (repeatable)")
    gen.add_argument("--api-base", default=DEFAULT_API_BASE, help="Server base URL")
    gen.add_argument("--download", type=Path, default=None, help="Directory to save the first result in")
    return parser


async def run_generate(args: argparse.Namespace) -> int:
    images = [load_attachment(path) for path in args.image]
    async with GenerationSession(api_base_url=args.api_base) as session:
        session.prompt = args.prompt
        session.add_images(*images)
        if not await session.submit():
            print("Prompt is required", file=sys.stderr)
            return 1
        if session.state is SessionState.DISPLAYING_ERROR:
            for notification in session.notifications:
                print(f"{notification.title}: {notification.description}", file=sys.stderr)
            return 1

        print(f"[{session.metadata.timestamp}] {session.metadata.prompt}")
        for url in session.image_urls:
            print(url)
        if args.download is not None:
            args.download.mkdir(parents=True, exist_ok=True)
            saved = await session.download(session.image_urls[0], args.download)
            if saved is None:
                for notification in session.notifications:
                    print(f"{notification.title}: {notification.description}", file=sys.stderr)
                return 1
            print(f"saved {saved}")
    return 0


def serve() -> int:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "banana_studio.main:app",
        host=settings.host,
        port=settings.port,
        workers=1,
        log_level=settings.log_level.lower(),
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.command == "serve":
        return serve()
    return asyncio.run(run_generate(args))


if __name__ == "__main__":
    sys.exit(main())
