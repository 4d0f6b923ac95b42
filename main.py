#!/usr/bin/env python3
"""
Tiger - Main Entry Point

Usage:
    # Start the HTTP API
    python main.py server

    # Generate a single episode from a script file
    python main.py generate --script-file case.txt --platform youtube

    # Check configuration
    python main.py check-config

    # Query a running server
    python main.py status --server http://localhost:8765
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("tiger")


def start_server(host: str = "0.0.0.0", port: int = 8765):
    """Run the FastAPI app under uvicorn."""
    import uvicorn

    logger.info(f"Tiger API running at http://{host}:{port}")
    uvicorn.run("services.api.server:app", host=host, port=port, log_level="info")


async def generate_episode(script_file: str, platform: str, user_id: str = None) -> int:
    """
    Run one episode end to end and print the outcome as JSON.

    Returns:
        Process exit code (0 succeeded, 2 rejected, 1 failed)
    """
    from core.config import get_config
    from services.pipeline import EpisodePipeline, EpisodeRequest

    script = Path(script_file).read_text(encoding="utf-8")
    config = get_config()
    for issue in config.validate():
        logger.warning(f"Config: {issue}")

    pipeline = EpisodePipeline.from_config(config)
    try:
        outcome = await pipeline.generate_episode(
            EpisodeRequest(script=script, platform=platform, user_id=user_id)
        )
    finally:
        await pipeline.close()

    print(json.dumps(outcome.to_response(), indent=2))

    if outcome.status == "succeeded":
        logger.info(f"Video ready: {outcome.result.assets.video.video_url}")
        return 0
    if outcome.status == "rejected":
        logger.warning("Episode rejected by compliance check")
        return 2
    logger.error(f"Episode failed at {outcome.failure.stage.value}: {outcome.failure.message}")
    return 1


def check_config() -> int:
    from core.config import get_config

    issues = get_config().validate()
    if not issues:
        print("Configuration OK")
        return 0
    for issue in issues:
        print(f"  - {issue}")
    return 1


async def check_status(server: str) -> int:
    import httpx

    async with httpx.AsyncClient(timeout=30.0) as client:
        try:
            response = await client.get(f"{server}/api/tiger/status")
        except httpx.RequestError as e:
            print(f"Cannot connect to server: {e}")
            return 1

    if response.status_code != 200:
        print(f"Server returned status {response.status_code}")
        return 1

    data = response.json()["data"]
    print(f"Server: {server}")
    print("Status: Online")
    for name, state in data["services"].items():
        print(f"  - {name}: {state}")
    print(f"Episodes in memory: {data.get('episodesInMemory', 0)}")
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="Tiger - True Crime Episode Generation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Start the API server
    python main.py server --port 8765

    # Generate a TikTok episode
    python main.py generate --script-file case.txt --platform tiktok

    # List configuration problems
    python main.py check-config
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Server command
    server_parser = subparsers.add_parser("server", help="Start the HTTP API")
    server_parser.add_argument("--host", default="0.0.0.0", help="Host to bind")
    server_parser.add_argument("--port", type=int, default=8765, help="Port to bind")

    # Generate command
    gen_parser = subparsers.add_parser("generate", help="Generate one episode")
    gen_parser.add_argument("--script-file", "-f", required=True, help="Path to the script text")
    gen_parser.add_argument(
        "--platform",
        "-p",
        choices=["youtube", "tiktok", "instagram", "shorts"],
        default="youtube",
        help="Target platform",
    )
    gen_parser.add_argument("--user-id", help="User id recorded with the episode")

    # Config command
    subparsers.add_parser("check-config", help="Validate configuration")

    # Status command
    status_parser = subparsers.add_parser("status", help="Check server status")
    status_parser.add_argument(
        "--server",
        default="http://localhost:8765",
        help="API server URL",
    )

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == "server":
        start_server(host=args.host, port=args.port)

    elif args.command == "generate":
        sys.exit(asyncio.run(generate_episode(args.script_file, args.platform, args.user_id)))

    elif args.command == "check-config":
        sys.exit(check_config())

    elif args.command == "status":
        sys.exit(asyncio.run(check_status(args.server)))


if __name__ == "__main__":
    main()
