"""Entry point: ``python -m siege``.

Supports two modes:
  - ``python -m siege``            → Launch the FastAPI server
  - ``python -m siege cli``        → Headless siege, turn log written to JSON
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Commander Siege simulator")
    sub = parser.add_subparsers(dest="command")

    # --- Server mode (default) ---
    srv = sub.add_parser("serve", help="Start the FastAPI server (default)")
    srv.add_argument("--host", type=str, default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    srv.add_argument("--seed", type=int, default=42)
    srv.add_argument("--turn-interval", type=float, default=1.0)
    srv.add_argument("--api-key", type=str, default=os.environ.get("SIEGE_API_KEY"))
    srv.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    # --- Headless CLI mode ---
    cli = sub.add_parser("cli", help="Run a headless siege")
    cli.add_argument("--seed", type=int, default=42)
    cli.add_argument("--commanders", type=str, default="larry,paul,olivia",
                     help="Comma-separated roster ids, in processing order")
    cli.add_argument("--types", type=str, default="wall,tower,farm",
                     help="Exactly three comma-separated structure types")
    cli.add_argument("--order", type=str, default="Defend the base",
                     help="Opening order given to every commander")
    cli.add_argument("--intermission-order", action="append", default=[],
                     help="Order for the next intermission (repeatable; omitted = skip)")
    cli.add_argument("--api-key", type=str, default=os.environ.get("SIEGE_API_KEY"))
    cli.add_argument("--replay", type=str, default="siege_log.json")
    cli.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    return parser


def _run_server(args: argparse.Namespace) -> None:
    import uvicorn

    from siege.api.app import create_app
    from siege.config import SiegeConfig

    config = SiegeConfig(
        seed=args.seed,
        turn_interval=args.turn_interval,
        log_level=args.log_level,
    )
    app = create_app(config, api_key=args.api_key)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


async def _play(args: argparse.Namespace):
    from siege.api.game_manager import GameManager
    from siege.config import SiegeConfig
    from siege.utils.replay import TurnLogRecorder

    config = SiegeConfig(seed=args.seed, replay_file=args.replay, log_level=args.log_level)
    manager = GameManager(config, api_key=args.api_key)
    recorder = TurnLogRecorder(config.replay_file, config.seed)

    manager.draft([c.strip() for c in args.commanders.split(",") if c.strip()])
    manager.curate([t.strip() for t in args.types.split(",") if t.strip()])
    await manager.teach(args.order)

    orders = list(args.intermission_order)
    while not manager.state.game_over:
        results = await manager.fast_forward()
        for result in results:
            recorder.record_turn(result, manager.state)
        if manager.state.intermission:
            order = orders.pop(0) if orders else None
            await manager.resume_intermission(order, auto_resume=False)
        elif not results:
            break

    recorder.flush(manager.state)
    return manager.debrief()


def _run_cli(args: argparse.Namespace) -> None:
    from siege.api.game_manager import GameFlowError
    from siege.utils.logging import setup_logging

    setup_logging(args.log_level)
    try:
        summary = asyncio.run(_play(args))
    except GameFlowError as exc:
        logger.error("Cannot run siege: %s", exc)
        raise SystemExit(2) from exc

    logger.info(
        "%s after %d turns: %d kills, %d wood left",
        "VICTORY" if summary.victory else "DEFEAT",
        summary.turns_played, summary.total_kills, summary.wood_remaining,
    )
    for c in summary.commanders:
        logger.info("  %s (%s) used %d wood: \"%s\"", c.name, c.personality, c.wood_used, c.reaction)
    for m in summary.top_moments:
        logger.info("  turn %d [%s] %s", m.turn, m.category, m.description)
    for h in summary.highlights:
        logger.info("  %s: %s, %s", h.category, h.name, h.description)
    logger.info("Done. Turn log written to %s", args.replay)


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    # Default to serve mode if no subcommand given
    if args.command is None or args.command == "serve":
        if args.command is None:
            args = parser.parse_args(["serve"])
        _run_server(args)
    elif args.command == "cli":
        _run_cli(args)


if __name__ == "__main__":
    main()
