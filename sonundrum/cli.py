"""
Sonundrum CLI - Command-line interface for the module.

Usage:
    sonundrum play --modules Wires,Maze        Play interactively
    sonundrum simulate --modules Wires,Maze    Play automatically and print the trace
    sonundrum serve --port 8000                Run the REST API
"""

import argparse
import logging
import sys


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Simon Sonundrum - rule engine puzzle module",
        prog="sonundrum",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log engine trace to stderr")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    for name, help_text in (
        ("play", "Play a module interactively"),
        ("simulate", "Solve a bomb automatically"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--modules", default="", help="Comma separated names of the other modules")
        sub.add_argument("--ignore", default="", help="Comma separated extra names to ignore")
        sub.add_argument("--seed", type=int, default=None, help="Random seed")

    serve_parser = subparsers.add_parser("serve", help="Run the REST API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(message)s")

    if args.command == "play":
        cmd_play(args)
    elif args.command == "simulate":
        cmd_simulate(args)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def _split(value: str) -> list[str]:
    return [v.strip() for v in value.split(",") if v.strip()]


def _create_session(args):
    from .session import SessionManager

    manager = SessionManager()
    return manager.create_session(
        modules=_split(args.modules),
        ignored_modules=_split(args.ignore),
        seed=args.seed,
    )


def _show(session):
    from .engine_core.display import wrap_for_display

    boundary = session.boundary
    print(f"[{boundary.current_stage_display}]")
    print(wrap_for_display(boundary.current_text))


def cmd_play(args):
    """Interactive play."""
    from .session import HELP_MESSAGE

    session = _create_session(args)
    print("Commands: <button>, solve <module>, status, quit")
    print(HELP_MESSAGE)
    _show(session)

    while not session.engine.is_solved:
        try:
            line = input("> ").strip()
        except EOFError:
            break
        if not line:
            continue
        if line in ("quit", "exit"):
            break
        if line == "status":
            for key, value in session.engine.snapshot().items():
                print(f"  {key}: {value}")
            print(f"  strikes: {session.boundary.strikes}")
            continue

        texts_before = len(session.boundary.texts)
        strikes_before = session.boundary.strikes

        if line.startswith("solve "):
            try:
                session.solve_module(line[len("solve "):].strip())
            except ValueError as e:
                print(f"Error: {e}")
                continue
        elif session.loop.handle_command(line) is None:
            print(f"Unknown command: {line}. {HELP_MESSAGE}")
            continue

        if session.boundary.strikes > strikes_before:
            print("Strike!")
        if len(session.boundary.texts) > texts_before:
            _show(session)

    if session.engine.is_solved:
        print("Module solved!")
    print(f"Strikes: {session.boundary.strikes}")


def cmd_simulate(args):
    """Solve the bomb, honouring "solve X next" and every required press."""
    session = _create_session(args)
    engine = session.engine

    while not engine.solving:
        if engine.required_press is not None:
            engine.press(engine.required_press)
        remaining = [n for n in session.bomb.unsolved() if n not in session.config.ignored_modules]
        if not remaining:
            session.loop.tick(session.loop.poll_interval)
            continue
        target = engine.required_solve if engine.required_solve in remaining else remaining[0]
        session.solve_module(target)

    result = session.loop.force_solve()

    for line in session.boundary.log_lines:
        print(line)
    print()
    print(f"Solved: {result.solved}")
    print(f"Strikes: {session.boundary.strikes}")
    if not result.solved:
        sys.exit(1)


def cmd_serve(args):
    """Serve the REST API with uvicorn."""
    import uvicorn

    uvicorn.run("sonundrum.api.app:app", host=args.host, port=args.port)


if __name__ == "__main__":
    main()
