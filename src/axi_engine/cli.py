#!/usr/bin/env python3
"""
AXI Command Engine CLI
======================

Command-line interface for the intent engine.

Usage:
    axi repl
    axi ask "open youtube and play some music"
    axi trace "turn it up"
    axi build-vectors -o data/intent-vectors.json
    axi plugins
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from .assistant import Assistant
from .config import load_config
from .nlu.semantic import IntentVectorSet, load_intent_examples


def setup_logging(verbose: bool = False):
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S"
    )


def _assistant(args) -> Assistant:
    return Assistant(config=load_config(args.config))


async def _repl(assistant: Assistant, session_id: str):
    await assistant.init()
    try:
        while True:
            try:
                user_input = (await asyncio.to_thread(input, "You: ")).strip()
            except (EOFError, KeyboardInterrupt):
                print("\nGoodbye!")
                break

            if not user_input:
                continue
            if user_input.lower() in ("quit", "exit"):
                print("Goodbye!")
                break
            if user_input.lower() == "status":
                print(json.dumps(assistant.status(), indent=2, default=str))
                continue
            if user_input.lower().startswith("trace "):
                print(json.dumps(assistant.trace(user_input[6:].strip()), indent=2, default=str))
                continue

            reply = await assistant.handle_command(user_input, session_id)
            print(f"AXI: {reply}")
    finally:
        await assistant.shutdown()


def cmd_repl(args):
    """Interactive session."""
    setup_logging(args.verbose)
    assistant = _assistant(args)

    print("AXI Command Engine - Interactive Mode")
    print("Type 'quit' to exit, 'status' for engine status, 'trace <text>' to debug\n")
    asyncio.run(_repl(assistant, args.session))


async def _ask(assistant: Assistant, text: str, session_id: str) -> str:
    await assistant.init()
    try:
        return await assistant.handle_command(text, session_id)
    finally:
        await assistant.shutdown()


def cmd_ask(args):
    """Handle a single command."""
    setup_logging(args.verbose)
    assistant = _assistant(args)
    print(asyncio.run(_ask(assistant, " ".join(args.text), args.session)))


def cmd_trace(args):
    """Show what each layer made of a command."""
    setup_logging(args.verbose)
    assistant = _assistant(args)
    print(json.dumps(assistant.trace(" ".join(args.text)), indent=2, default=str))


def cmd_build_vectors(args):
    """Build the TF-IDF artifact from intent example files."""
    setup_logging(args.verbose)
    config = load_config(args.config)

    intents_dir = args.intents or config.intents_dir
    output = args.output or config.vectors_path
    if not intents_dir:
        print("No intents directory given (use --intents or set intents_dir)")
        sys.exit(1)
    if not output:
        print("No output path given (use --output or set vectors_path)")
        sys.exit(1)

    examples = load_intent_examples(intents_dir)
    if not examples:
        print(f"No intent examples found in {intents_dir}")
        sys.exit(1)

    vectors = IntentVectorSet.build(
        examples,
        max_examples_per_intent=args.max_examples,
        min_word_frequency=args.min_frequency,
    )
    vectors.save(Path(output))
    print(f"✓ Saved {len(vectors)} intents ({len(vectors.vocabulary)} terms) to {output}")


def cmd_plugins(args):
    """List registered plugins and their intents."""
    setup_logging(args.verbose)
    assistant = _assistant(args)
    registry = assistant.registry
    registry.initialize(assistant.plugins, assistant.config.plugin_modules)

    if args.json:
        print(json.dumps(registry.all_plugins(), indent=2))
        return

    for plugin in registry.all_plugins():
        print(f"\n{plugin['name']}: {plugin['description']}")
        for intent in plugin["intents"]:
            meta = registry.get_intent_metadata(intent)
            flag = " (confirm)" if meta["requires_confirmation"] else ""
            print(f"  - {intent} [min {meta['confidence']:.2f}]{flag}")

    for error in registry.load_errors:
        print(f"\n⚠ {error['plugin']}: {error['error']}")


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="axi",
        description="AXI conversational command engine"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("-c", "--config", help="Path to engine.yaml")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # REPL command
    repl_parser = subparsers.add_parser("repl", help="Interactive session")
    repl_parser.add_argument("-s", "--session", default="cli", help="Session id")
    repl_parser.set_defaults(func=cmd_repl)

    # Ask command
    ask_parser = subparsers.add_parser("ask", help="Handle a single command")
    ask_parser.add_argument("text", nargs="+", help="Command text")
    ask_parser.add_argument("-s", "--session", default="cli", help="Session id")
    ask_parser.set_defaults(func=cmd_ask)

    # Trace command
    trace_parser = subparsers.add_parser("trace", help="Show per-layer interpretation")
    trace_parser.add_argument("text", nargs="+", help="Command text")
    trace_parser.set_defaults(func=cmd_trace)

    # Build-vectors command
    build_parser = subparsers.add_parser("build-vectors", help="Build the TF-IDF intent vectors")
    build_parser.add_argument("-i", "--intents", help="Directory of intent example YAML files")
    build_parser.add_argument("-o", "--output", help="Output JSON path")
    build_parser.add_argument("--max-examples", type=int, default=50, help="Examples kept per intent")
    build_parser.add_argument("--min-frequency", type=int, default=2, help="Minimum term frequency")
    build_parser.set_defaults(func=cmd_build_vectors)

    # Plugins command
    plugins_parser = subparsers.add_parser("plugins", help="List plugins and intents")
    plugins_parser.add_argument("--json", action="store_true", help="Print as JSON")
    plugins_parser.set_defaults(func=cmd_plugins)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    try:
        args.func(args)
    except KeyboardInterrupt:
        print("\nAborted.")
        sys.exit(1)
    except Exception as e:
        logging.error(f"Error: {e}")
        if args.verbose:
            raise
        sys.exit(1)


if __name__ == "__main__":
    main()
