"""
Command line entry point: send one prompt to Gemini and print the answer.
"""
import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .client import Gemini
from .core.config import DEFAULT_MODEL, LOG_LEVEL_FROM_ENV
from .core.errors import GeminiError, TruncatedStreamError
from .core.logging_utils import setup_logging

logger = logging.getLogger("GeminiClient.CLI")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gemini-client", description="Send a prompt to the Gemini API.")
    parser.add_argument("prompt", help="user message to send")
    parser.add_argument("-s", "--system", help="system prompt")
    parser.add_argument("-m", "--model", default=DEFAULT_MODEL, help=f"model name (default: {DEFAULT_MODEL})")
    parser.add_argument("-t", "--temperature", type=float, help="sampling temperature (0-2)")
    parser.add_argument("--max-output-tokens", type=int, help="cap on generated tokens")
    parser.add_argument("--google-search", action="store_true", help="enable the built-in Google Search tool")
    parser.add_argument("--stream", action="store_true", help="print the answer as it streams in")
    parser.add_argument("--log-level", default=LOG_LEVEL_FROM_ENV, help="logging level (default: %(default)s)")
    return parser


async def run(args: argparse.Namespace) -> int:
    async with Gemini(model=args.model) as gemini:
        builder = gemini.generate_content().with_user_message(args.prompt)
        if args.system:
            builder.with_system_prompt(args.system)
        if args.temperature is not None:
            builder.with_temperature(args.temperature)
        if args.max_output_tokens is not None:
            builder.with_max_output_tokens(args.max_output_tokens)
        if args.google_search:
            builder.with_google_search()

        if not args.stream:
            response = await builder.execute()
            print(response.text())
            for call in response.function_calls():
                print(f"[function call] {call.name}({call.args})")
            return 0

        printed = 0
        try:
            async with await builder.execute_stream() as stream:
                async for aggregate in stream:
                    sys.stdout.write(aggregate.text[printed:])
                    sys.stdout.flush()
                    printed = len(aggregate.text)
        except TruncatedStreamError as e:
            sys.stdout.write(e.partial.text[printed:])
            print()
            raise
        print()
        return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        logger.info("Interrupted by user (Ctrl+C)")
        return 130
    except GeminiError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
