#!/usr/bin/env python3
"""
Markov chain command-line utilities

    malarkey generate-text --source speech.txt --sentences 3
    malarkey generate-chain --source speech.txt --lookback 3 --output speech.chain
    malarkey generate-text --source speech.chain --unserialize --words 50
"""

import argparse
import random
import sys
import time
from pathlib import Path
from typing import List, Optional

from malarkey.config import settings
from malarkey.services.chain import Chain
from malarkey.services.chain_builder import build_chain
from malarkey.services.errors import MarkovError
from malarkey.services.text_generator import generate_text
from malarkey.utils.logger import setup_logger

logger = setup_logger("malarkey.cli")


def non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected integer; got {value!r}")
    if number < 0:
        raise argparse.ArgumentTypeError(f"expected integer greater than -1; got {number}")
    return number


def positive_int(value: str) -> int:
    number = non_negative_int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected integer greater than 0; got {number}")
    return number


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="malarkey", description="Markov chain command-line utilities")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # Shared source options
    source = argparse.ArgumentParser(add_help=False)
    source.add_argument("--source", "-source", action="append", required=True, metavar="FILE",
                        help="Source file containing text; repeat to concatenate files")
    source.add_argument("--lookback", "-lookback", type=positive_int, default=settings.DEFAULT_COHERENCE,
                        help="Number of words to look back when resolving the next word")
    source.add_argument("--ignore-line-breaks", action="store_true",
                        help="Ignore line breaks in the source text")

    text = subparsers.add_parser("generate-text", parents=[source],
                                 help="Emit randomly-generated text using a Markov chain")
    text.add_argument("--sentences", "-sentences", type=non_negative_int, help="Number of sentences to generate")
    text.add_argument("--words", "-words", type=non_negative_int, help="Number of words to generate")
    text.add_argument("--paragraphs", "-paragraphs", type=non_negative_int,
                      help="Number of paragraphs to generate (default 1 if no other limit)")
    text.add_argument("--unserialize", action="store_true",
                      help="Treat the source file as a serialized Markov chain instead of raw text")
    text.add_argument("--seed", type=int, help="Seed for the random number generator")
    text.add_argument("--log-performance", action="store_true", help="Log timing measures as well")

    chain = subparsers.add_parser("generate-chain", parents=[source], help="Emit a serialized Markov chain")
    chain.add_argument("--output", "-o", help="Write the chain to this file instead of stdout")

    return parser.parse_args(argv)


def read_sources(paths: List[str]) -> str:
    texts = []
    for name in paths:
        path = Path(name)
        if not path.is_file():
            raise FileNotFoundError(f"File {name} does not exist")
        texts.append(path.read_text(encoding="utf-8"))
    return "\n".join(texts)


def load_chain(args: argparse.Namespace) -> Chain:
    if getattr(args, "unserialize", False):
        if len(args.source) != 1:
            raise ValueError("--unserialize expects exactly one source")
        return Chain.deserialize(Path(args.source[0]).read_bytes())
    return build_chain(read_sources(args.source), args.lookback, args.ignore_line_breaks)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        start = time.perf_counter()
        chain = load_chain(args)
        action = "unserialized" if getattr(args, "unserialize", False) else "generated"

        if args.command == "generate-chain":
            data = chain.serialize()
            if args.output:
                Path(args.output).write_bytes(data)
                logger.info(f"Markov chain written to {args.output}")
            else:
                sys.stdout.write(data.decode("utf-8"))
            return 0

        if args.log_performance:
            logger.info(f"Markov chain {action} in {time.perf_counter() - start:g} seconds")
            start = time.perf_counter()

        rng = random.Random(args.seed) if args.seed is not None else None
        output = generate_text(
            chain,
            max_paragraphs=args.paragraphs,
            max_sentences=args.sentences,
            max_words=args.words,
            word_separator=settings.DEFAULT_WORD_SEPARATOR,
            paragraph_separator=settings.DEFAULT_PARAGRAPH_SEPARATOR,
            rng=rng,
            max_iterations=settings.generation_iteration_cap,
        )

        if args.log_performance:
            logger.info(f"Text generated in {time.perf_counter() - start:g} seconds")

        print(output)
        return 0

    except (MarkovError, OSError, ValueError) as e:
        logger.error(f"[ERR] {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
