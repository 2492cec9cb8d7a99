#!/usr/bin/env python3
"""
Text Generator

Generates pseudo-random text from a FrequencyModel. Generation starts from a
seed context of ``order`` characters, then repeatedly samples the next
character for the trailing ``order`` characters of the text produced so far.

Usage:
    kgram-text 5 300 --input corpus.txt --seed 7
    cat corpus.txt | kgram-text 3 120

The generated text goes to standard output followed by a newline. Log records
go to standard error.
"""

import sys
import time
import logging
import argparse

from kgram_text.models.frequency_model import FrequencyModel
from kgram_text.models.weighted_sampler import make_rng
from kgram_text.data_preprocessing.text_preprocessor import TextPreprocessor
from kgram_text.utils.config_loader import load_generator_config
from kgram_text.utils.loggers.json_logger import get_logger, log_json
from kgram_text.utils.system_monitoring import ResourceMonitor


def generate_text(model, seed_text, length, rng=None, logger=None):
    """
    Generates ``length`` characters of text from a model.

    Args:
        model (FrequencyModel): The model to sample from.
        seed_text (str): Text whose first ``model.order`` characters are the
            initial context, usually the corpus the model was built from.
        length (int): Total number of characters to produce, seed context
            included. Must be at least ``model.order``.
        rng (numpy.random.Generator, optional): Generator owned by this
            generation task.
        logger (logging.Logger, optional): Logger for generation events.

    Returns:
        str: The seed context followed by ``length - model.order`` sampled
        characters.

    Raises:
        ValueError: If ``length`` or ``seed_text`` is too short, or the model
            rejects a context.
    """
    logger = logger or logging.getLogger(__name__)
    order = model.order

    if not isinstance(length, int) or isinstance(length, bool):
        raise ValueError(f"length must be an int, got {type(length).__name__}")
    if length < order:
        raise ValueError(f"length ({length}) must be at least the model order ({order})")
    if len(seed_text) < order:
        raise ValueError(
            f"seed text must have at least {order} characters, got {len(seed_text)}")

    kgram = seed_text[:order]
    generated = [kgram]
    start_time = time.time()

    logger.info("Text generation started", extra={
        "metrics": {"order": order, "length": length, "seed_context": kgram}
    })

    for _ in range(length - order):
        c = model.sample(kgram, rng=rng)
        generated.append(c)
        # Next context is the trailing ``order`` characters of the output
        kgram = kgram[1:] + c

    text = "".join(generated)
    logger.info("Text generation completed", extra={
        "metrics": {
            "characters_generated": len(text),
            "generation_time": time.time() - start_time,
            "text": text[:200] + ("..." if len(text) > 200 else "")
        }
    })
    return text


def read_corpus(input_path=None):
    """Reads the whole corpus from a file, or from standard input when no path is given."""
    if input_path is None:
        return sys.stdin.read()
    with open(input_path, "r", encoding="utf-8") as f:
        return f.read()


def build_parser():
    parser = argparse.ArgumentParser(
        description="Generate text from a k-th order character Markov model of a corpus")
    parser.add_argument("order", type=int, help="Model order k (kgram length)")
    parser.add_argument("length", type=int,
                        help="Number of characters to generate, seed context included")
    parser.add_argument("--input", help="Corpus file (default: standard input)")
    parser.add_argument("--seed", type=int, help="Random seed (default: from config)")
    parser.add_argument("--env", default="development",
                        help="Configuration environment (default: development)")
    parser.add_argument("--config-dir", help="Directory holding the YAML configuration")
    parser.add_argument("--alphabet-size", type=int,
                        help="Alphabet size (default: from config)")
    parser.add_argument("--normalize", action=argparse.BooleanOptionalAction, default=None,
                        help="Fit the corpus into the alphabet before building")
    parser.add_argument("--log-file", help="JSON log file (default: from config)")
    return parser


def main(argv=None):
    """
    Command-line entry point.

    Returns:
        int: Exit status, 0 on success and 1 when the corpus cannot be read
        or the model rejects the input
    """
    args = build_parser().parse_args(argv)

    config = load_generator_config(environment=args.env, config_dir=args.config_dir)
    for key, value in (("seed", args.seed), ("alphabet_size", args.alphabet_size),
                       ("normalize_text", args.normalize), ("log_file", args.log_file)):
        if value is not None:
            config[key] = value

    logger = get_logger("kgram_text", log_file=config["log_file"],
                        console_json=config["console_json"])
    log_json(logger, "Text generator invoked", {
        "order": args.order,
        "length": args.length,
        "input": args.input or "<stdin>",
        "environment": args.env,
        "alphabet_size": config["alphabet_size"],
        "normalize_text": config["normalize_text"],
        "seed": config["seed"]
    })

    try:
        corpus = read_corpus(args.input)
        if config["normalize_text"]:
            corpus = TextPreprocessor(config["alphabet_size"]).fit_to_alphabet(corpus)

        model = FrequencyModel(corpus, args.order,
                               alphabet_size=config["alphabet_size"], logger=logger)
        ResourceMonitor(logger).log_resource_usage("model build")
        text = generate_text(model, corpus, args.length,
                             rng=make_rng(config["seed"]), logger=logger)
    except (OSError, ValueError) as e:
        # UnicodeDecodeError from an undecodable corpus is a ValueError
        logger.error(f"Text generation aborted: {e}", extra={
            "metrics": {"error": str(e), "error_type": type(e).__name__,
                        "input": args.input or "<stdin>"}
        })
        return 1

    sys.stdout.write(text + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
