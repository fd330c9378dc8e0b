import argparse
import logging
import sys
import time

from fibcalc import (
    EXECUTOR_KINDS,
    ConfigurationError,
    FibonacciError,
    RunSettings,
    get_config,
    parse_index,
    report,
    run_repl,
    setup_logging,
)


def _positive_int(text):
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def _non_negative_int(text):
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be non-negative, got {value}")
    return value


def build_parser():
    parser = argparse.ArgumentParser(
        prog="fibcalc",
        description="Compute Fibonacci numbers of arbitrary size using fast doubling.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument(
        "indices",
        nargs="*",
        metavar="INDEX",
        help="Indices to compute. Without any, an interactive prompt is started."
    )
    parser.add_argument(
        "--config", "-c",
        default=None,
        metavar="PATH",
        help="YAML configuration file. Overrides the FIBCALC_CONFIG environment variable."
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Enable DEBUG level logging."
    )

    render_group = parser.add_argument_group('Rendering Options')
    render_group.add_argument(
        "--threshold-exponent",
        dest="threshold_exponent",
        type=_non_negative_int,
        default=None,
        metavar="N",
        help="Use scientific notation for results greater than 10**N (config default: 35)."
    )
    render_group.add_argument(
        "--digits",
        dest="significant_digits",
        type=_positive_int,
        default=None,
        metavar="N",
        help="Significant digits shown in scientific notation (config default: 5)."
    )
    render_group.add_argument(
        "--exact",
        action="store_true",
        help="Always print the exact decimal value."
    )

    engine_group = parser.add_argument_group('Engine Options')
    engine_group.add_argument(
        "--executor",
        choices=EXECUTOR_KINDS,
        default=None,
        help="Pool used for the parallel products (config default: process)."
    )
    engine_group.add_argument(
        "--workers",
        dest="max_workers",
        type=_positive_int,
        default=None,
        metavar="N",
        help="Size of the pool (config default: 2)."
    )
    engine_group.add_argument(
        "--parallel-min-bits",
        dest="parallel_min_bits",
        type=_non_negative_int,
        default=None,
        metavar="BITS",
        help="Operands smaller than this are multiplied inline (config default: 65536)."
    )
    return parser


def main(argv=None):
    """
    Command-line entry point: one-shot computation or interactive prompt.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    config = get_config(args.config)
    logging_config = config.get_logging_config()
    setup_logging(debug=args.debug, level=logging_config.get('level') if isinstance(logging_config, dict) else None)
    logger = logging.getLogger(__name__)
    start_time = time.time()
    logger.info({"event": "cli_start", "args": vars(args)})

    overrides = {
        'engine.executor': args.executor,
        'engine.max_workers': args.max_workers,
        'engine.parallel_min_bits': args.parallel_min_bits,
        'render.threshold_exponent': args.threshold_exponent,
        'render.significant_digits': args.significant_digits,
    }
    for key_path, value in overrides.items():
        if value is not None:
            config.update_runtime(key_path, value)

    try:
        settings = RunSettings.from_config(config)
    except ConfigurationError as e:
        logger.error({"event": "config_invalid", "path": str(config.config_path), "key": e.key, "error": str(e)})
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    if args.exact:
        settings.threshold = None

    if not args.indices:
        try:
            run_repl(settings)
        except KeyboardInterrupt:
            print(file=sys.stdout)
        logger.info({"event": "cli_end", "status": "success", "total_duration_seconds": round(time.time() - start_time, 3)})
        return 0

    exit_code = 0
    for text in args.indices:
        try:
            report(parse_index(text), settings, sys.stdout)
        except FibonacciError as e:
            logger.error({"event": "calculation_failed", "input": text, "error": str(e)})
            print(f"Error: {e}", file=sys.stderr)
            exit_code = 1

    status = "success" if exit_code == 0 else "failed"
    logger.info({"event": "cli_end", "status": status, "total_duration_seconds": round(time.time() - start_time, 3)})
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
