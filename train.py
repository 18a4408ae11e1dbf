#!/usr/bin/env python3
"""
N-gram Language Model Training Script

Train an interpolated n-gram model on a corpus of statements with terminal
output, then query it for the most probable next words.

Usage:
    python train.py --n 3 --save model.json
    python train.py --corpus statements.txt --windowed --predict "She is"
    python train.py --load model.json --interactive
"""

import argparse
import sys

from ngram.corpus import read_statements, sample_sequences
from ngram.model import LanguageModel
from ngram.smoothing import LogTransform
from ngram.training import console, interactive_demo, setup_logging, show_predictions, train_model_cli


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Train an interpolated n-gram language model",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --n 3
  %(prog)s --corpus statements.txt --windowed --save model.json
  %(prog)s --load model.json --predict "She is" --top-k 5
  %(prog)s --load model.json --interactive

Corpus files hold one statement per line; words are split on whitespace.
Without --corpus a small built-in set of sample statements is used.
        """
    )

    parser.add_argument(
        '-n', '--n',
        type=int,
        default=3,
        help='Order of the n-gram model (default: 3)'
    )

    parser.add_argument(
        '--lambda-factor',
        type=float,
        default=None,
        help='Interpolation smoothing strength (default: n)'
    )

    parser.add_argument(
        '--sequence-length',
        type=int,
        default=15,
        help='Assumed sequence length; the uniform floor is 1/length (default: 15)'
    )

    parser.add_argument(
        '--log-transform',
        type=str,
        default=LogTransform.LOG2.value,
        choices=[t.value for t in LogTransform],
        help='Log-domain transform for conditional estimates (default: log2)'
    )

    parser.add_argument(
        '--windowed',
        action='store_true',
        help='Also train on every n-word window of each statement'
    )

    parser.add_argument(
        '--corpus',
        type=str,
        default=None,
        help='Text file with one statement per line'
    )

    parser.add_argument(
        '--save',
        type=str,
        default=None,
        help='Path to save the trained model'
    )

    parser.add_argument(
        '--load',
        type=str,
        default=None,
        help='Path to load a pre-trained model'
    )

    parser.add_argument(
        '-p', '--predict',
        type=str,
        default=None,
        help='Context to rank the next words for'
    )

    parser.add_argument(
        '-k', '--top-k',
        type=int,
        default=10,
        help='Number of predictions to show (default: 10)'
    )

    parser.add_argument(
        '-i', '--interactive',
        action='store_true',
        help='Run interactive demo after training'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Log estimation details'
    )

    return parser


TRAINING_OPTIONS = ('n', 'lambda_factor', 'sequence_length', 'log_transform',
                    'windowed', 'corpus', 'save')


def ignored_with_load(parser: argparse.ArgumentParser, args: argparse.Namespace):
    """Names of the training options that were set alongside --load."""
    return [
        '--' + name.replace('_', '-')
        for name in TRAINING_OPTIONS
        if getattr(args, name) != parser.get_default(name)
    ]


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        if args.load:
            ignored = ignored_with_load(parser, args)
            if ignored:
                console.print(f"[yellow]Warning:[/yellow] {', '.join(ignored)} "
                              f"ignored when loading a model")

            with console.status(f"[cyan]Loading model from {args.load}..."):
                model = LanguageModel.load(args.load)
            console.print(f"[green]✓[/green] Model loaded from: [bold]{args.load}[/bold]")
        else:
            if args.corpus:
                sequences = list(read_statements(args.corpus))
                source = args.corpus
            else:
                sequences = sample_sequences()
                source = "sample statements"

            model = train_model_cli(
                sequences,
                n=args.n,
                lambda_factor=args.lambda_factor,
                sequence_length=args.sequence_length,
                log_transform=args.log_transform,
                windowed=args.windowed,
                source=source,
                save_path=args.save
            )
    except (OSError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1

    if args.predict:
        show_predictions(model, args.predict.split(), top_k=args.top_k)

    if args.interactive:
        interactive_demo(model, top_k=args.top_k)

    return 0


if __name__ == '__main__':
    sys.exit(main())
