#!/usr/bin/env python3
"""
Lexiforge CLI
=============
Command-line interface for word generation and analysis.

Usage:
    lexiforge generate -n 10 --language elvish --seed 42
    lexiforge generate --language simple --mode sequential --max-words 20
    lexiforge analyze thara elen mirion --language elvish
    lexiforge languages
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from . import __version__
from .analysis import Analyzer, WordAnalyzer
from .entropy import RandomSource
from .errors import LexiforgeError, SequenceExhaustedError
from .generator import GenerationMode
from .languages import available_languages, builder_for, builder_from_config, load_language
from .phonemes import PhonemeInventory
from .romanization import RomanizationMap
from .settings import get_setting

MODES = [mode.value for mode in GenerationMode]


# =============================================================================
# Utilities
# =============================================================================

class Output:
    """Handles CLI output with quiet mode support."""

    def __init__(self, quiet: bool = False):
        self.quiet = quiet
        self.console = Console(highlight=False)
        self.err_console = Console(stderr=True, highlight=False)

    def print(self, *args, **kwargs):
        if not self.quiet:
            self.console.print(*args, **kwargs)

    def data(self, text: str):
        """Program output that is printed even in quiet mode."""
        self.console.print(text, markup=False, highlight=False, emoji=False, soft_wrap=True)

    def error(self, msg: str):
        self.err_console.print(f"[bold red]Error:[/] {escape(msg)}")

    def table(self, headers: list, rows: list, title: str = None):
        """Print a formatted table."""
        if self.quiet:
            return
        table = Table(title=title, box=box.SIMPLE_HEAD)
        for header in headers:
            table.add_column(str(header))
        for row in rows:
            table.add_row(*(str(c) for c in row))
        self.console.print(table)


def configure_logging(verbose: bool = False):
    level = logging.DEBUG if verbose else get_setting('logging.level', 'WARNING')
    logging.basicConfig(
        level=level,
        format=get_setting('logging.format', '%(message)s'),
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _builder(args):
    if getattr(args, 'config', None):
        return builder_from_config(load_language(Path(args.config)), args.config)
    return builder_for(args.language)


# =============================================================================
# Commands
# =============================================================================

def cmd_generate(args, out: Output):
    """Generate words."""
    builder = _builder(args)
    if args.seed is not None:
        builder.with_random_source(RandomSource(args.seed))
    if args.mode == 'sequential':
        builder.sequential_mode(args.max_words)
    elif args.mode == 'weighted_random':
        builder.weighted_random_mode()
    else:
        builder.random_mode()
    if args.max_attempts is not None:
        builder.with_max_attempts(args.max_attempts)

    generator = builder.build()

    out.print(f"Generating {args.count} words ({args.config or args.language}, {args.mode})...")
    words = []
    for _ in range(args.count):
        try:
            words.append(generator.generate_word(syllable_count=args.syllables))
        except SequenceExhaustedError:
            out.print(f"Enumeration finished after {len(words)} words")
            break

    if args.json:
        out.data(json.dumps([{
            'word': w.word,
            'phonemes': w.phonemes,
            'syllables': w.syllables,
            'patterns': w.patterns,
        } for w in words], ensure_ascii=False, indent=2))
        return 0

    if args.verbose:
        out.table(
            ['#', 'Word', 'Phonemes', 'Patterns', 'Attempts'],
            [(i, w.word, ' '.join(w.phonemes), '.'.join(w.patterns), w.attempts)
             for i, w in enumerate(words, 1)],
        )
    else:
        for w in words:
            out.data(w.word)
    return 0


def cmd_analyze(args, out: Output):
    """Analyze words."""
    words = list(args.words)
    if args.file:
        text = Path(args.file).read_text(encoding='utf-8')
        words.extend(w for w in text.split() if w)
    if not words:
        out.error("No words to analyze")
        return 1

    romanization, inventory = RomanizationMap(), None
    if args.language:
        cfg = load_language(args.language)
        romanization = RomanizationMap(cfg.get('romanization') or {})
        inventory = PhonemeInventory(cfg.get('consonants') or [], cfg.get('vowels') or [])

    analysis = Analyzer(romanization, inventory).analyze(words, smoothing=args.smoothing)

    if args.json:
        out.data(json.dumps(analysis.to_dict(), ensure_ascii=False, indent=2, default=str))
        return 0

    if args.verbose:
        analyzer = WordAnalyzer(romanization, inventory)
        out.table(
            ['Word', 'Phonemes', 'Syllables', 'Clusters', 'Complexity'],
            [(a.word, ' '.join(a.phonemes), '.'.join(a.syllable_patterns),
              ', '.join(a.clusters) or '-', a.complexity_score)
             for a in map(analyzer.analyze, words)],
        )
    out.data(analysis.summary())
    return 0


def cmd_languages(args, out: Output):
    """List bundled language presets."""
    rows = []
    for name in available_languages():
        cfg = load_language(name)
        rows.append((name, cfg.get('name', name), cfg.get('description', '')))
    if out.quiet:
        for name, _, _ in rows:
            out.data(name)
    else:
        out.table(['Preset', 'Name', 'Description'], rows)
    return 0


# =============================================================================
# Main
# =============================================================================

def main(argv=None):
    parser = argparse.ArgumentParser(
        prog='lexiforge',
        description='Lexiforge - Procedural Conlang Word Generator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s generate -n 10 --language elvish --seed 42
  %(prog)s generate --language simple --mode sequential --max-words 20
  %(prog)s generate --config mylang.yaml --syllables 3 --json
  %(prog)s analyze thara elen mirion --language elvish -v
  %(prog)s languages
"""
    )

    parser.add_argument('--version', '-V', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--quiet', '-q', action='store_true', help='Suppress non-essential output')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # --- generate ---
    p = subparsers.add_parser('generate', aliases=['gen', 'g'], help='Generate words')
    p.add_argument('-n', '--count', type=int, default=10, help='Number of words (default: 10)')
    p.add_argument('--language', '-l', default='simple', help='Language preset (default: simple)')
    p.add_argument('--config', '-c', help='Path to a language YAML file (overrides --language)')
    p.add_argument('--mode', '-m', choices=MODES, default='random', help='Generation mode')
    p.add_argument('--seed', type=int, help='Seed for reproducible output')
    p.add_argument('--syllables', type=int, help='Force a syllable count (samples randomly)')
    p.add_argument('--max-words', type=int, help='Word limit for sequential mode')
    p.add_argument('--max-attempts', type=int, help='Retry ceiling per word')
    p.add_argument('--json', '-j', action='store_true', help='Output as JSON')
    p.add_argument('--verbose', '-v', action='store_true', help='Show detailed output')

    # --- analyze ---
    p = subparsers.add_parser('analyze', aliases=['a'], help='Analyze a word corpus')
    p.add_argument('words', nargs='*', help='Words to analyze')
    p.add_argument('--file', '-f', help='Read whitespace-separated words from a file')
    p.add_argument('--language', '-l', help='Use the romanization of a language preset')
    p.add_argument('--smoothing', '-s', action='store_true', help='Apply frequency smoothing')
    p.add_argument('--json', '-j', action='store_true', help='Output as JSON')
    p.add_argument('--verbose', '-v', action='store_true', help='Show per-word breakdown')

    # --- languages ---
    subparsers.add_parser('languages', aliases=['ls'], help='List language presets')

    # Parse
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    # Handle aliases
    cmd_map = {
        'gen': 'generate', 'g': 'generate',
        'a': 'analyze',
        'ls': 'languages',
    }
    command = cmd_map.get(args.command, args.command)

    verbose = getattr(args, 'verbose', False)
    configure_logging(verbose)
    out = Output(quiet=args.quiet)

    # Dispatch
    commands = {
        'generate': cmd_generate,
        'analyze': cmd_analyze,
        'languages': cmd_languages,
    }

    handler = commands.get(command)
    if handler:
        try:
            return handler(args, out)
        except KeyboardInterrupt:
            out.print("\nCancelled.")
            return 130
        except (LexiforgeError, OSError) as e:
            out.error(str(e))
            if verbose:
                import traceback
                traceback.print_exc()
            return 1

    parser.print_help()
    return 0


if __name__ == '__main__':
    sys.exit(main())
