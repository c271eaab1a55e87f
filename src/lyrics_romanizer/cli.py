"""Command-line interface using Click."""

import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import click

from . import __version__, config
from .core.detection import ScriptDetector
from .core.languages import ROMANIZATION_SYSTEMS, SCRIPT_CODES
from .core.models import CASES, LONG_VOWELS, TONE_STYLES
from .core.pipeline import (
    MusicRomanizationPipeline,
    RomanizationPipeline,
    build_pipelines,
)
from .exceptions import RomanizerError
from .utils.cache import NAMESPACES, create_cache_store
from .utils.logging import setup_logging, uvicorn_log_config


def _pipelines(ctx) -> Tuple[RomanizationPipeline, MusicRomanizationPipeline]:
    if 'pipelines' not in ctx.obj:
        ctx.obj['pipelines'] = build_pipelines()
    return ctx.obj['pipelines']


def _collect_options(
    case, separator, tone_style, long_vowels, no_normalize
) -> Dict[str, Any]:
    """Only flags the user actually set, so defaults stay in one place."""
    options: Dict[str, Any] = {}
    if case:
        options['case'] = case
    if separator is not None:
        options['separator'] = separator
    if tone_style:
        options['tone_style'] = tone_style
    if long_vowels:
        options['long_vowels'] = long_vowels
    if no_normalize:
        options['normalize_variants'] = False
    return options


def _echo_json(payload: Dict[str, Any]):
    click.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def option_flags(func):
    """Rendering options shared by ``romanize`` and ``music``."""
    decorators = [
        click.option('--case', type=click.Choice(CASES), help='Output case'),
        click.option('--separator', default=None, help='Separator between units'),
        click.option('--tone-style', type=click.Choice(TONE_STYLES),
                     help='Mandarin tone rendering'),
        click.option('--long-vowels', type=click.Choice(LONG_VOWELS),
                     help='Japanese long vowel rendering'),
        click.option('--no-normalize', is_flag=True,
                     help='Skip variant character normalization'),
        click.option('--json', 'as_json', is_flag=True,
                     help='Print the full JSON payload'),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--log-file', type=click.Path(), help='Log to file')
@click.pass_context
def cli(ctx, verbose, log_file):
    """Lyrics Romanizer - romanize CJK, Korean and Russian text and song lyrics."""
    ctx.ensure_object(dict)
    logger = setup_logging(
        level="DEBUG" if verbose else "INFO",
        log_file=Path(log_file) if log_file else None,
        verbose=verbose
    )
    ctx.obj['logger'] = logger
    ctx.obj['verbose'] = verbose


def _fail(ctx, e: Exception):
    logger = ctx.obj['logger']
    if isinstance(e, RomanizerError):
        logger.error(f"❌ {e.message}")
    else:
        logger.error(f"❌ Unexpected error: {e}")
        if ctx.obj.get('verbose'):
            import traceback
            traceback.print_exc()
    sys.exit(1)


@cli.command()
@click.argument('text')
@click.option('--language', '-l', type=click.Choice(SCRIPT_CODES),
              help='Script code (detected when omitted)')
@click.option('--system', '-s', type=click.Choice(ROMANIZATION_SYSTEMS),
              help='Romanization system (script default when omitted)')
@option_flags
@click.pass_context
def romanize(ctx, text, language, system, case, separator, tone_style,
             long_vowels, no_normalize, as_json):
    """Romanize TEXT."""
    options = _collect_options(case, separator, tone_style, long_vowels, no_normalize)
    try:
        text_pipeline, _ = _pipelines(ctx)
        result = text_pipeline.romanize(text, language, system, options)
    except Exception as e:
        _fail(ctx, e)

    if as_json:
        _echo_json(result)
    else:
        click.echo(result['romanized'])


@cli.command()
@click.argument('artist')
@click.argument('title')
@click.option('--language', '-l', type=click.Choice(SCRIPT_CODES),
              help='Script code (detected from artist and title when omitted)')
@click.option('--system', '-s', type=click.Choice(ROMANIZATION_SYSTEMS),
              help='Romanization system (script default when omitted)')
@click.option('--platform', '-p', help='Only look the song up on this source')
@option_flags
@click.pass_context
def music(ctx, artist, title, language, system, platform, case, separator,
          tone_style, long_vowels, no_normalize, as_json):
    """Find ARTIST - TITLE and romanize its lyrics."""
    options = _collect_options(case, separator, tone_style, long_vowels, no_normalize)
    try:
        _, music_pipeline = _pipelines(ctx)
        result = music_pipeline.romanize(
            artist, title, language, system, platform, options
        )
    except Exception as e:
        _fail(ctx, e)

    if as_json:
        _echo_json(result)
        return

    song = result['song']
    click.echo(f"{song['artist']['romanized']} - {song['title']['romanized']}")
    click.echo(f"({song['artist']['original']} - {song['title']['original']}, "
               f"source: {result['metadata']['source']})")
    click.echo()
    for line in result['lines']:
        prefix = ''
        if line['timestamp'] is not None:
            minutes, seconds = divmod(line['timestamp'], 60)
            prefix = f"[{int(minutes):02d}:{seconds:05.2f}] "
        click.echo(f"{prefix}{line['romanized']}")


@cli.command()
@click.argument('text')
@click.pass_context
def detect(ctx, text):
    """Print the detected script code of TEXT."""
    try:
        detection = ScriptDetector().detect_with_confidence(text)
    except Exception as e:
        _fail(ctx, e)
    click.echo(f"{detection.script} ({detection.confidence:.2f})")


@cli.command()
@click.option('--host', default=config.DEFAULT_HOST, help='Bind address')
@click.option('--port', type=int, default=config.DEFAULT_PORT, help='Port')
@click.option('--reload', is_flag=True, help='Reload on code changes')
@click.option('--access-log', is_flag=True, help='Log every request')
@click.pass_context
def serve(ctx, host, port, reload, access_log):
    """Run the HTTP API with uvicorn."""
    import uvicorn

    verbose = ctx.obj.get('verbose', False)
    uvicorn.run(
        "lyrics_romanizer.server:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        access_log=access_log,
        log_config=uvicorn_log_config(
            level="DEBUG" if verbose else "INFO",
            verbose=verbose,
            access_log=access_log,
        ),
    )


@cli.group()
@click.option('--backend', type=click.Choice(config.CACHE_BACKENDS),
              help='Cache backend (defaults to LYRICS_ROMANIZER_CACHE)')
@click.pass_context
def cache(ctx, backend: Optional[str]):
    """Cache management commands."""
    ctx.obj['cache_backend'] = backend


@cache.command()
@click.pass_context
def stats(ctx):
    """Show cache statistics."""
    try:
        store = create_cache_store(ctx.obj.get('cache_backend'))
        stats = store.stats()
    except Exception as e:
        _fail(ctx, e)
    click.echo(f"Backend: {stats['backend']}")
    click.echo(f"Entries: {stats['total_entries']}")
    for namespace, count in stats['namespaces'].items():
        click.echo(f"  {namespace}: {count}")


@cache.command()
@click.option('--namespace', type=click.Choice(NAMESPACES),
              help='Only clear this namespace')
@click.confirmation_option(prompt='Are you sure you want to clear the cache?')
@click.pass_context
def clear(ctx, namespace):
    """Delete cached responses."""
    try:
        store = create_cache_store(ctx.obj.get('cache_backend'))
        removed = store.clear(namespace)
    except Exception as e:
        _fail(ctx, e)
    click.echo(f"✅ Removed {removed} cache entries")


if __name__ == '__main__':
    cli()
