"""
Command line interface for doc2slides
"""

import asyncio
import json
import sys
import uuid
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TimeElapsedColumn
from rich.table import Table

from . import __version__
from .ai.providers import create_text_transform
from .chunking.token_chunker import TokenBudgetChunker
from .core.config import AppConfig, validate_config
from .core.exceptions import Doc2SlidesError
from .core.models import DocumentContent, ProgressStage
from .services.document_processor import DocumentProcessor
from .services.enhancement import EnhancementOrchestrator
from .services.progress_tracker import ProgressTracker
from .slides import create_slide_sink
from .utils.logger import setup_logging, get_logger
from .utils.thread_pool import thread_pool
from .utils.validators import validate_file_path

console = Console()
logger = get_logger(__name__)

POLL_INTERVAL = 0.2


@click.group()
@click.version_option(version=__version__, prog_name="doc2slides")
@click.option("--env-file", "-e", type=click.Path(exists=True, dir_okay=False), help="Settings file (.env format)")
@click.option("--log-level", default=None,
              type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
              help="Log level (defaults to LOG_LEVEL)")
@click.option("--debug", is_flag=True, help="Debug mode")
@click.pass_context
def cli(ctx, env_file: Optional[str], log_level: Optional[str], debug: bool):
    """doc2slides - turn PDF, DOCX and TXT documents into slide decks"""
    ctx.ensure_object(dict)

    config = AppConfig(_env_file=env_file) if env_file else AppConfig()

    level = "DEBUG" if debug else (log_level or config.log_level)
    setup_logging(level=level.upper(), log_file=config.log_file, rich_logging=True)

    errors = validate_config(config)
    if errors:
        for error in errors:
            console.print(f"[red]Configuration error:[/red] {error}")
        sys.exit(1)

    ctx.obj["config"] = config
    ctx.obj["debug"] = debug
    ctx.call_on_close(thread_pool.shutdown)


def _load_content(config: AppConfig, file_path: str) -> DocumentContent:
    if not validate_file_path(file_path):
        raise click.BadParameter(f"not a readable file: {file_path}")
    processor = DocumentProcessor(config)
    return asyncio.run(processor.process_file(file_path))


async def _enhance_with_progress(orchestrator: EnhancementOrchestrator, content: DocumentContent) -> DocumentContent:
    document_id = uuid.uuid4().hex
    tracker = orchestrator.progress

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        TimeElapsedColumn(),
        console=console,
    ) as progress:
        bar = progress.add_task("Starting...", total=100)
        job = asyncio.ensure_future(orchestrator.enhance(content, document_id))
        while not job.done():
            record = tracker.get(document_id)
            if record is not None:
                progress.update(bar, description=record.message or record.stage.value, completed=record.progress)
            await asyncio.wait({job}, timeout=POLL_INTERVAL)
        enhanced = job.result()
        progress.update(bar, description=ProgressStage.COMPLETE.value, completed=100)

    return enhanced


def _show_sections(content: DocumentContent):
    table = Table(title=f"Sections of \"{content.title}\"")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Title", style="cyan")
    table.add_column("Level", justify="right")
    table.add_column("Type", style="green")
    table.add_column("Characters", justify="right")

    for i, section in enumerate(content.sections, 1):
        table.add_row(str(i), section.title, str(section.level), section.type.value, str(len(section.content)))

    console.print(table)


@cli.command()
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--no-enhance", is_flag=True, help="Skip language model enhancement")
@click.option("--slides", is_flag=True, help="Build a presentation from the result")
@click.option("--backend", type=click.Choice(list(AppConfig.SLIDES_BACKENDS)), default=None,
              help="Slides backend (defaults to SLIDES_BACKEND)")
@click.option("--template", "template_id", default=None, help="Presentation template to build on")
@click.option("--output", "-o", "output_path", type=click.Path(dir_okay=False), help="Write the sections as JSON")
@click.pass_context
def process(ctx, file_path: str, no_enhance: bool, slides: bool, backend: Optional[str],
            template_id: Optional[str], output_path: Optional[str]):
    """Extract, segment and enhance a document"""
    config: AppConfig = ctx.obj["config"]
    if backend:
        config = config.model_copy(update={"slides_backend": backend})

    async def _run():
        processor = DocumentProcessor(config)
        content = await processor.process_file(file_path)
        console.print(f"[green]Extracted[/green] {len(content.sections)} sections from {Path(file_path).name}")

        orchestrator = EnhancementOrchestrator(create_text_transform(config), progress=ProgressTracker(), config=config)
        if no_enhance:
            console.print("[yellow]Enhancement skipped[/yellow]")
        elif config.effective_transform_provider == "disabled":
            console.print("[yellow]No language model configured, sections are kept as extracted[/yellow]")
            content = await orchestrator.enhance(content)
        else:
            content = await _enhance_with_progress(orchestrator, content)

        presentation_id = None
        if slides:
            sink = create_slide_sink(config)
            subtitle = await orchestrator.describe_title(content.title)
            presentation_id = await sink.build(content, template_id=template_id, subtitle=subtitle)
        return content, presentation_id

    try:
        content, presentation_id = asyncio.run(_run())
    except Doc2SlidesError as e:
        console.print(f"[red]Processing failed:[/red] {e}")
        logger.error(f"Processing failed: {e}", exc_info=ctx.obj.get("debug", False))
        sys.exit(1)

    result_json = content.model_dump(mode="json", by_alias=True)
    if output_path:
        output_file = Path(output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        with open(output_file, "w", encoding="utf-8") as f:
            json.dump(result_json, f, ensure_ascii=False, indent=2)
        console.print(f"[green]Sections saved to:[/green] {output_file}")

    _show_sections(content)

    if presentation_id:
        console.print(f"[green]Presentation created:[/green] {presentation_id}")
        if config.slides_backend == "pptx":
            console.print(f"[dim]{Path(config.output_dir) / f'{presentation_id}.pptx'}[/dim]")


@cli.command()
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def sections(ctx, file_path: str):
    """Show how a document is segmented, without enhancement"""
    try:
        content = _load_content(ctx.obj["config"], file_path)
    except Doc2SlidesError as e:
        console.print(f"[red]Segmentation failed:[/red] {e}")
        sys.exit(1)
    _show_sections(content)


@cli.command()
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--max-tokens", type=int, default=None, help="Token budget per chunk (defaults to MAX_CHUNK_TOKENS)")
@click.pass_context
def chunk(ctx, file_path: str, max_tokens: Optional[int]):
    """Show how each section would be chunked for enhancement"""
    config: AppConfig = ctx.obj["config"]
    try:
        content = _load_content(config, file_path)
        chunker = TokenBudgetChunker(max_tokens or config.max_chunk_tokens)
    except (Doc2SlidesError, ValueError) as e:
        console.print(f"[red]Chunking failed:[/red] {e}")
        sys.exit(1)

    table = Table(title=f"Chunks per section (budget {chunker.max_tokens} tokens)")
    table.add_column("Section", style="cyan")
    table.add_column("Chunks", justify="right")
    table.add_column("Avg tokens", justify="right")
    table.add_column("Max tokens", justify="right")
    table.add_column("Over budget", justify="right", style="red")

    for section in content.sections:
        stats = chunker.get_chunk_statistics(chunker.chunk_text(section.content))
        table.add_row(
            section.title,
            str(stats["total_chunks"]),
            f"{stats['avg_tokens']:.0f}",
            str(stats["max_tokens"]),
            str(stats["over_budget"]),
        )

    console.print(table)


@cli.command()
@click.pass_context
def info(ctx):
    """Show the effective settings"""
    config: AppConfig = ctx.obj["config"]

    table = Table(title="doc2slides settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("transform provider", config.effective_transform_provider)
    for key, value in config.safe_dict().items():
        table.add_row(key, str(value))

    console.print(table)


ENV_TEMPLATE = """# Language model
OPENAI_API_KEY=your_openai_api_key_here
# OPENAI_BASE_URL=https://api.openai.com/v1
OPENAI_MODEL=gpt-4o
TEMPERATURE=0.7
# auto, openai or disabled
TRANSFORM_PROVIDER=auto
TRANSFORM_TIMEOUT=60

# Extraction
DOCX_CONVERSION_TIMEOUT=60
PDF_BATCH_SIZE=10
PDF_BATCH_DELAY=0.1

# Enhancement
MAX_CHUNK_TOKENS=4000
MIN_SECTION_LENGTH=20
MAX_CONCURRENT_SECTIONS=0

# Uploads and output
MAX_UPLOAD_SIZE_MB=10
UPLOAD_DIR=uploads
OUTPUT_DIR=output
# pptx or mock
SLIDES_BACKEND=pptx

# Logging
LOG_LEVEL=INFO
# LOG_FILE=doc2slides.log
LOG_AI_REQUESTS=false
"""


@cli.command("init-env")
@click.option("--path", "target", default=".env.template", type=click.Path(dir_okay=False),
              help="Where to write the template")
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def init_env(target: str, force: bool):
    """Create a settings template"""
    env_file = Path(target)
    if env_file.exists() and not force:
        console.print(f"[yellow]{env_file} already exists, use --force to overwrite[/yellow]")
        sys.exit(1)

    with open(env_file, "w", encoding="utf-8") as f:
        f.write(ENV_TEMPLATE)

    console.print(f"[green]Settings template created:[/green] {env_file}")
    console.print("Copy it to .env and fill in your API key")


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
