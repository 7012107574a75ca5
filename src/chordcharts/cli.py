import logging
import sys
from pathlib import Path

import click

from .canvas import PdfCanvas
from .chords import Instrument
from .exceptions import FetchError, SourceError, UnsupportedSourceError
from .layout import Renderer
from .models import RenderOptions
from .pagedim import PageDim
from .parser import parse_lines
from .registry import get_source

logger = logging.getLogger(__name__)


def render(options: RenderOptions, inputs: list[str]) -> list[str]:
    """Render *inputs* into one PDF as described by *options*.

    Inputs that cannot be read are reported and skipped.  Returns the
    inputs that failed.
    """
    canvas = PdfCanvas(options.output, title=options.title, author=options.author)
    renderer = Renderer(canvas, Instrument(options.instrument), options.base_size)
    page = PageDim.a4(options.landscape, 1, options.duplex, options.show_pageno)
    failed = []

    for location in inputs:
        try:
            lines = get_source(location).read_lines(location)
        except FetchError as exc:
            msg = f"Error: Could not fetch {exc.url}"
            if exc.status_code:
                msg += f" (HTTP {exc.status_code})"
            click.echo(msg, err=True)
            failed.append(location)
            continue
        except (SourceError, UnsupportedSourceError) as exc:
            click.echo(f"Error: {exc}", err=True)
            failed.append(location)
            continue
        logger.debug("Rendering %s from page %d", location, page.pageno)
        filename = Path(location).name if options.show_filename else None
        page = renderer.render_song(parse_lines(lines), page, filename)

    if options.chords_page:
        renderer.render_chord_reference(page)
    canvas.save()
    return failed


@click.command()
@click.argument("files", nargs=-1, required=True, metavar="FILE...")
@click.option("-o", "--output", default="chords.pdf", show_default=True, metavar="PATH",
              help="PDF file to write.")
@click.option("--title", default=None, help="Document title metadata.")
@click.option("--author", default=None, help="Document author metadata.")
@click.option("--instrument", type=click.Choice([i.value for i in Instrument]),
              default=Instrument.GUITAR.value, show_default=True,
              help="Instrument to draw chord boxes for.")
@click.option("--chords", "chords_page", is_flag=True, default=False,
              help="Add pages showing every known chord at the end.")
@click.option("--show-filename", is_flag=True, default=False,
              help="Print the source file name at the bottom of each page.")
@click.option("--landscape", is_flag=True, default=False, help="Landscape A4 pages.")
@click.option("--duplex", is_flag=True, default=False,
              help="Mirror margins on even pages for double-sided printing.")
@click.option("--pagenos/--no-pagenos", "show_pageno", default=True, show_default=True,
              help="Print page numbers.")
@click.option("--base-size", type=float, default=14.0, show_default=True,
              help="Lyric font size in points; other sizes scale with it.")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Show debug output.")
def main(files: tuple[str, ...], output: str, title: str | None, author: str | None,
         instrument: str, chords_page: bool, show_filename: bool, landscape: bool,
         duplex: bool, show_pageno: bool, base_size: float, verbose: bool) -> None:
    """Render chopro song files to a PDF of chord charts.

    \b
    Inputs may be local paths or http(s) URLs.  Each file starts on a new
    page; {new_song} starts another song within a file.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )
    options = RenderOptions(
        output=output,
        title=title,
        author=author,
        instrument=instrument,
        chords_page=chords_page,
        show_filename=show_filename,
        landscape=landscape,
        duplex=duplex,
        show_pageno=show_pageno,
        base_size=base_size,
    )

    failed = render(options, list(files))

    click.echo(f"Written to {output}")
    if failed:
        click.echo(f"Error: {len(failed)} of {len(files)} input(s) could not be read", err=True)
        sys.exit(1)
