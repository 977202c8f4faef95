# main.py
import argparse
import logging
import os
import sys

from phrase_viewer.app import ViewerController
from phrase_viewer.config import DEFAULT_CONTAINER_WIDTH, DEFAULT_VIEWPORT_HEIGHT
from phrase_viewer.errors import PhraseViewerError
from phrase_viewer.logger import logger, set_level


def build_parser():
    parser = argparse.ArgumentParser(
        prog="phrase-viewer",
        description="Render a PDF to fit a width and highlight a phrase in it.")
    parser.add_argument("pdf", help="path to the PDF file")
    parser.add_argument("--width", type=float, default=DEFAULT_CONTAINER_WIDTH,
                        help="container width in pixels")
    parser.add_argument("--height", type=float, default=DEFAULT_VIEWPORT_HEIGHT,
                        help="viewport height in pixels")
    query = parser.add_mutually_exclusive_group()
    query.add_argument("--phrase", help="phrase to locate")
    query.add_argument("--ref", type=int, help="reference id from the cross-reference table")
    parser.add_argument("--page", type=int, help="jump to this page after rendering")
    parser.add_argument("--out", help="directory for highlighted page images")
    parser.add_argument("--debug", action="store_true", help="verbose logging")
    return parser


def main(argv=None):
    """Main function to run the phrase viewer from the command line."""
    args = build_parser().parse_args(argv)
    if args.debug:
        set_level(logging.DEBUG)

    app = ViewerController(container_width=args.width, viewport_height=args.height)
    try:
        try:
            app.load(args.pdf)
        except PhraseViewerError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        app.wait_idle()

        for failure in app.render_failures:
            print(f"Warning: {failure}", file=sys.stderr)

        highlights = []
        if args.phrase is not None or args.ref is not None:
            if args.phrase is not None:
                highlights = app.search_and_highlight(args.phrase)
            else:
                highlights = app.resolve_phrase_and_highlight(args.ref)
            if not highlights:
                print("Text not found!", file=sys.stderr)
                return 1
            for h in highlights:
                print(f"page {h.page}: left={h.left:.1f} top={h.top:.1f} "
                      f"width={h.width:.1f} height={h.height:.1f}")
            print(f"scroll_top={app.view.scroll_top:.1f}")

        if args.page is not None:
            if app.jump_to_page(args.page):
                print(f"page {args.page}: scroll_top={app.view.scroll_top:.1f}")
            else:
                print(f"Page {args.page} is not rendered", file=sys.stderr)

        if args.out and highlights:
            os.makedirs(args.out, exist_ok=True)
            for h in highlights:
                path = os.path.join(args.out, f"page-{h.page:03d}.png")
                app.compose_page(h.page).save(path)
                logger.info("Wrote %s", path)
        return 0
    finally:
        app.close()


if __name__ == "__main__":
    sys.exit(main())
