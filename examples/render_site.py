#!/usr/bin/env python3
"""
Render the example site to stdout.

    TMPL_DEBUG=1 python examples/render_site.py

With TMPL_DEBUG set, edits under examples/site show up on every render.
"""
import logging
import sys
from datetime import date
from pathlib import Path

from tmplkit import DirFS, MarkdownRenderer, Templater, always_flush, load_config, must_preregister
from tmplkit.utils import configure_logging

logger = logging.getLogger("render_site")


def on_render_fail(sub, sink, err):
    # Re-render an error page into the same sink; if that fails too the
    # hook is not called again.
    sub.templater.execute(sink, "error", {"failed": sub.name, "reason": err})


def build_templater() -> Templater:
    config = load_config(defaults={"template_dir": str(Path(__file__).parent / "site")})
    configure_logging(config)

    templater = Templater(
        DirFS(config.template_dir),
        config,
        on_render_fail=on_render_fail,
        markdown=MarkdownRenderer(extensions=["extra"]),
    )
    templater.func("shout", lambda s: str(s).upper())
    templater.func("today", lambda: date.today().isoformat())
    must_preregister(templater)
    templater.must_preload()
    return templater


def main() -> int:
    templater = build_templater()

    @always_flush
    def handler(writer, page):
        templater.execute(writer, page, {"title": "tmplkit", "body": "Hello from the example site."})
        writer.write("\n")

    for page in ["index", "about", "missing"]:
        try:
            handler(sys.stdout, page)
        except Exception as e:
            logger.error(f"{page}: {e}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
