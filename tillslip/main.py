"""Entry point for the tillslip command line.

In normal use this is started by the "tillslip" script calling main().
"""

import sys
import argparse
import logging
from . import cmdline
from . import startup
from . import layout
from . import loader
from . import paper
from .config import ConfigError

# The following imports are to ensure subcommands are loaded
from . import config  # noqa: F401
# End of subcommand imports

log = logging.getLogger(__name__)


def line_width(value):
    try:
        width = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"'{value}' is not a valid line width")
    if width < 1:
        raise argparse.ArgumentTypeError(
            "line width must be at least 1")
    return width


def paper_size(value):
    try:
        return paper.width_for_paper(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


class receipt(cmdline.command):
    """
    Lay out an order as a plain text receipt.

    The order is read as JSON from a file, from stdin if ORDER is "-",
    or from an http or https URL.
    """
    help = "print an order as a plain text receipt"

    @staticmethod
    def add_arguments(parser):
        parser.add_argument(
            "order", metavar="ORDER",
            help="order file, URL or '-' for stdin")
        widthgroup = parser.add_mutually_exclusive_group()
        widthgroup.add_argument(
            "-w", "--width", dest="width", type=line_width, default=None,
            metavar="CHARS", help="Characters per line")
        widthgroup.add_argument(
            "-p", "--paper", dest="width", type=paper_size,
            metavar="PAPER", help="Paper size: one of "
            f"{', '.join(paper.papers)}")
        parser.add_argument(
            "-b", "--brand", dest="brand", default=None,
            help="Brand name printed at the top of the receipt")
        parser.add_argument(
            "-o", "--output", dest="output", default=None,
            type=argparse.FileType('w', encoding='utf-8'),
            help="Write the receipt to this file instead of stdout")

    @staticmethod
    def run(args):
        try:
            settings, options = startup.read_settings(args)
            order = loader.load_order(args.order)
        except (ConfigError, loader.LoadError) as e:
            print(e.desc, file=sys.stderr)
            return 1
        if args.width is not None:
            options['width'] = args.width
        if args.brand is not None:
            options['brand_name'] = args.brand
        text = layout.build_receipt_text(
            order, settings, width=options['width'],
            brand_name=options['brand_name'])
        if args.output is None:
            print(text)
        else:
            with args.output as f:
                f.write(text)
                f.write("\n")


def main(argv=None):
    """Usual main entry point for tillslip.

    Returns the exit status of the command that was run.
    """
    parser = argparse.ArgumentParser(
        description="Lay out orders as receipts for thermal printers")

    startup.add_common_arguments(parser)

    cmdline.command.add_subparsers(parser)

    args = parser.parse_args(argv)

    if not hasattr(args, 'command'):
        parser.error("No command supplied")

    startup.configure_logging(args)

    return args.command.run(args) or 0


if __name__ == '__main__':
    sys.exit(main())
