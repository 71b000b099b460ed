"""Things that happen as the tillslip command line is starting up."""

import logging
import logging.config
import argparse
import tomli
from . import config
from .models import ReceiptSettings
from .version import version

log = logging.getLogger(__name__)


def add_common_arguments(parser):
    parser.add_argument("--version", action="version", version=version)
    parser.add_argument("-s", "--settings", action="store",
                        dest="settings", default=None, metavar="FILE",
                        help="Receipt settings file in TOML")
    loggroup = parser.add_mutually_exclusive_group()
    loggroup.add_argument("-y", "--log-config",
                          help="Logging configuration file "
                          "in TOML", type=argparse.FileType('rb'),
                          dest="logconfig")
    loggroup.add_argument("-l", "--logfile", type=argparse.FileType('a'),
                          dest="logfile", help="Simple logging output file")
    parser.add_argument("--debug", action="store_true", dest="debug",
                        help="Include debug output in log")


def configure_logging(args, stderr_level=logging.ERROR):
    # If we have a log configuration file, read it and apply it.
    # Otherwise errors go to stderr, and everything from INFO (or
    # DEBUG) upwards goes to the log file if there is one.
    rootlog = logging.getLogger()
    formatter = logging.Formatter(
        '%(asctime)s %(levelname)s %(name)s\n  %(message)s')
    if args.logconfig:
        logconfig = tomli.load(args.logconfig)
        args.logconfig.close()
        logging.config.dictConfig(logconfig)
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        handler.setLevel(stderr_level)
        rootlog.addHandler(handler)
    if args.logfile:
        loglevel = logging.DEBUG if args.debug else logging.INFO
        loghandler = logging.StreamHandler(args.logfile)
        loghandler.setFormatter(formatter)
        loghandler.setLevel(loglevel)
        rootlog.addHandler(loghandler)
        rootlog.setLevel(loglevel)
    if args.debug:
        rootlog.setLevel(logging.DEBUG)

    return rootlog


def read_settings(args):
    """Receipt settings and layout from the settings file, if there is one

    Raises config.ConfigError if the file can't be read.
    """
    if args.settings:
        return config.read_settings_file(args.settings)
    log.info("running with default receipt settings")
    return ReceiptSettings(), config.layout_from_table({})
