"""Subcommand registry for the tillslip command line.

Subclasses of command are added to the argument parser automatically;
the class docstring is used as the description, and "command" and
"help" class attributes may be set to override the name and summary.
"""


class command:
    _commands = []

    def __init_subclass__(cls):
        super().__init_subclass__()
        cls._commands.append(cls)

    @classmethod
    def add_subparsers(cls, parser):
        subparsers = parser.add_subparsers(title="commands")
        for c in cls._commands:
            command_name = getattr(c, "command", c.__name__)
            subparser = subparsers.add_parser(
                command_name,
                help=getattr(c, "help", None),
                description=getattr(c, "description", c.__doc__))
            c.add_arguments(subparser)
            subparser.set_defaults(command=c)

    @staticmethod
    def add_arguments(parser):
        pass

    @staticmethod
    def run(args):
        pass
