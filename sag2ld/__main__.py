import sys
import os.path
import collections as co
from argparse import Namespace
from .argstuff import ArgumentParser, nsmerge
from .errors import SagError
from .parser import parse_file
from .layout import CONFIGS, FALLBACK, getconfig, load_layouts
from .outputs import OUTPUTS

COMMANDS = co.OrderedDict()
def command(cls):
    assert cls.__argname__ not in COMMANDS
    COMMANDS[cls.__argname__] = cls
    return cls

def prog():
    name = os.path.basename(sys.argv[0])
    # run as python -m sag2ld
    return 'sag2ld' if name == '__main__.py' else name

def recipe_argparse(parser):
    parser.add_argument('--input',
        help="SAG file to read.")
    parser.add_argument('--output',
        help="Where to write the linkerscript. Defaults to stdout.")
    parser.add_argument('--config',
        help="Memory layout to generate against, either a built-in "
            "config {%s} or a layout from the recipe. Defaults to ddr."
            % ', '.join(CONFIGS))
    parser.add_argument('--fallback', type=bool,
        help="Write a minimal fallback memory layout instead of failing "
            "if the SAG file can't be parsed.")

def scan(recipe=None, **args):
    """
    Merge command-line arguments with a recipe.toml, if one is found.
    Explicit arguments take precedence. Returns the merged arguments and
    any layouts declared in the recipe.
    """
    parser = ArgumentParser(add_help=False)
    recipe_argparse(parser)

    path = recipe or 'recipe.toml'
    try:
        nargs, tables = parser.parse_toml(path, skip={'layout'})
    except FileNotFoundError:
        if recipe:
            # raise if explicitly requested
            raise
        return Namespace(**args), co.OrderedDict()

    return nsmerge(nargs, args), load_layouts(tables)

def recipe_option(parser):
    parser.add_argument('--recipe',
        help="Path to recipe.toml file with default options and extra "
            "memory layouts. Defaults to ./recipe.toml.")

@command
class BuildCommand:
    """
    Generate a linkerscript from a SAG file.
    """
    __argname__ = "build"
    __arghelp__ = __doc__
    @classmethod
    def __argparse__(cls, parser):
        parser.add_argument('input', nargs='?',
            help="SAG file to read.")
        parser.add_argument('-o', '--output',
            help="Where to write the linkerscript. Defaults to stdout.")
        parser.add_argument('-c', '--config',
            help="Memory layout to generate against. Defaults to ddr.")
        parser.add_argument('--fallback', type=bool,
            help="Write a minimal fallback memory layout instead of "
                "failing if the SAG file can't be parsed.")
        recipe_option(parser)
    def __init__(self, **args):
        args, layouts = scan(**args)
        if not args.input:
            raise ValueError("No input file specified")
        config = getconfig(args.config or 'ddr', layouts)

        try:
            sag = parse_file(args.input)
            script = OUTPUTS['ld'](config).render(sag)
        except SagError as e:
            if not args.fallback:
                raise
            print('%s: warning: could not parse %s: %s' % (
                prog(), args.input, e), file=sys.stderr)
            print('%s: warning: using fallback memory layout' % prog(),
                file=sys.stderr)
            script = FALLBACK

        if args.output:
            print('generating %(output)s from %(input)s (%(config)s)' % dict(
                output=args.output,
                input=args.input,
                config=args.config or 'ddr'), file=sys.stderr)
            with open(args.output, 'w') as outf:
                outf.write(script)
        else:
            sys.stdout.write(script)

@command
class AstCommand:
    """
    Show how a SAG file was parsed.
    """
    __argname__ = "ast"
    __arghelp__ = __doc__
    @classmethod
    def __argparse__(cls, parser):
        parser.add_argument('input', nargs='?',
            help="SAG file to read.")
        recipe_option(parser)
    def __init__(self, **args):
        args, _ = scan(**args)
        if not args.input:
            raise ValueError("No input file specified")
        sag = parse_file(args.input)
        sys.stdout.write(OUTPUTS['ast']().render(sag))

@command
class ConfigsCommand:
    """
    List the available memory layouts, built-in and from the recipe.
    """
    __argname__ = "configs"
    __arghelp__ = __doc__
    @classmethod
    def __argparse__(cls, parser):
        recipe_option(parser)
    def __init__(self, **args):
        _, layouts = scan(**args)
        print("available configs:")
        for name in list(CONFIGS) + list(layouts):
            config = getconfig(name, layouts)
            print(4*' '+'%(name)-19s %(desc)s' % dict(
                name=name, desc=config.name))
            for memname, memory in config.memory_regions.items():
                print(8*' '+'%(name)-15s %(memory)s' % dict(
                    name=memname, memory=memory))

def main():
    parser = ArgumentParser(
        description="Convert SAG memory layout files into GNU LD "
            "linkerscripts.")
    subparsers = parser.add_subparsers(title="subcommand", dest="command",
        help="Command to run.")
    for name, command in COMMANDS.items():
        subparser = subparsers.add_parser(name,
            help=" ".join(command.__arghelp__.split()),
            aliases=getattr(command, '__argaliases__', []))
        subparser.set_defaults(command=command)
        if hasattr(command, '__argparse__'):
            command.__argparse__(subparser)

    args = parser.parse_args()
    if not args.command:
        parser.parse_args(['-h'])
    try:
        args.command(**{
            k: v for k, v in args.__dict__.items()
            if k != 'command'})
    except (SagError, ValueError, OSError) as e:
        print('%s: error: %s' % (prog(), e), file=sys.stderr)
        sys.exit(1)
    sys.exit(0)

if __name__ == "__main__":
    main()
