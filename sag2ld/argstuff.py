import argparse
import sys
import os
import toml
from argparse import Namespace

def nsmerge(a, b):
    """
    Merge two Namespaces or dicts, values in b win unless they're None.
    Note this doesn't work with argparse defaults.
    """
    if isinstance(a, Namespace):
        a = a.__dict__
    if isinstance(b, Namespace):
        b = b.__dict__

    ndict = {}
    for k in set(a) | set(b):
        if k in b and b[k] is not None:
            ndict[k] = b[k]
        elif k in a and a[k] is not None:
            ndict[k] = a[k]
        else:
            ndict[k] = None
    return Namespace(**ndict)

# This class exists to add a few argument types and to apply the same
# rules to recipe.toml files.
class ArgumentParser(argparse.ArgumentParser):
    def __init__(self, *args, **kwargs):
        # things get confusing with abbrevs
        kwargs.setdefault('allow_abbrev', False)
        super().__init__(*args, **kwargs)

    def add_argument(self, *args, **kwargs):
        # default gets in the way of merging with recipes, just test
        # for None where needed
        assert kwargs.get('default', None) in {None, argparse.SUPPRESS}, (
            "default in argparse not supported")

        # some extra special types
        if kwargs.get('type', None) == bool:
            def parsebool(x):
                if x in {'false', 'False', 'no', '0', ''}:
                    return False
                elif x in {'true', 'True', 'yes', '1'}:
                    return True
                else:
                    raise ValueError("I don't recognize this bool "
                        "argument %r" % x)
            kwargs['type'] = parsebool
            kwargs.setdefault('nargs', '?')
            kwargs.setdefault('const', True)
            kwargs.setdefault('metavar', '{true,false}')

        return super().add_argument(*args, **kwargs)

    def parse_dict(self, dict_):
        """
        Apply the argument parser to a dictionary, sanitizing and applying
        the same type rules that would be applied on the command line.
        """
        args = []
        for k, v in dict_.items():
            if v is None:
                pass
            elif v is True:
                args.append('--%s=true' % k)
            elif v is False:
                args.append('--%s=false' % k)
            else:
                args.append('--%s=%s' % (k, v))

        return self.parse_args(args)

    def parse_toml(self, path, skip=()):
        """
        Convenience method for applying parse_dict to a toml file. Tables
        named in skip are left out and returned raw for the caller.
        """
        recipe = toml.load(path)
        try:
            ns = self.parse_dict(
                {k: v for k, v in recipe.items() if k not in skip})
        except SystemExit:
            print("%s: error: while parsing %r" % (
                os.path.basename(sys.argv[0]), path),
                file=sys.stderr)
            raise
        return ns, {k: v for k, v in recipe.items() if k in skip}
