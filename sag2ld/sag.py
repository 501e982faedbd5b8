"""
Parsed representation of a SAG file. A SagFile holds a list of blocks,
each block holds regions, each region holds directives. Nothing here is
modified after the parser hands it back.
"""

BLOCK_TYPES = ['HEAD', 'MEM', 'LDSECTION', 'EXEC', 'DATA']
KEYWORDS = ['ADDR', 'LOADADDR', 'STACK']

class Node:
    __fields__ = ()

    def __init__(self, *args, **kwargs):
        assert len(args) <= len(self.__fields__), (
            "Too many arguments for %s" % type(self).__name__)
        values = dict(zip(self.__fields__, args))
        values.update(kwargs)
        for field in self.__fields__:
            setattr(self, field, values.get(field))

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return all(getattr(self, f) == getattr(other, f)
            for f in self.__fields__)

    def __repr__(self):
        return '%s(%s)' % (type(self).__name__, ', '.join(
            '%s=%r' % (f, getattr(self, f)) for f in self.__fields__))

class Directive(Node):
    pass

class Addr(Directive):
    """
    Define symbol at the current location counter. NEXT is kept but
    doesn't change the generated script.
    """
    __fields__ = ('symbol', 'next')

class LoadAddr(Directive):
    """
    Define symbol as the load address of the enclosing region.
    """
    __fields__ = ('symbol', 'next')

class Section(Directive):
    """
    Placement rule, pattern is the raw text between the parentheses.
    """
    __fields__ = ('pattern', 'keep')

class Stack(Directive):
    __fields__ = ('addr',)

class Region(Node):
    __fields__ = ('name', 'vma', 'directives')

class Block(Node):
    __fields__ = ('block_type', 'lma', 'alignment', 'regions')

class SagFile(Node):
    __fields__ = ('user_sections', 'blocks')

    def directives(self):
        """
        All directives in document order.
        """
        for block in self.blocks:
            for region in block.regions:
                yield from region.directives

    def stack(self):
        """
        Address of the first STACK directive, or None.
        """
        for directive in self.directives():
            if isinstance(directive, Stack):
                return directive.addr
        return None
