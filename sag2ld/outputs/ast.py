from .. import outputs
from ..sag import Addr, LoadAddr, Section, Stack

@outputs.output
class AstOutput(outputs.Output):
    """
    Indented dump of the parsed SAG file, useful for checking how a
    file was understood before generating anything.
    """
    __argname__ = "ast"
    __arghelp__ = __doc__

    def build(self, sag):
        for section in sag.user_sections:
            self.printf('user_section %(section)s', section=section)

        for block in sag.blocks:
            self.printf('block %(type)s lma=%(lma)s%(align)s',
                type=block.block_type,
                lma=block.lma,
                align=' align=%d' % block.alignment
                    if block.alignment else '')
            with self.indent():
                for region in block.regions:
                    self.printf('region %(region)s vma=%(vma)s',
                        region=region.name, vma=region.vma)
                    with self.indent():
                        for directive in region.directives:
                            self.printf('%(directive)s',
                                directive=self.repr_directive(directive))

    @staticmethod
    def repr_directive(directive):
        if isinstance(directive, (Addr, LoadAddr)):
            return '%s%s %s' % (
                'ADDR' if isinstance(directive, Addr) else 'LOADADDR',
                ' NEXT' if directive.next else '',
                directive.symbol)
        elif isinstance(directive, Stack):
            return 'STACK = %#010x' % directive.addr
        elif isinstance(directive, Section):
            return '*%s ( %s )' % (
                ' KEEP' if directive.keep else '',
                directive.pattern)
        else:
            return repr(directive)
