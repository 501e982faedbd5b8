from .. import outputs
from ..address import MASK
from ..sag import Addr, LoadAddr, Section, Stack

# Section stems for the shorthand tokens allowed in "* ( ... )"
MACROS = {
    '+ISR': ['vectors', 'isr'],
    '+RO':  ['text', 'rodata', 'srodata'],
    '+RW':  ['data', 'sdata'],
    '+ZI':  ['bss', 'sbss'],
}

def expand_pattern(pattern):
    """
    Expand a comma-separated section pattern into section stems,
    keeping left-to-right order.
    """
    stems = []
    for part in pattern.split(','):
        part = part.strip()
        if part in MACROS:
            stems.extend(MACROS[part])
        elif part.startswith('.'):
            stems.append(part[1:])
        else:
            stems.append(part)
    return stems

def format_size(size):
    for suffix, unit in [('G', 1024**3), ('M', 1024**2), ('K', 1024)]:
        if size >= unit and size % unit == 0:
            return '%d%s' % (size // unit, suffix)
    return '%d' % size

def fmtaddr(addr):
    return '0x%08X' % addr

@outputs.output
class LdOutput(outputs.Output):
    """
    GNU LD linkerscript for a RISC-V target.
    """
    __argname__ = "ld"
    __arghelp__ = __doc__

    def build(self, sag):
        self.printf('/* Auto-generated from SAG file */')
        self.printf('/* Config: "%(config)s" */', config=self.config.name)
        self.printf()
        self.printf('OUTPUT_ARCH(riscv)')
        self.printf('ENTRY(_start)')
        self.printf()

        self.printf('MEMORY')
        self.printf('{')
        with self.pushindent():
            for name, memory in self.config.memory_regions.items():
                self.printf('%(memory)s (%(mode)s) : '
                    'ORIGIN = %(origin)s, LENGTH = %(length)s',
                    memory=name,
                    mode=memory.attributes,
                    origin=fmtaddr(memory.origin),
                    length=format_size(memory.length))
        self.printf('}')
        self.printf()

        stack = sag.stack()
        if stack is not None:
            self.printf('__stack_top = %(stack)s;', stack=fmtaddr(stack))
            self.printf()

        self.printf('SECTIONS')
        self.printf('{')
        with self.pushindent():
            lma = 0
            for block in sag.blocks:
                lma = block.lma.resolve(lma)
                if block.alignment:
                    lma = ((lma + block.alignment-1)
                        & ~(block.alignment-1) & MASK)

                self.printf()
                self.printf('/* Block: %(type)s @ LMA %(lma)s */',
                    type=block.block_type, lma=fmtaddr(lma))
                for region in block.regions:
                    self.build_region(region, lma, region.vma.resolve(0))

            self.printf()
            self.printf('PROVIDE(_end = .);')
            self.printf('PROVIDE(end = .);')
        self.printf('}')

    def build_region(self, region, lma, vma):
        self.printf()
        self.printf('/* Region: %(region)s VMA=%(vma)s LMA=%(lma)s */',
            region=region.name, vma=fmtaddr(vma), lma=fmtaddr(lma))

        memory = self.config.region_for(vma)
        inplace = memory == self.config.region_for(lma)

        with self.pushattrs(
                memory=memory or 'RAM',
                at='' if inplace else ' AT(%d)' % lma):
            for directive in region.directives:
                if isinstance(directive, Addr):
                    self.printf('%(symbol)s = .;', symbol=directive.symbol)
                elif isinstance(directive, LoadAddr):
                    self.printf('%(symbol)s = LOADADDR(.%(section)s);',
                        symbol=directive.symbol,
                        section=region.name.lower())
                elif isinstance(directive, Stack):
                    self.printf('__stack_top = %(stack)s;',
                        stack=fmtaddr(directive.addr))
                elif isinstance(directive, Section):
                    for stem in expand_pattern(directive.pattern):
                        self.build_section(stem, directive.keep)

    def build_section(self, stem, keep):
        with self.pushattrs(section='.'+stem):
            self.printf('%(section)s :%(at)s')
            self.printf('{')
            with self.pushindent():
                if keep:
                    self.printf('KEEP(*(%(section)s))')
                    self.printf('KEEP(*(%(section)s*))')
                else:
                    self.printf('*(%(section)s)')
                    self.printf('*(%(section)s*)')
            self.printf('} > %(memory)s')

def generate(sag, config):
    """
    Generate linkerscript text for a parsed SAG file and memory layout.
    """
    return LdOutput(config).render(sag)
