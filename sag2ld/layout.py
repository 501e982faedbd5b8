"""
Memory layouts a SAG file can be generated against. A layout is a named
set of non-overlapping memory regions. The built-in presets describe the
AE350 board in its two execution modes, recipes can add more.
"""

import re
import collections as co

class MemoryRegion:
    """
    Description of a memory region, parsed from "ATTRS ORIGIN LENGTH".
    """
    MODEFLAGS = ['r', 'w', 'x']

    @staticmethod
    def parsesize(s):
        m = re.match(r'^\s*((?:0[xob])?[0-9a-fA-F]+)\s*([KMG])?\s*$', s)
        if not m:
            raise ValueError("Invalid size %r" % s)
        return int(m.group(1), 0) * {
            None: 1,
            'K': 1024,
            'M': 1024*1024,
            'G': 1024*1024*1024}[m.group(2)]

    @staticmethod
    def parsememory(s):
        m = re.match(r'^\s*([rwx]+)\s+(\S+)\s+(\S+)\s*$', s)
        if not m:
            raise ValueError("Invalid memory description %r" % s)
        return (
            int(m.group(2), 0),
            MemoryRegion.parsesize(m.group(3)),
            m.group(1))

    def __init__(self, origin, length, attributes):
        self.origin = origin
        self.length = length
        self.attributes = attributes

        if not set(attributes).issubset(self.MODEFLAGS):
            raise ValueError("Invalid memory attributes %r" % attributes)
        if self.length <= 0:
            raise ValueError("Invalid memory length %#x" % self.length)

    def __contains__(self, addr):
        return self.origin <= addr < self.origin + self.length

    def overlaps(self, other):
        return (self.origin < other.origin+other.length and
            self.origin+self.length > other.origin)

    def __eq__(self, other):
        if not isinstance(other, MemoryRegion):
            return NotImplemented
        return ((self.origin, self.length, self.attributes) ==
            (other.origin, other.length, other.attributes))

    def __str__(self):
        return "%(attributes)-3s %(origin)#010x-%(end)#010x %(length)d bytes" % dict(
            attributes=self.attributes,
            origin=self.origin,
            end=self.origin+self.length-1,
            length=self.length)

class LinkerScriptConfig:
    """
    Named memory layout. Regions are kept sorted by origin, and since
    they can't overlap an address belongs to at most one region.
    """
    def __init__(self, name, memory_regions):
        self.name = name
        self.memory_regions = co.OrderedDict(sorted(
            memory_regions.items(), key=lambda r: (r[1].origin, r[0])))

        regions = list(self.memory_regions.items())
        for i, (aname, a) in enumerate(regions):
            for bname, b in regions[i+1:]:
                if a.overlaps(b):
                    raise ValueError("Memory %r overlaps memory %r in %r" % (
                        aname, bname, name))

    def region_for(self, addr):
        """
        Name of the memory region containing addr, or None.
        """
        for name, region in self.memory_regions.items():
            if addr in region:
                return name
        return None

def ae350_ddr():
    return LinkerScriptConfig("AE350 DDR", {
        'FLASH': MemoryRegion(0x80000000, 256*1024*1024, 'rx'),
        'DDR':   MemoryRegion(0x00000000, 128*1024*1024, 'rwx')})

def ae350_ilm():
    return LinkerScriptConfig("AE350 ILM", {
        'FLASH': MemoryRegion(0x80000000, 256*1024*1024, 'rx'),
        'ILM':   MemoryRegion(0xa0000000, 2*1024*1024, 'rwx')})

CONFIGS = co.OrderedDict([
    ('ddr', ae350_ddr),
    ('ilm', ae350_ilm),
])

def getconfig(name, layouts=None):
    """
    Look up a preset by name, falling back to layouts loaded from a
    recipe. Presets are rebuilt on each call so callers can't modify
    the shared copy.
    """
    layouts = layouts or {}
    if name in CONFIGS:
        return CONFIGS[name]()
    elif name in layouts:
        return layouts[name]
    else:
        raise ValueError("Unknown config %r, expected one of {%s}" % (
            name, ', '.join(list(CONFIGS) + list(layouts))))

def load_layouts(recipe):
    """
    Build layouts from the "layout" table of a parsed recipe.toml.
    """
    layouts = co.OrderedDict()
    for name, table in recipe.get('layout', {}).items():
        if name in CONFIGS:
            raise ValueError("Layout %r shadows a built-in config" % name)
        if not isinstance(table, dict) or not table.get('memory'):
            raise ValueError("Layout %r has no memory regions" % name)
        layouts[name] = LinkerScriptConfig(
            table.get('name', name),
            {memname: MemoryRegion(*MemoryRegion.parsememory(desc))
                for memname, desc in table['memory'].items()})
    return layouts

# Minimal layout used when a build can't parse its SAG file
FALLBACK = """\
/* Fallback memory layout for AE350 DDR mode */
MEMORY
{
    FLASH (rx)  : ORIGIN = 0x80000000, LENGTH = 256M
    RAM (rwx)   : ORIGIN = 0x00000000, LENGTH = 128M
}

REGION_ALIAS("REGION_TEXT", FLASH);
REGION_ALIAS("REGION_RODATA", FLASH);
REGION_ALIAS("REGION_DATA", RAM);
REGION_ALIAS("REGION_BSS", RAM);
REGION_ALIAS("REGION_HEAP", RAM);
REGION_ALIAS("REGION_STACK", RAM);

_stack_start = ORIGIN(RAM) + LENGTH(RAM);
"""
