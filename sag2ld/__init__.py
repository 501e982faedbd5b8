from .address import Address
from .errors import SagError, IoError, ParseError, InvalidAddress
from .sag import Addr, LoadAddr, Section, Stack, Region, Block, SagFile
from .parser import parse, parse_file
from .layout import (MemoryRegion, LinkerScriptConfig, CONFIGS,
    getconfig, ae350_ddr, ae350_ilm)
from .outputs.ld import generate, expand_pattern, format_size
