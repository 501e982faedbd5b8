"""
Line-oriented parser for SAG files.

The parser walks the source one line at a time with a single cursor.
Top-level lines are either USER_SECTIONS entries or block headers,
block bodies contain region headers, and region bodies contain
directives. Anything it doesn't recognize is skipped, except where a
brace is required, a block header is malformed, or the input ends
inside a body.
"""

import re
from .address import Address
from .errors import ParseError, IoError, InvalidAddress
from .sag import (BLOCK_TYPES, KEYWORDS,
    Addr, LoadAddr, Section, Stack, Region, Block, SagFile)

def strip(line):
    """ drop ; comments and surrounding whitespace """
    return line.split(';', 1)[0].strip()

class Parser:
    def __init__(self, text):
        # only \n and \r\n end a line, so line numbers match editors
        self.lines = [line[:-1] if line.endswith('\r') else line
            for line in text.split('\n')]
        if self.lines and not self.lines[-1]:
            self.lines.pop()
        self.current = 0

    def line(self):
        if self.current < len(self.lines):
            return strip(self.lines[self.current])
        return None

    def advance(self):
        self.current += 1

    def lineno(self):
        return self.current + 1

    def error(self, message):
        return ParseError(self.lineno(), message)

    def skip_empty(self):
        while self.line() == '':
            self.advance()

    def expect_open(self, message="Expected '{'"):
        self.skip_empty()
        line = self.line()
        if line is None or not line.startswith('{'):
            raise self.error(message)
        self.advance()

    def parse(self):
        user_sections = []
        blocks = []

        while True:
            self.skip_empty()
            line = self.line()
            if line is None:
                break

            if line.startswith('USER_SECTIONS'):
                user_sections.append(line[len('USER_SECTIONS'):].strip())
                self.advance()
                continue

            block = self.parse_block(line)
            if block is not None:
                blocks.append(block)
                continue

            # stray top-level tokens are ignored
            self.advance()

        return SagFile(user_sections, blocks)

    def parse_block(self, line):
        for block_type in BLOCK_TYPES:
            if line.startswith(block_type):
                break
        else:
            return None

        parts = line[len(block_type):].split()
        if not parts:
            raise self.error("Expected address after block type")
        lma = Address.parse(parts[0])

        alignment = None
        if len(parts) >= 3 and parts[1].upper() == 'ALIGN':
            if not re.match(r'^[0-9]+$', parts[2]):
                raise self.error("Invalid alignment value %r" % parts[2])
            alignment = int(parts[2], 10)
            if alignment >= 1 << 64:
                raise self.error("Invalid alignment value %r" % parts[2])
            # rounding is done with a mask
            if alignment == 0 or alignment & (alignment - 1):
                raise self.error(
                    "Alignment %d is not a power of two" % alignment)

        self.advance()
        self.expect_open()

        regions = []
        while True:
            self.skip_empty()
            line = self.line()
            if line is None:
                raise self.error("Unexpected end of file, expected '}'")
            if line.startswith('}'):
                self.advance()
                break

            region = self.parse_region(line)
            if region is not None:
                regions.append(region)
            else:
                self.advance()

        return Block(block_type, lma, alignment, regions)

    def parse_region(self, line):
        # NAME ADDRESS, where NAME starts uppercase and isn't a keyword
        parts = line.split()
        if len(parts) < 2:
            return None
        name = parts[0]
        if not ('A' <= name[0] <= 'Z') or name in KEYWORDS:
            return None
        try:
            vma = Address.parse(parts[1])
        except InvalidAddress:
            return None

        self.advance()
        self.expect_open("Expected '{' after region")

        directives = []
        while True:
            self.skip_empty()
            line = self.line()
            if line is None:
                raise self.error("Unexpected end of file in region")
            if line.startswith('}'):
                self.advance()
                break

            directive = self.parse_directive(line)
            if directive is not None:
                directives.append(directive)
            self.advance()

        return Region(name, vma, directives)

    def parse_directive(self, line):
        for keyword, Directive in [('ADDR', Addr), ('LOADADDR', LoadAddr)]:
            if line.startswith(keyword):
                rest = line[len(keyword):].strip()
                isnext = rest.startswith('NEXT')
                if isnext:
                    rest = rest[len('NEXT'):].strip()
                return Directive(rest, isnext)

        if line.startswith('STACK'):
            rest = line[len('STACK'):].strip()
            if rest.startswith('='):
                rest = rest[1:].strip()
            m = re.match(r'^(?:0[xX]([0-9a-fA-F]+)|([0-9]+))$', rest)
            if not m:
                raise self.error("Invalid stack address %r" % rest)
            addr = int(m.group(1), 16) if m.group(1) else int(m.group(2))
            if addr >= 1 << 64:
                raise self.error("Invalid stack address %r" % rest)
            return Stack(addr)

        if line.startswith('*'):
            rest = line[1:].strip()
            keep = rest.startswith('KEEP')
            if keep:
                rest = rest[len('KEEP'):].strip()
            start, end = rest.find('('), rest.rfind(')')
            if start != -1 and end > start:
                return Section(rest[start+1:end].strip(), keep)

        return None

def parse(text):
    """
    Parse SAG source text into a SagFile. Raises ParseError or
    InvalidAddress on the first problem found.
    """
    return Parser(text).parse()

def parse_file(path):
    try:
        with open(path, encoding='utf-8') as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise IoError(path, e) from e
    return parse(text)
