#
# SAG parser tests
#

import pytest
from sag2ld import (parse, parse_file, Address, Addr, LoadAddr, Section,
    Stack, Region, Block, SagFile, ParseError, InvalidAddress, IoError)

SIMPLE = """
USER_SECTIONS .bootloader

HEAD 0x00000000
{
    BOOTLOADER 0x80000000
    {
        ADDR __flash_start
        * KEEP ( .bootloader )
    }
}
"""

def test_simple():
    sag = parse(SIMPLE)
    assert sag.user_sections == ['.bootloader']
    assert len(sag.blocks) == 1
    block = sag.blocks[0]
    assert block.block_type == 'HEAD'
    assert block.lma == Address.abs(0)
    assert block.alignment is None
    assert block.regions == [
        Region('BOOTLOADER', Address.abs(0x80000000), [
            Addr('__flash_start', False),
            Section('.bootloader', True)])]

def test_empty():
    assert parse('') == SagFile([], [])
    assert parse('; nothing here\n\n   \n') == SagFile([], [])

def test_user_sections():
    sag = parse("USER_SECTIONS .a\nUSER_SECTIONS .b ; comment\n")
    assert sag.user_sections == ['.a', '.b']

def test_stray_top_level_lines():
    sag = parse("garbage\n42\nHEAD 0\n{\n}\nmore garbage\n")
    assert sag.blocks == [Block('HEAD', Address.abs(0), None, [])]

@pytest.mark.parametrize('block_type',
    ['HEAD', 'MEM', 'LDSECTION', 'EXEC', 'DATA'])
def test_block_types(block_type):
    sag = parse("%s +16\n{\n}\n" % block_type)
    assert sag.blocks[0].block_type == block_type
    assert sag.blocks[0].lma == Address.rel(16)

def test_block_brace_on_later_line():
    sag = parse("MEM 0x100\n\n; open\n{\n}\n")
    assert sag.blocks[0].lma == Address.abs(0x100)

def test_alignment():
    sag = parse("MEM +0 ALIGN 4096\n{\n}\nEXEC +0 align 16\n{\n}\n")
    assert sag.blocks[0].alignment == 4096
    assert sag.blocks[1].alignment == 16

def test_alignment_needs_value():
    # a lone ALIGN is ignored
    sag = parse("MEM 0 ALIGN\n{\n}\n")
    assert sag.blocks[0].alignment is None

def test_invalid_alignment():
    with pytest.raises(ParseError) as e:
        parse("; header\nHEAD 0 ALIGN abc\n{\n    R 0x0\n    {\n    }\n}\n")
    assert e.value.line == 2
    assert 'alignment' in e.value.message

@pytest.mark.parametrize('align', ['0', '3', '100', '0x10',
    str(1 << 64), '1180591620717411303424'])
def test_alignment_not_power_of_two(align):
    with pytest.raises(ParseError) as e:
        parse("\nMEM 0 ALIGN %s\n{\n}\n" % align)
    assert e.value.line == 2

def test_line_breaks():
    # form feeds and friends are not line breaks
    with pytest.raises(ParseError) as e:
        parse("; page\x0cbreak\nMEM 0 ALIGN 3\n{\n}\n")
    assert e.value.line == 2

    with pytest.raises(ParseError) as e:
        parse("HEAD 0\r\n{\r\n    R 0x0\r\n    ADDR x\r\n}\r\n")
    assert e.value.line == 4

    assert parse("HEAD 0\r\n{\r\n}\r\n") == parse("HEAD 0\n{\n}\n")

def test_missing_address():
    with pytest.raises(ParseError) as e:
        parse("HEAD\n{\n}\n")
    assert e.value.line == 1

def test_invalid_block_address():
    with pytest.raises(InvalidAddress) as e:
        parse("HEAD 0xzz\n{\n}\n")
    assert e.value.text == '0xzz'

def test_missing_block_brace():
    with pytest.raises(ParseError) as e:
        parse("HEAD 0\nR 0x0\n")
    assert e.value.line == 2

    with pytest.raises(ParseError):
        parse("HEAD 0\n")

def test_unterminated_block():
    with pytest.raises(ParseError) as e:
        parse("HEAD 0\n{\n")
    assert e.value.line == 3
    assert 'end of file' in e.value.message

def test_unterminated_region():
    with pytest.raises(ParseError) as e:
        parse("HEAD 0\n{\n    R 0x0\n    {\n        ADDR x\n")
    assert e.value.line == 6
    assert 'end of file' in e.value.message

def test_missing_region_brace():
    with pytest.raises(ParseError) as e:
        parse("HEAD 0\n{\n    R 0x0\n    ADDR x\n}\n")
    assert e.value.line == 4

def test_region_recognition():
    sag = parse("""
HEAD 0
{
    lower 0x0
    ADDR 0x0
    STACK 0x0
    NAMEONLY
    BAD address
    FOO +4
    {
    }
}
""")
    assert sag.blocks[0].regions == [Region('FOO', Address.rel(4), [])]

def test_directives():
    sag = parse("""
HEAD 0
{
    R 0x80000000
    {
        ADDR sym_a
        ADDR NEXT sym_b
        LOADADDR sym_c ; trailing comment
        LOADADDR NEXT sym_d
        STACK = 0x9FF00000
        STACK 4096
        * ( +RO )
        * KEEP ( .isr_vector, +ISR )
        something else
    }
}
""")
    assert sag.blocks[0].regions[0].directives == [
        Addr('sym_a', False),
        Addr('sym_b', True),
        LoadAddr('sym_c', False),
        LoadAddr('sym_d', True),
        Stack(0x9FF00000),
        Stack(4096),
        Section('+RO', False),
        Section('.isr_vector, +ISR', True)]

def test_malformed_section_ignored():
    sag = parse("HEAD 0\n{\nR 0\n{\n* KEEP .text\n* ) (\n* (\n}\n}\n")
    assert sag.blocks[0].regions[0].directives == []

@pytest.mark.parametrize('value', ['abc', '', '= 0xq', '=', '1.5'])
def test_invalid_stack(value):
    with pytest.raises(ParseError) as e:
        parse("HEAD 0\n{\nR 0\n{\nADDR a\nSTACK %s\n}\n}\n" % value)
    assert e.value.line == 6

def test_stack_lookup():
    sag = parse("""
HEAD 0
{
    A 0
    {
        ADDR a
    }
    B 0
    {
        STACK = 0x1000
    }
}
EXEC +0
{
    C 0
    {
        STACK = 0x2000
    }
}
""")
    assert [r.name for r in sag.blocks[0].regions] == ['A', 'B']
    assert sag.stack() == 0x1000

def test_no_partial_result():
    text = SIMPLE + "EXEC 0 ALIGN abc\n{\n}\n"
    with pytest.raises(ParseError):
        parse(text)

def test_parse_file(tmp_path):
    path = tmp_path / 'memory.sag'
    path.write_text(SIMPLE)
    assert parse_file(str(path)) == parse(SIMPLE)

def test_parse_file_missing(tmp_path):
    with pytest.raises(IoError) as e:
        parse_file(str(tmp_path / 'missing.sag'))
    assert isinstance(e.value.__cause__, FileNotFoundError)
    assert str(e.value).startswith('IO error')

def test_error_strings():
    assert str(ParseError(3, "Expected '{'")) == (
        "Parse error at line 3: Expected '{'")
    assert str(InvalidAddress('0xq')) == "Invalid address: '0xq'"

def test_parse_file_not_utf8(tmp_path):
    path = tmp_path / 'memory.sag'
    path.write_bytes(b'HEAD 0\n{\n}\n; \xff\xfe\n')
    with pytest.raises(IoError) as e:
        parse_file(str(path))
    assert isinstance(e.value.__cause__, UnicodeDecodeError)
    assert str(e.value).startswith('IO error')
