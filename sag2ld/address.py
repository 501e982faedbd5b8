import re
from .errors import InvalidAddress

MASK = (1 << 64) - 1

class Address:
    """
    Either an absolute address or an offset relative to some base that
    isn't known until generation.
    """
    def __init__(self, value, relative=False):
        self.value = value
        self.relative = relative

    @staticmethod
    def parse(s):
        s = s.strip()
        if s.startswith('+') or s.startswith('-'):
            m = re.match(r'^(\+\s*|-)([0-9]+)$', s)
            if not m:
                raise InvalidAddress(s)
            value = int(m.group(2), 10) * (-1 if m.group(1) == '-' else 1)
            if not -(1 << 63) <= value < (1 << 63):
                raise InvalidAddress(s)
            return Address.rel(value)

        if s.startswith('0x') or s.startswith('0X'):
            m = re.match(r'^[0-9a-fA-F]+$', s[2:])
            value = m and int(s[2:], 16)
        else:
            m = re.match(r'^[0-9]+$', s)
            value = m and int(s, 10)
        if not m or value > MASK:
            raise InvalidAddress(s)
        return Address.abs(value)

    @staticmethod
    def abs(value):
        return Address(value)

    @staticmethod
    def rel(offset):
        return Address(offset, relative=True)

    def resolve(self, base):
        """
        Absolute addresses ignore the base, relative ones are added to
        it with 64-bit wraparound.
        """
        if self.relative:
            return (base + self.value) & MASK
        else:
            return self.value

    def __eq__(self, other):
        if not isinstance(other, Address):
            return NotImplemented
        return (self.relative, self.value) == (other.relative, other.value)

    def __hash__(self):
        return hash((self.relative, self.value))

    def __str__(self):
        if self.relative:
            return '%+d' % self.value
        else:
            return '%#010x' % self.value

    def __repr__(self):
        return '%s(%s)' % (
            'Relative' if self.relative else 'Absolute', self)
