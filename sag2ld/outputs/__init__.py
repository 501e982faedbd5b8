import io
import collections as co

OUTPUTS = co.OrderedDict()
def output(cls):
    assert cls.__argname__ not in OUTPUTS
    OUTPUTS[cls.__argname__] = cls
    return cls

class OutputBlob(io.StringIO):
    """
    StringIO with indentation and a stack of attributes that can be
    referenced as %(name)s in formatted writes.
    """
    def __init__(self, *args, **kwargs):
        super().__init__(*args)
        self._attrs = []
        self._needindent = True
        self.pushattrs(**kwargs)

    def writef(self, _fmt, **kwargs):
        _fmt = _fmt % self.attrs(**kwargs)
        for c in _fmt:
            if c == '\n':
                self._needindent = True
            elif self._needindent:
                self._needindent = False
                super().write(self.get('indent', 0)*' ')
            super().write(c)

    def printf(self, *args, **kwargs):
        for arg in args:
            self.writef(str(arg), **kwargs)
        self.writef('\n')

    def pushattrs(self, **kwargs):
        self._attrs.append(kwargs)

        class context:
            def __enter__(_):
                return self
            def __exit__(*_):
                self.popattrs()
        return context()

    def popattrs(self):
        return self._attrs.pop()

    def indent(self, indent=4):
        """ alias for pushindent """
        return self.pushindent(indent)

    def pushindent(self, indent=4):
        return self.pushattrs(indent=self.get('indent', 0) + indent)

    def __getitem__(self, key):
        for a in reversed(self._attrs):
            if key in a:
                return a[key]
        raise KeyError(key)

    def get(self, key, default=None):
        try:
            return self[key]
        except KeyError:
            return default

    def attrs(self, **kwargs):
        attrs = {}
        for a in self._attrs:
            attrs.update(a)
        attrs.update(kwargs)
        return attrs

    def __str__(self):
        return self.getvalue()

class Output(OutputBlob):
    """
    Base class for things that can be built from a parsed SAG file.
    """
    def __init__(self, config=None):
        super().__init__()
        self.name = self.__argname__
        self.config = config

    def build(self, sag):
        raise NotImplementedError

    def render(self, sag):
        """
        Build into a fresh buffer and return the text.
        """
        self.seek(0)
        self.truncate()
        self._needindent = True
        self.build(sag)
        return self.getvalue()

# Output class imports
# These must be imported here, since they depend on the above utilities
from .ld import LdOutput, generate
from .ast import AstOutput
