"""
Errors raised while reading or parsing a SAG file. Generation never
fails, so everything here comes out of the parser.
"""

class SagError(Exception):
    pass

class IoError(SagError):
    """
    Failure reading the SAG source, the original OSError is chained.
    """
    def __init__(self, path, error):
        super().__init__("IO error: %s" % error)
        self.path = path
        self.error = error

class ParseError(SagError):
    def __init__(self, line, message):
        super().__init__("Parse error at line %d: %s" % (line, message))
        self.line = line
        self.message = message

class InvalidAddress(SagError):
    def __init__(self, text):
        super().__init__("Invalid address: %r" % text)
        self.text = text
