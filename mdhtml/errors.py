from typing import Optional


class CompileError(ValueError):
    """
    A fatal error while compiling one source file.

    Lower layers only know line numbers; the per-file compiler binds the
    path with `with_path` before the error reaches the site builder.
    """

    category = 'compile'

    def __init__(self, message: str, line: Optional[int] = None, path: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.path = path

    def with_path(self, path) -> 'CompileError':
        self.path = str(path)
        return self

    def __str__(self) -> str:
        where = []
        if self.path:
            where.append(self.path)
        if self.line is not None:
            where.append(f"Line {self.line}")
        location = f" ({', '.join(where)})" if where else ''
        return f"Mdhtml Compile Error{location}: {self.message}"


class SourceIOError(CompileError):
    """Missing or unreadable file or directory."""
    category = 'io'


class DirectiveError(CompileError):
    """Malformed iteration directive."""
    category = 'directive'


class ParseError(CompileError):
    """Line cannot be placed in the element tree."""
    category = 'parse'
