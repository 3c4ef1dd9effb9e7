"""
Error reporting for the Monkey parser with source positions and context
Pure functional style - no classes except for the exception front ends raise
"""

from typing import List, Optional, Dict
from pyparsing import col, lineno, line


# ============================================================================
# DATA STRUCTURES (Immutable Dictionaries)
# ============================================================================

def make_parse_error(
    message: str,
    location: int,
    line: int,
    column: int,
    got: Optional[str] = None,
    context: Optional[str] = None
) -> Dict:
    """Create an immutable parse error structure"""
    return {
        'message': message,
        'location': location,
        'line': line,
        'column': column,
        'got': got,
        'context': context,
    }


def format_parse_error(error: Dict) -> str:
    """Format parse error as string"""
    error_msg = f"Parse error at line {error['line']}, column {error['column']}:\n"
    error_msg += f"  {error['message']}\n"

    if error['got']:
        error_msg += f"  Got: {error['got']}\n"

    if error['context']:
        error_msg += f"{error['context']}\n"

    return error_msg


# ============================================================================
# PURE FUNCTIONS
# ============================================================================

def source_position(source_text: str, location: int) -> tuple:
    """1-based (line, column) of a character offset"""
    return lineno(location, source_text), col(location, source_text)


def describe_position(source_text: str, location: int) -> str:
    """Position suffix appended to parser messages"""
    line_num, col_num = source_position(source_text, location)
    return f"(line {line_num}, column {col_num})"


def get_context_lines(source_text: str, line_num: int, col_num: int, context_lines: int = 2) -> str:
    """Get context lines around the error"""
    lines = source_text.split('\n')
    start_line = max(0, line_num - context_lines - 1)
    end_line = min(len(lines), line_num + context_lines)

    context_parts = []
    for i in range(start_line, end_line):
        line_prefix = f"{i+1:4d}: "
        context_parts.append(f"{line_prefix}{lines[i]}")
        if i == line_num - 1:
            context_parts.append(f"{'':6}{' ' * (col_num - 1)}^ Error here")

    return '\n'.join(context_parts)


def extract_got(source_text: str, location: int) -> str:
    """Extract what was actually found at the error location"""
    if location >= len(source_text):
        return "end of input"

    error_line = line(location, source_text)
    col_num = col(location, source_text)
    got_text = error_line[col_num - 1:col_num + 9].strip()
    if got_text:
        return f"'{got_text}'"
    return "end of line"


def build_parse_error(message: str, source_text: str, location: int) -> Dict:
    """Build the full error record for a message raised at an offset"""
    line_num, col_num = source_position(source_text, location)
    return make_parse_error(
        message=message,
        location=location,
        line=line_num,
        column=col_num,
        got=extract_got(source_text, location),
        context=get_context_lines(source_text, line_num, col_num)
    )


# ============================================================================
# EXCEPTIONS
# ============================================================================

class MonkeyParseError(Exception):
    """Raised by front ends that refuse to run a program with syntax errors"""
    def __init__(self, errors: List[Dict], filename: str = "<input>"):
        self.errors = errors
        self.filename = filename
        super().__init__(self._format_errors())

    def _format_errors(self) -> str:
        header = f"{len(self.errors)} parse error(s) in {self.filename}"
        return "\n".join([header] + [format_parse_error(e) for e in self.errors])
