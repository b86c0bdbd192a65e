"""Source range tracking for block line maps and inline tokens"""


class LineIndex:
    """Maps markdown-it line numbers to string offsets in a body text."""

    def __init__(self, text: str):
        self.length = len(text)
        self.starts = [0]
        for i, ch in enumerate(text):
            if ch == '\n':
                self.starts.append(i + 1)

    def offset(self, line: int) -> int:
        if line < len(self.starts):
            return self.starts[line]
        return self.length

    def span(self, line_map) -> tuple[int, int]:
        """Return (start, end) covering the lines [begin, end) of a token map."""
        begin, end = line_map
        return self.offset(begin), self.offset(end)


class InlineLocator:
    """Forward-only search for inline token text inside one block's span.

    markdown-it only maps block tokens to lines, so inline positions are
    recovered by finding each token's source text after the previous one.
    A token whose text cannot be found gets an empty range at the cursor.
    """

    def __init__(self, text: str, start: int, end: int):
        self.text = text
        self.cursor = start
        self.limit = end

    def find(self, needle: str) -> tuple[int, int]:
        if not needle:
            return self.cursor, self.cursor
        pos = self.text.find(needle, self.cursor, self.limit)
        if pos < 0:
            return self.cursor, self.cursor
        self.cursor = pos + len(needle)
        return pos, self.cursor

    def find_between(self, opener: str, closer: str) -> tuple[int, int]:
        """Locate opener, then the next closer; return the span covering both."""
        start, after = self.find(opener)
        if start == after:
            return start, after
        _, end = self.find(closer)
        return start, end

    def skip_destination(self) -> int:
        """Advance past a `(...)` link destination directly at the cursor."""
        if self.cursor >= self.limit or self.text[self.cursor] != '(':
            return self.cursor
        depth = 0
        i = self.cursor
        while i < self.limit:
            ch = self.text[i]
            if ch == '\\':
                i += 2
                continue
            if ch == '(':
                depth += 1
            elif ch == ')':
                depth -= 1
                if depth == 0:
                    self.cursor = i + 1
                    break
            i += 1
        return self.cursor
