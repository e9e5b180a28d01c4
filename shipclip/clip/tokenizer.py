from __future__ import annotations

"""Tokenizer for tab-separated text copied out of a spreadsheet.

Spreadsheet applications put a cell in double quotes when it holds a tab,
a line break or a quote character. Inside quotes ``""`` stands for one ``"``.
A line break outside quotes ends the row; ``\\r\\n`` counts as a single break.
Malformed quoting is tolerated: whatever was accumulated at end of input is
flushed as the last row.
"""

__all__ = [
    "Row",
    "tokenize",
]

Row = list[str]

QUOTE = '"'
TAB = "\t"
LINE_BREAKS = ("\n", "\r")


def tokenize(raw: str) -> list[Row]:
    """Split a clipboard blob into rows of trimmed cells.

    Blank lines outside quotes produce no row.

    >>> tokenize('a\\tb\\r\\n"x\\ny"\\tz')
    [['a', 'b'], ['x\\ny', 'z']]
    """
    rows: list[Row] = []
    current_row: Row = []
    cell: list[str] = []
    in_quote = False

    i = 0
    length = len(raw)
    while i < length:
        char = raw[i]
        next_char = raw[i + 1] if i + 1 < length else ""

        if in_quote:
            if char == QUOTE and next_char == QUOTE:
                cell.append(QUOTE)
                i += 1
            elif char == QUOTE:
                in_quote = False
            else:
                cell.append(char)
        elif char == QUOTE:
            in_quote = True
        elif char == TAB:
            current_row.append("".join(cell).strip())
            cell = []
        elif char in LINE_BREAKS:
            # 空行 (セルも行も未確定) は無視
            if cell or current_row:
                if char == "\r" and next_char == "\n":
                    i += 1
                current_row.append("".join(cell).strip())
                rows.append(current_row)
                current_row = []
                cell = []
        else:
            cell.append(char)
        i += 1

    if cell or current_row:
        current_row.append("".join(cell).strip())
        rows.append(current_row)
    return rows
