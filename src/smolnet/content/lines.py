"""Line splitting for the LF-delimited text formats."""


def split_lines(body: str) -> list[str]:
    """Split on LF (or CRLF) only; other Unicode line breaks stay in the line."""
    lines = [line.removesuffix("\r") for line in body.split("\n")]
    if lines and lines[-1] == "":
        lines.pop()
    return lines
