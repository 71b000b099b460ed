"""Paper sizes and the number of characters per line they take."""

# Paper name -> characters per line at the printer's default font
papers = {
    "58mm": 32,
    "80mm": 42,
    "80mm-wide": 48,
}

default_paper = "80mm"


def width_for_paper(paper):
    """Characters per line for a named paper size.

    Raises ValueError for paper sizes we don't know about.
    """
    try:
        return papers[paper]
    except KeyError:
        raise ValueError(
            f"Unknown paper size '{paper}'; expected one of "
            f"{', '.join(papers)}") from None
