"""Word-budget fitting for text sent to the model.

Budgets are counted in whitespace-separated words. This approximates the
model's input limit; it is not a token count.
"""

import math

from github_weekly_report.models import TextBudget


def allocate(
    primary_text: str,
    secondary_text: str,
    total_budget: int,
    split_ratio: float,
) -> tuple[str, str]:
    """Fit two text blocks into `total_budget` words.

    The primary block is privileged up to `floor(total_budget * split_ratio)`
    words. When it is longer than that it is cut to the cap and the secondary
    block is left alone, so the pair can still exceed the budget. Otherwise the
    secondary block keeps only as many leading words as the primary leaves free.

    Blocks that are not truncated are returned unchanged.
    """
    budget = TextBudget(total_budget, split_ratio)
    primary = primary_text.split()
    secondary = secondary_text.split()

    if len(primary) + len(secondary) <= budget.max_units:
        return primary_text, secondary_text

    primary_cap = math.floor(budget.max_units * budget.split_ratio)
    if len(primary) > primary_cap:
        return " ".join(primary[:primary_cap]), secondary_text

    secondary_cap = budget.max_units - len(primary)
    return primary_text, " ".join(secondary[:secondary_cap])


def strip_quoted_blocks(text: str, quote_marker: str) -> str:
    """Drop every line between paired marker lines, and the marker lines themselves."""
    kept: list[str] = []
    inside_quote = False
    for line in text.splitlines(keepends=True):
        if quote_marker in line:
            inside_quote = not inside_quote
            continue
        if not inside_quote:
            kept.append(line)
    return "".join(kept)


def squeeze_comment(
    text: str,
    quote_marker: str,
    max_words: int,
    split_ratio: float,
) -> str:
    """Strip quoted blocks from a comment body and cap it at `max_words`.

    Over-long bodies keep their first `floor(max_words * split_ratio)` words and
    their last `max_words - head` words; the middle is dropped.
    """
    budget = TextBudget(max_words, split_ratio)
    body = strip_quoted_blocks(text, quote_marker) if quote_marker else text

    words = body.split()
    if len(words) <= budget.max_units:
        return body

    head = math.floor(budget.max_units * budget.split_ratio)
    tail = budget.max_units - head
    return " ".join(words[:head] + words[len(words) - tail :])
