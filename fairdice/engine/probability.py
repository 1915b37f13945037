"""
Pairwise win probabilities for operator decision support.
Pure functions over dice; nothing here touches match state.
"""

from tabulate import tabulate

from fairdice.engine import SELF_MATCH_PROBABILITY
from fairdice.engine.state import Die

TABLE_TITLE = "Probability of the win for the user"
CORNER_LABEL = "User dice v"


def compute_pairwise(die_a: Die, die_b: Die) -> float:
    """Chance that a uniform face of die_a beats a uniform face of die_b."""
    wins = sum(1 for a in die_a.faces for b in die_b.faces if a > b)
    return wins / (len(die_a.faces) * len(die_b.faces))


def format_probability(probability: float) -> str:
    return f"{probability:.4f}"


def render_matrix(dice: list[Die]) -> list[list[str]]:
    """
    Square grid of win chances; row die against column die.
    The diagonal holds a fixed reference value, not a self-comparison.
    """
    return [
        [
            SELF_MATCH_PROBABILITY if i == j else format_probability(compute_pairwise(row_die, col_die))
            for j, col_die in enumerate(dice)
        ]
        for i, row_die in enumerate(dice)
    ]


def render_table(dice: list[Die]) -> str:
    """Grid table of render_matrix under its title, for console help screens."""
    matrix = render_matrix(dice)
    header = [CORNER_LABEL] + [str(d) for d in dice]
    rows = [
        [str(dice[i])] + [f"- ({cell})" if i == j else cell for j, cell in enumerate(row)]
        for i, row in enumerate(matrix)
    ]
    # keep "1.0000" and die texts verbatim
    grid = tabulate(rows, headers=header, tablefmt="grid", disable_numparse=True)
    return f"{TABLE_TITLE}\n{grid}"
