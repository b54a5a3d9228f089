"""
Console confirmer — blocking yes/no questions on the terminal.
"""

from __future__ import annotations

import click

from javelin.adapters.base import Confirmer


def is_affirmative(answer: str) -> bool:
    """An empty answer, or one starting with "y" in any case, means proceed."""
    answer = answer.strip()
    return answer == "" or answer.lower().startswith("y")


class ConsoleConfirmer(Confirmer):
    """Reads one line per question through click.

    Pressing Enter accepts. End of input raises ``click.Abort``.
    """

    def confirm(self, prompt: str) -> bool:
        answer = click.prompt(
            f"{prompt} (Y/N)",
            default="",
            show_default=False,
            prompt_suffix=" ",
        )
        return is_affirmative(answer)
