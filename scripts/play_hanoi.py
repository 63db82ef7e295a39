"""Console front-end for the Tower of Hanoi engine.

Example::

    python -m scripts.play_hanoi --disks 4 --rods 3

Type a rod number to pick it: the first pick selects a rod, the second moves
its top disk onto the picked rod. ``m`` lists the legal moves, ``r`` starts
over with the same counts, ``q`` quits.
"""

from __future__ import annotations

import logging

import click

from hanoix.controller import SelectionController, SelectionResult


def _print_board(controller: SelectionController) -> None:
    engine = controller.engine
    click.echo(str(engine))
    selected = controller.selected_rod
    status = f"moves: {engine.moves_count}"
    if selected is not None:
        status += f"  selected: rod {selected}"
    click.echo(status)


@click.command()
@click.option("--disks", default=3, show_default=True, type=int, help="Number of disks.")
@click.option("--rods", default=3, show_default=True, type=int, help="Number of rods.")
@click.option("--verbose/--quiet", default=False, help="Log every engine move.")
def play_hanoi(disks: int, rods: int, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        controller = SelectionController(disks, rods)
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc

    _print_board(controller)
    while True:
        command = click.prompt("rod / m / r / q", default="", show_default=False).strip().lower()
        if command == "q":
            break
        if command == "r":
            controller.reset()
            _print_board(controller)
            continue
        if command == "m":
            moves = controller.engine.get_possible_moves()
            click.echo(", ".join(f"{src}→{dst}" for src, dst in moves) or "no legal moves")
            continue
        try:
            rod_index = int(command)
            result = controller.select(rod_index)
        except (ValueError, IndexError):
            click.echo(f"Enter a rod number between 0 and {controller.engine.get_rods_count() - 1}")
            continue

        if result is SelectionResult.REJECTED:
            click.echo("Illegal move")
        elif result is SelectionResult.IGNORED:
            click.echo(f"Rod {rod_index} is empty")
        _print_board(controller)
        if result is SelectionResult.MOVED and controller.engine.is_game_completed():
            click.echo(f"Solved in {controller.engine.moves_count} moves!")


if __name__ == "__main__":
    play_hanoi()
