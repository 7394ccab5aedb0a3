"""
Markov chains over `Distribution`.

A chain is an initial distribution plus a transition `state -> Distribution`.
The state is just the current sampled value threaded through the steps.
"""

from __future__ import annotations

from typing import Callable, TypeVar

from probmonad.distribution import Distribution

S = TypeVar("S")


def markov(
    init: Distribution[S],
    steps: int,
    transition: Callable[[S], Distribution[S]],
) -> Distribution[S]:
    """
    Distribution of the state after exactly `steps` transitions.

    Args:
        init: Distribution of the starting state.
        steps: Number of transitions; 0 returns `init`.
        transition: Maps a state to the distribution of the next state.
    """
    return init.iterate(steps, transition)


def markov_until(
    init: Distribution[S],
    stop: Callable[[S], bool],
    transition: Callable[[S], Distribution[S]],
) -> Distribution[S]:
    """
    Distribution of the first state satisfying `stop`.

    Termination is the caller's responsibility (for instance, an absorbing
    state reachable from every state). A chain that can never reach `stop`
    hangs on its first draw.
    """
    return init.iterate_until(stop, transition)
