from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Optional

import chex
import jax
import jax.numpy as jnp

from hanoix.core.puzzle_state import FieldDescriptor, PuzzleState, state_dataclass


class Puzzle(ABC):
    """Abstract base class for hanoix puzzle environments.

    A puzzle is a set of pure functions over immutable JAX states. Every
    concrete subclass must:

    1. Set ``action_size`` (number of possible actions).
    2. Implement :meth:`define_state_class` to return a ``@state_dataclass``-decorated class.
    3. Implement :meth:`get_actions`, :meth:`is_solved`, :meth:`get_solve_config`,
       :meth:`get_initial_state` and :meth:`get_string_parser`.

    The base class handles JIT compilation of the transition functions and
    provides batched, neighbour and inverse-neighbour logic on top of
    :meth:`get_actions`.

    Attributes:
        action_size: Number of discrete actions available in this puzzle.
        State: The ``@state_dataclass`` class representing states (set during ``__init__``).
        SolveConfig: The ``@state_dataclass`` class representing goal configurations
            (set during ``__init__``).
    """

    action_size: int = None

    @property
    def inverse_action_map(self) -> Optional[jnp.ndarray]:
        """
        Returns an array mapping each action to its inverse, or None if not defined.
        `map[i]` is the action that undoes action `i`. This is used by
        `get_inverse_neighbours` to compute predecessor states of reversible puzzles.
        """
        return None

    @property
    def is_reversible(self) -> bool:
        """True when every action can be undone through `inverse_action_map`."""
        return self.inverse_action_map is not None

    class State(PuzzleState):
        pass

    class SolveConfig(PuzzleState):
        pass

    def define_solve_config_class(self) -> PuzzleState:
        """Return the ``@state_dataclass`` class used for the goal configuration.

        The default implementation creates a ``SolveConfig`` with a single
        ``TargetState`` field.

        Returns:
            A ``@state_dataclass`` class describing the solve configuration.
        """

        @state_dataclass
        class SolveConfig:
            TargetState: FieldDescriptor.scalar(dtype=self.State)

            def __str__(self, **kwargs):
                return self.TargetState.str(**kwargs)

        return SolveConfig

    @abstractmethod
    def define_state_class(self) -> PuzzleState:
        """Return the ``@state_dataclass`` class used for puzzle states.

        Returns:
            A ``@state_dataclass`` class describing the puzzle state.
        """
        pass

    @property
    def has_target(self) -> bool:
        """Whether the solve configuration carries a target state."""
        return "TargetState" in self.SolveConfig.__annotations__.keys()

    @property
    def only_target(self) -> bool:
        """Whether the solve configuration is nothing but a target state."""
        return self.has_target and len(self.SolveConfig.__annotations__.keys()) == 1

    def __init__(self, **kwargs):
        """Initialise the puzzle.

        Subclass constructors **must** call ``super().__init__(**kwargs)``
        after setting ``action_size`` and any instance attributes needed by
        :meth:`define_state_class`.

        This method:

        1. Builds ``State`` and ``SolveConfig`` classes.
        2. JIT-compiles the transition functions.
        3. Validates ``action_size`` and stores the inverse-action permutation.

        Raises:
            ValueError: If ``action_size`` is still ``None`` after subclass init.
        """
        super().__init__()

        self.State = self.define_state_class()
        self.SolveConfig = self.define_solve_config_class()

        self.get_initial_state = jax.jit(self.get_initial_state)
        self.get_solve_config = jax.jit(self.get_solve_config)
        self.get_actions = jax.jit(self.get_actions)
        self.batched_get_actions = jax.jit(
            self.batched_get_actions, static_argnums=(4,)
        )
        self.get_neighbours = jax.jit(self.get_neighbours)
        self.batched_get_neighbours = jax.jit(
            self.batched_get_neighbours, static_argnums=(3,)
        )
        self.get_action_mask = jax.jit(self.get_action_mask)
        self.is_solved = jax.jit(self.is_solved)
        self.batched_is_solved = jax.jit(self.batched_is_solved, static_argnums=(2,))

        if self.action_size is None:
            raise ValueError(
                f"{self.__class__.__name__} must define `action_size` before calling Puzzle.__init__"
            )

        # The i-th inverse neighbour is neighbours[_inverse_action_permutation[i]].
        self._inverse_action_permutation = self.inverse_action_map

    def get_solve_config_string_parser(self) -> Callable:
        """Return a callable that renders a ``SolveConfig`` as a string.

        Delegates to :meth:`get_string_parser` on ``solve_config.TargetState``.
        """
        assert self.only_target, (
            "You should redefine this function, because this function is only for target state"
            f"has_target: {self.has_target}, only_target: {self.only_target}"
        )
        stringparser_state = self.get_string_parser()

        def stringparser(solve_config: "Puzzle.SolveConfig") -> str:
            return stringparser_state(solve_config.TargetState)

        return stringparser

    @abstractmethod
    def get_string_parser(self) -> Callable:
        """Return a callable that renders a ``State`` as a human-readable string.

        Returns:
            A function ``(state: State, **kwargs) -> str``.
        """
        pass

    @abstractmethod
    def get_solve_config(self) -> SolveConfig:
        """Build and return the goal configuration."""
        pass

    @abstractmethod
    def get_initial_state(self, solve_config: SolveConfig) -> State:
        """Build and return the starting state for a given goal."""
        pass

    def get_inits(self) -> tuple[SolveConfig, State]:
        """Convenience method returning ``(solve_config, initial_state)``."""
        solve_config = self.get_solve_config()
        return solve_config, self.get_initial_state(solve_config)

    def batched_get_actions(
        self,
        solve_configs: SolveConfig,
        states: State,
        actions: chex.Array,
        filleds: bool = True,
        multi_solve_config: bool = False,
    ) -> tuple[State, chex.Array]:
        """Vectorised version of :meth:`get_actions`.

        Args:
            solve_configs: Solve configurations, single or batched.
            states: Batch of states with leading batch dimension.
            actions: Batch of action indices.
            filleds: Whether to fill invalid moves (broadcast scalar or batch).
            multi_solve_config: If ``True``, ``solve_configs`` has the same
                batch dimension as ``states``; otherwise a single config is
                broadcast.

        Returns:
            ``(next_states, costs)`` with shapes matching the input batch.
        """
        filleds = jnp.broadcast_to(jnp.asarray(filleds), actions.shape)
        if multi_solve_config:
            return jax.vmap(self.get_actions, in_axes=(0, 0, 0, 0))(
                solve_configs, states, actions, filleds
            )
        else:
            return jax.vmap(self.get_actions, in_axes=(None, 0, 0, 0))(
                solve_configs, states, actions, filleds
            )

    @abstractmethod
    def get_actions(
        self,
        solve_config: SolveConfig,
        state: State,
        action: chex.Array,
        filled: bool = True,
    ) -> tuple[State, chex.Array]:
        """Apply a single action to a state and return the result.

        Args:
            solve_config: Current goal configuration.
            state: Current puzzle state.
            action: Scalar action index.
            filled: If ``False``, the action is treated as invalid.

        Returns:
            ``(next_state, cost)`` where invalid actions return the unchanged
            state and ``cost = jnp.inf``.
        """
        pass

    def batched_get_neighbours(
        self,
        solve_configs: SolveConfig,
        states: State,
        filleds: bool = True,
        multi_solve_config: bool = False,
    ) -> tuple[State, chex.Array]:
        """Vectorised version of :meth:`get_neighbours`.

        Returns:
            ``(neighbour_states, costs)`` with shapes
            ``(action_size, batch, ...)`` and ``(action_size, batch)``.
        """
        if multi_solve_config:
            return jax.vmap(self.get_neighbours, in_axes=(0, 0, None), out_axes=(1, 1))(
                solve_configs, states, filleds
            )
        else:
            return jax.vmap(self.get_neighbours, in_axes=(None, 0, None), out_axes=(1, 1))(
                solve_configs, states, filleds
            )

    def get_neighbours(
        self, solve_config: SolveConfig, state: State, filled: bool = True
    ) -> tuple[State, chex.Array]:
        """Compute the successor state for every action.

        Equivalent to calling :meth:`get_actions` for each action index and
        stacking the results.

        Returns:
            ``(neighbour_states, costs)`` where ``neighbour_states`` has
            shape ``(action_size, ...)`` and ``costs`` has shape
            ``(action_size,)``.
        """
        actions = jnp.arange(self.action_size)
        states, costs = jax.vmap(
            self.get_actions, in_axes=(None, None, 0, None), out_axes=(0, 0)
        )(solve_config, state, actions, filled)
        return states, costs

    def get_action_mask(self, solve_config: SolveConfig, state: State) -> chex.Array:
        """Boolean array of shape ``(action_size,)``, True where the action is legal."""
        _, costs = self.get_neighbours(solve_config, state, True)
        return jnp.isfinite(costs)

    def batched_is_solved(
        self,
        solve_configs: SolveConfig,
        states: State,
        multi_solve_config: bool = False,
    ) -> bool:
        """Vectorised version of :meth:`is_solved`."""
        if multi_solve_config:
            return jax.vmap(self.is_solved, in_axes=(0, 0))(solve_configs, states)
        else:
            return jax.vmap(self.is_solved, in_axes=(None, 0))(solve_configs, states)

    @abstractmethod
    def is_solved(self, solve_config: SolveConfig, state: State) -> bool:
        """
        This function should return True if the state satisfies the goal configuration.
        """
        pass

    def action_to_string(self, action: int) -> str:
        """Return a human-readable name for the given action index."""
        return f"action {action}"

    def get_inverse_neighbours(
        self, solve_config: SolveConfig, state: State, filled: bool = True
    ) -> tuple[State, chex.Array]:
        """
        Return the states from which each action leads to `state`, with their costs.
        Uses `inverse_action_map`; raises NotImplementedError when the puzzle defines none.
        """
        if self._inverse_action_permutation is None:
            raise NotImplementedError(
                "This puzzle does not define an `inverse_action_map`. "
                "To use `get_inverse_neighbours`, you must either implement the map "
                "for a reversible puzzle or override this method for a non-reversible one."
            )

        neighbours, costs = self.get_neighbours(solve_config, state, filled)
        permuted_neighbours = neighbours[self._inverse_action_permutation]
        permuted_costs = costs[self._inverse_action_permutation]

        return permuted_neighbours, permuted_costs

    def __repr__(self):
        state_fields = list(self.State.__annotations__.keys())
        solve_config_fields = list(self.SolveConfig.__annotations__.keys())
        return (
            f"Puzzle({self.__class__.__name__}, "
            f"action_size={self.action_size}, "
            f"state_fields={state_fields}, "
            f"solve_config_fields={solve_config_fields})"
        )
