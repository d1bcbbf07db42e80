"""Puzzle progression engine.

Executes one player turn against the stored world:
  1. Room entry - entry-triggered puzzles of the room are discovered and
     activated (only when the player just walked in).
  2. Hidden exits - connections whose unlock phrase the action meets are
     added to the room's discovered exits.
  3. Item discovery - each newly acquired item discovers puzzles that need
     something like it.
  4. Action discovery - the action discovers puzzles that ask for it.
  5. Step completion - every active puzzle whose current step is satisfied
     advances one step; a finished puzzle completes, pays out its reward and
     activates its sequential successors.

Puzzle states:
  pending --(chain | room entry | manual)--> active --(all steps)--> completed
                                             active --(manual)--> failed
  completed and failed are terminal; is_discovered only ever goes true.

Narratives (appended in stage order):
  [New objective: <name>]                  room entry, chain activation
  [Objective discovered: <name>]           item or action discovery
  [You discovered a hidden passage to the <direction>!]
  [Objective progress: <step description>]
  [Objective complete: <name>]

All state lives in the store; every transition is a compare-and-set there,
so a caller that loses a race does nothing and says nothing.
"""

from .discovery import (  # noqa: F401
    discover_from_action,
    discover_from_item,
    discover_on_room_entry,
)
from .exits import discover_hidden_exits  # noqa: F401
from .objectives import (  # noqa: F401
    activate_puzzle,
    active_objective_count,
    completed_objective_count,
    current_step,
    discover_puzzle,
    fail_puzzle,
    find_puzzle_by_name,
    list_objectives,
)
from .rewards import apply_reward  # noqa: F401
from .steps import activate_linked, complete_eligible_steps  # noqa: F401
from .turn import run_turn  # noqa: F401
