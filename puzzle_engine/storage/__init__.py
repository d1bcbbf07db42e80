"""SQLite-backed world store.

Data layout:
  data/
    engine.db            One SQLite database (WAL mode) holding every story
      stories            Title, verbatim seed JSON, starting room
      rooms              Per-story rooms with their authored hidden exits
      room_discovered_exits  Append-only (room, direction) set
      game_objects       Objects in rooms; room_id NULL = held by the player
      player_abilities   Skills with levels, unique per story
      story_facts        Facts, secret until revealed
      dilemmas           Moral dilemmas, latched when triggered
      puzzles            Objectives with status / discovery / reward
      puzzle_steps       Ordered steps with requirement JSON
      puzzle_links       Directed puzzle chains (sequential gates activation)
    config.json          Engine settings (exit synonyms, reward defaults)

Every state transition is one conditional UPDATE (or INSERT OR IGNORE) whose
WHERE clause names the expected prior state; the returned bool says whether
this caller won. Any sqlite3 error rolls back its transaction and surfaces
as StorageError.

Story ids follow the slug rules: title → Unicode normalize → strip
non-ASCII → lowercase → replace non-alnum runs with hyphen → strip
leading/trailing hyphens, then -2, -3, ... on collision.

Config: get_config() returns defaults merged with stored values.
update_config() applies partial updates: exit_synonyms replaced wholesale,
scalars overwritten.
"""

# Re-export all public symbols so `from puzzle_engine import storage` keeps working.

from .core import (  # noqa: F401
    StorageError,
    data_dir,
    db_path,
    init_storage,
    slugify,
)

from .stories import (  # noqa: F401
    create_story,
    delete_story,
    get_story,
    get_story_seed,
    list_stories,
    story_summary,
)

from .rooms import (  # noqa: F401
    add_discovered_exit,
    find_room_by_name,
    get_room,
    list_rooms,
)

from .puzzles import (  # noqa: F401
    activate_puzzle,
    complete_puzzle,
    complete_step,
    count_incomplete_steps,
    count_puzzles,
    discover_and_activate_puzzle,
    discover_puzzle,
    fail_puzzle,
    find_puzzle_by_name,
    get_current_step,
    get_puzzle,
    get_step,
    list_links,
    list_puzzles,
)

from .objects import (  # noqa: F401
    create_object,
    get_inventory,
    list_objects,
)

from .abilities import (  # noqa: F401
    boost_ability,
    get_ability,
    list_abilities,
)

from .facts import (  # noqa: F401
    list_facts,
    reveal_secret_facts,
)

from .dilemmas import (  # noqa: F401
    get_dilemma,
    list_dilemmas,
    trigger_dilemma,
)

from .config import (  # noqa: F401
    get_config,
    update_config,
)
