"""
Tactics Framework module.

Provides the game-specific battle core built on top of the engine:
- Components (positions, facing, jobs and stats)
- World (grid map, movement range, path search)
- Battle (units, abilities, CT scheduling, the GameSystem facade)
"""
