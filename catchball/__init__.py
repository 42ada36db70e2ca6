"""
Catch the Ball
==============

Simulation core for an arcade "catch the falling object" game:

- Falling object spawning with level-based difficulty
- Constant-velocity fall and paddle collision
- Score, lives and level progression
- Tunable parameters in game_config.yaml
"""
