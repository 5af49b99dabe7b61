"""Ring layout — geometric feasibility engine for concentric bead rings.

Packages:

  catalog  — bead shapes loaded from catalog/items/*.json
  engine   — hitboxes, collision, placement, radius solver, ring grid
  web      — stateless FastAPI host around the engine operations
"""
