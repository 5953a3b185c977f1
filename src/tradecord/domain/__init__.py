"""Pure game rules: generation, breeding, leveling, evolution, and progression."""
