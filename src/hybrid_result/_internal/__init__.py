"""Internal engine: container state, hybrid combinators and the generator interpreter."""
