"""Release pipeline: config, changelog, release store, dispatch."""
