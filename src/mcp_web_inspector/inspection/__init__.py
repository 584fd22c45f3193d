"""Layout and DOM inspection: ancestor diagnostics, DOM tree, box model, visibility."""
