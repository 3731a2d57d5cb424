"""Map type-checker results for rewritten components back onto the component source."""
