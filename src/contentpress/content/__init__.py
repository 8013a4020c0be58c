"""MDX content discovery, parsing and compilation."""
