"""Domain core: bookmark tree, outline serialization, ports."""
