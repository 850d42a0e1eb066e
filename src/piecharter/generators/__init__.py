"""Chart description building and per-slice label layout."""
