"""Goal aggregate mutations."""
