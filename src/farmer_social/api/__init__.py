"""HTTP layer of the Farmer Social API."""
