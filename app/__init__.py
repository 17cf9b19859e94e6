"""teamsync backend."""
