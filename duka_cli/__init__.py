"""Terminal and admin tooling for the Duka RDBMS engine."""
