"""Password hashing, JWT issuing and the bearer-token dependencies."""
